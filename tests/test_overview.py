import json

import pytest

from kubeboard.overview import find_ingress, find_service, render_deployment_json, render_overview


def _deployment(name, labels):
    return {
        "metadata": {"name": name, "namespace": "default"},
        "spec": {"selector": {"matchLabels": labels}},
    }


def _pod(name, labels):
    return {"metadata": {"name": name, "labels": labels}}


def _service(name, selector):
    return {"metadata": {"name": name}, "spec": {"selector": selector}}


def _ingress(name, *service_names, http=True):
    rule = {"http": {"paths": [{"backend": {"service": {"name": s}}} for s in service_names]}} if http else {}
    return {"metadata": {"name": name}, "spec": {"rules": [rule]}}


@pytest.fixture
def cluster():
    return {
        "deployments": [_deployment("web", {"app": "web"})],
        "pods": [_pod("p1", {"app": "web"}), _pod("p2", {"app": "web"}), _pod("p3", {"app": "db"})],
        "services": [_service("svc-db", {"app": "db"}), _service("svc-web", {"app": "web"})],
        "ingresses": [_ingress("ing-none", http=False), _ingress("ing-web", "svc-web")],
    }


def _json_payload(html):
    return json.loads(html.split('padding:1em;">', 1)[1].rsplit("</pre>", 1)[0])


def test_find_service_first_match(cluster):
    assert find_service({"app": "web"}, cluster["services"])["metadata"]["name"] == "svc-web"
    assert find_service({"app": "cache"}, cluster["services"]) is None


def test_find_ingress_skips_rules_without_http(cluster):
    assert find_ingress("svc-web", cluster["ingresses"])["metadata"]["name"] == "ing-web"
    assert find_ingress("svc-db", cluster["ingresses"]) is None


def test_find_ingress_returns_first_of_several():
    ingresses = [_ingress("a", "svc"), _ingress("b", "svc")]
    assert find_ingress("svc", ingresses)["metadata"]["name"] == "a"


def test_render_overview_row(cluster):
    html = render_overview(cluster["deployments"], cluster["services"], cluster["ingresses"], cluster["pods"])
    assert html.startswith("<table>\n<thead><tr>\n<th>Deployment</th>")
    assert html.endswith("</tbody></table>")
    assert "<tr><td>web</td><td>2</td><td>svc-web</td><td>ing-web</td><td>default</td></tr>" in html


def test_render_overview_without_service():
    html = render_overview([_deployment("lonely", {"app": "x"})], [], [], [])
    assert "<tr><td>lonely</td><td>0</td><td></td><td></td><td>default</td></tr>" in html


def test_render_overview_one_row_per_deployment(cluster):
    deployments = [_deployment("a", {"app": "web"}), _deployment("b", {"app": "db"})]
    html = render_overview(deployments, cluster["services"], cluster["ingresses"], cluster["pods"])
    assert html.count("<tr><td>") == len(deployments)


def test_render_deployment_json_items(cluster):
    html = render_deployment_json(cluster["deployments"], cluster["services"], cluster["ingresses"], cluster["pods"])
    assert html.startswith("<h2>📦 Deployment + Resources (JSON)</h2>")
    payload = _json_payload(html)
    item = payload[0]
    assert list(item) == ["deployment", "ingress", "pods", "service"]
    assert item["deployment"] == cluster["deployments"][0]
    assert [p["metadata"]["name"] for p in item["pods"]] == ["p1", "p2"]
    assert item["service"]["metadata"]["name"] == "svc-web"
    assert item["ingress"]["metadata"]["name"] == "ing-web"


def test_render_deployment_json_picks_last_ingress(cluster):
    ingresses = [_ingress("first", "svc-web"), _ingress("second", "svc-web")]
    payload = _json_payload(render_deployment_json(cluster["deployments"], cluster["services"], ingresses, []))
    assert payload[0]["ingress"]["metadata"]["name"] == "second"
    assert payload[0]["pods"] is None


def test_render_deployment_json_empty_is_null():
    assert _json_payload(render_deployment_json([], [], [], [])) is None


def test_render_deployment_json_escapes_markup():
    deployment = _deployment("web", {"app": "web"})
    deployment["metadata"]["annotations"] = {"note": "<b>&"}
    html = render_deployment_json([deployment], [], [], [])
    assert "<b>" not in html
    assert _json_payload(html)[0]["deployment"]["metadata"]["annotations"]["note"] == "<b>&"