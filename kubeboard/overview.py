"""Tables relating deployments to their pods, services and ingresses."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from html import escape
from typing import Any

from kubeboard.labels import match_labels

_TABLE_HEAD = """<table>
<thead><tr>
<th>Deployment</th>
<th>Pods</th>
<th>Service</th>
<th>Ingress</th>
<th>Namespace</th>
</tr></thead>
<tbody>"""

_JSON_HEAD = '<h2>📦 Deployment + Resources (JSON)</h2><pre style="background:#f0f0f0;padding:1em;">'


def _meta(obj: Mapping[str, Any], key: str) -> Any:
    return (obj.get("metadata") or {}).get(key)


def _name(obj: Mapping[str, Any]) -> str:
    return _meta(obj, "name") or ""


def _deployment_selector(deployment: Mapping[str, Any]) -> dict:
    selector = (deployment.get("spec") or {}).get("selector") or {}
    return selector.get("matchLabels") or {}


def _matching_pods(selector: Mapping[str, str], pods: Iterable[Mapping]) -> list:
    return [p for p in pods if match_labels(selector, _meta(p, "labels"))]


def _uses_service(ingress: Mapping[str, Any], service_name: str) -> bool:
    for rule in (ingress.get("spec") or {}).get("rules") or []:
        http = rule.get("http")
        if not http:
            continue
        for path in http.get("paths") or []:
            backend = (path.get("backend") or {}).get("service")
            if backend is not None and backend.get("name", "") == service_name:
                return True
    return False


def find_service(selector: Mapping[str, str] | None, services: Iterable[Mapping]) -> dict | None:
    """Return the first service whose own selector is satisfied by *selector*."""
    return next(
        (s for s in services if match_labels(selector, (s.get("spec") or {}).get("selector"))),
        None,
    )


def find_ingress(service_name: str, ingresses: Iterable[Mapping]) -> dict | None:
    """Return the first ingress with an HTTP path backed by *service_name*."""
    return next((i for i in ingresses if _uses_service(i, service_name)), None)


def render_overview(
    deployments: Iterable[Mapping],
    services: Sequence[Mapping],
    ingresses: Sequence[Mapping],
    pods: Sequence[Mapping],
) -> str:
    """HTML table with one row per deployment."""
    parts = [_TABLE_HEAD]
    for deployment in deployments:
        selector = _deployment_selector(deployment)
        matched = _matching_pods(selector, pods)
        service = find_service(selector, services)
        service_name = _name(service) if service else ""
        ingress = find_ingress(service_name, ingresses)
        ingress_name = _name(ingress) if ingress else ""
        cells = [
            _name(deployment),
            str(len(matched)),
            service_name,
            ingress_name,
            _meta(deployment, "namespace") or "",
        ]
        parts.append("<tr>" + "".join(f"<td>{escape(c)}</td>" for c in cells) + "</tr>")
    parts.append("</tbody></table>")
    return "".join(parts)


def render_deployment_json(
    deployments: Iterable[Mapping],
    services: Sequence[Mapping],
    ingresses: Sequence[Mapping],
    pods: Sequence[Mapping],
) -> str:
    """HTML block holding each deployment with its related objects as JSON.

    When several ingresses route to the service, the last one is shown.
    """
    result = []
    for deployment in deployments:
        selector = _deployment_selector(deployment)
        matched = _matching_pods(selector, pods)
        service = find_service(selector, services)
        service_name = _name(service) if service else ""
        users = [i for i in ingresses if _uses_service(i, service_name)]
        result.append(
            {
                "deployment": deployment,
                "ingress": users[-1] if users else None,
                "pods": matched or None,
                "service": service,
            }
        )
    raw = json.dumps(result or None, indent=2, ensure_ascii=False)
    raw = raw.replace("&", "\\u0026").replace("<", "\\u003c").replace(">", "\\u003e")
    return _JSON_HEAD + raw + "</pre>"