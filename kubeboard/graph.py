"""Mermaid graphs of a deployment and the objects around it."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from kubeboard.cluster import KubeClient, KubeError
from kubeboard.labels import format_label_selector
from kubeboard.overview import find_ingress, find_service


def _name(obj: Mapping[str, Any]) -> str:
    return (obj.get("metadata") or {}).get("name") or ""


def build_graph(
    deployment: Mapping[str, Any],
    pods: Iterable[Mapping[str, Any]],
    service: Mapping[str, Any] | None = None,
    ingress: Mapping[str, Any] | None = None,
    indent: str = "",
) -> str:
    """Mermaid ``graph TD`` text: ingress -> service -> deployment -> pods."""
    lines = []
    if ingress is not None:
        lines.append(f'Ingress["Ingress: {_name(ingress)}"]')
        lines.append("Ingress --> Service")
    if service is not None:
        lines.append(f'Service["Service: {_name(service)}"]')
        lines.append("Service --> Deploy")
    lines.append(f'Deploy["Deployment: {_name(deployment)}"]')
    for pod in pods:
        pod_name = _name(pod)
        lines.append(f'Deploy --> {pod_name}["Pod: {pod_name}"]')
    return "graph TD\n" + "".join(f"{indent}{line}\n" for line in lines)


def _or_empty(fetch: Callable[[], list]) -> list:
    try:
        return fetch()
    except KubeError:
        return []


def deployment_graph(client: KubeClient, name: str) -> str:
    """Fetch deployment *name* and its neighbours and return their graph.

    Raises NotFoundError when the deployment does not exist; failures
    listing the other objects leave them out of the graph.
    """
    deployment = client.get_deployment(name)
    match = ((deployment.get("spec") or {}).get("selector") or {}).get("matchLabels") or {}
    selector = format_label_selector(match)
    pods = _or_empty(lambda: client.list_pods(selector))
    services = _or_empty(client.list_services)
    ingresses = _or_empty(client.list_ingresses)

    service = find_service(match, services)
    ingress = find_ingress(_name(service), ingresses) if service is not None else None
    return build_graph(deployment, pods, service, ingress)