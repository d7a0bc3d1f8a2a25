"""Access to a Kubernetes API server over its REST interface."""

from __future__ import annotations

import atexit
import base64
import binascii
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests
import yaml

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
REQUEST_TIMEOUT = 30

_temp_files: list[str] = []


@atexit.register
def _remove_temp_files() -> None:
    for name in _temp_files:
        try:
            os.unlink(name)
        except OSError:
            pass


class KubeError(Exception):
    """Raised when the cluster cannot be reached or answers with an error."""


class NotFoundError(KubeError):
    """Raised when a requested object does not exist."""


@dataclass(frozen=True)
class ClusterConfig:
    """Connection settings for one API server."""

    server: str
    token: str | None = None
    ca_file: str | None = None
    cert_file: str | None = None
    key_file: str | None = None
    verify: bool = True


def _default_kubeconfig_path() -> Path:
    env = os.environ.get("KUBECONFIG", "")
    for candidate in env.split(os.pathsep):
        if candidate:
            return Path(candidate)
    return Path.home() / ".kube" / "config"


def _named(doc: Mapping[str, Any], section: str, key: str, name: str) -> dict:
    for entry in doc.get(section) or []:
        if isinstance(entry, Mapping) and entry.get("name") == name:
            return dict(entry.get(key) or {})
    raise KubeError(f"failed to load kubeconfig: {key} {name!r} not found")


def _data_to_file(data: str, suffix: str) -> str:
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise KubeError(f"failed to load kubeconfig: invalid base64 data: {exc}") from exc
    with tempfile.NamedTemporaryFile(prefix="kubeboard-", suffix=suffix, delete=False) as fh:
        fh.write(raw)
    _temp_files.append(fh.name)
    return fh.name


def _file_or_data(
    entry: Mapping[str, Any], file_key: str, data_key: str, base: Path, suffix: str
) -> str | None:
    data = entry.get(data_key)
    if data:
        return _data_to_file(data, suffix)
    path = entry.get(file_key)
    if path:
        return str((base / path).resolve())
    return None


def load_kubeconfig(path: str | os.PathLike | None = None, context: str | None = None) -> ClusterConfig:
    """Read a kubeconfig file and return the settings of *context*.

    *path* defaults to ``$KUBECONFIG`` or ``~/.kube/config``; *context*
    defaults to the file's current context.
    """
    config_path = Path(path) if path else _default_kubeconfig_path()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise KubeError(f"failed to load kubeconfig: {exc}") from exc
    try:
        doc = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise KubeError(f"failed to load kubeconfig: {exc}") from exc
    if not isinstance(doc, Mapping):
        raise KubeError("failed to load kubeconfig: not a mapping")

    context_name = context or doc.get("current-context")
    if not context_name:
        raise KubeError("failed to load kubeconfig: no current context")
    ctx = _named(doc, "contexts", "context", context_name)
    cluster = _named(doc, "clusters", "cluster", ctx.get("cluster", ""))
    user = _named(doc, "users", "user", ctx["user"]) if ctx.get("user") else {}

    server = cluster.get("server")
    if not server:
        raise KubeError("failed to load kubeconfig: cluster has no server")

    base = config_path.parent
    token = user.get("token")
    if not token and user.get("tokenFile"):
        try:
            token = (base / user["tokenFile"]).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise KubeError(f"failed to load kubeconfig: {exc}") from exc

    return ClusterConfig(
        server=server,
        token=token or None,
        ca_file=_file_or_data(cluster, "certificate-authority", "certificate-authority-data", base, ".crt"),
        cert_file=_file_or_data(user, "client-certificate", "client-certificate-data", base, ".crt"),
        key_file=_file_or_data(user, "client-key", "client-key-data", base, ".key"),
        verify=not cluster.get("insecure-skip-tls-verify", False),
    )


def in_cluster_config() -> ClusterConfig:
    """Build settings from the service account mounted into a pod."""
    host = os.environ.get("KUBERNETES_SERVICE_HOST")
    port = os.environ.get("KUBERNETES_SERVICE_PORT")
    if not host or not port:
        raise KubeError(
            "unable to load in-cluster configuration, KUBERNETES_SERVICE_HOST "
            "and KUBERNETES_SERVICE_PORT must be defined"
        )
    try:
        token = (SERVICE_ACCOUNT_DIR / "token").read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise KubeError(f"unable to read service account token: {exc}") from exc
    if ":" in host:
        host = f"[{host}]"
    ca_path = SERVICE_ACCOUNT_DIR / "ca.crt"
    return ClusterConfig(
        server=f"https://{host}:{port}",
        token=token,
        ca_file=str(ca_path) if ca_path.exists() else None,
    )


def default_config() -> ClusterConfig:
    """In-cluster settings when running in a pod, else the default kubeconfig."""
    try:
        return in_cluster_config()
    except KubeError:
        return load_kubeconfig()


class KubeClient:
    """Reads deployments, services, ingresses and pods of one namespace."""

    def __init__(self, config: ClusterConfig, namespace: str = "default") -> None:
        self.config = config
        self.namespace = namespace
        self._session = requests.Session()
        self._session.headers["Accept"] = "application/json"
        if config.token:
            self._session.headers["Authorization"] = f"Bearer {config.token}"
        self._session.verify = config.ca_file if (config.verify and config.ca_file) else config.verify
        if config.cert_file and config.key_file:
            self._session.cert = (config.cert_file, config.key_file)

    def _get(self, path: str, params: Mapping[str, str] | None = None) -> dict:
        url = self.config.server.rstrip("/") + path
        try:
            response = self._session.get(url, params=params, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise KubeError(f"request to {url} failed: {exc}") from exc
        if response.status_code == 404:
            raise NotFoundError(f"{path} not found")
        if not response.ok:
            raise KubeError(f"{path}: HTTP {response.status_code}: {response.text.strip()}")
        try:
            return response.json()
        except ValueError as exc:
            raise KubeError(f"{path}: invalid JSON response") from exc

    def _items(self, path: str, params: Mapping[str, str] | None = None) -> list[dict]:
        return list(self._get(path, params).get("items") or [])

    def list_deployments(self) -> list[dict]:
        return self._items(f"/apis/apps/v1/namespaces/{self.namespace}/deployments")

    def list_services(self) -> list[dict]:
        return self._items(f"/api/v1/namespaces/{self.namespace}/services")

    def list_ingresses(self) -> list[dict]:
        return self._items(f"/apis/networking.k8s.io/v1/namespaces/{self.namespace}/ingresses")

    def list_pods(self, label_selector: str | None = None) -> list[dict]:
        params = {"labelSelector": label_selector} if label_selector else None
        return self._items(f"/api/v1/namespaces/{self.namespace}/pods", params)

    def get_deployment(self, name: str) -> dict:
        return self._get(f"/apis/apps/v1/namespaces/{self.namespace}/deployments/{name}")