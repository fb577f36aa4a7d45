"""Reading and writing kubeconfig files."""

from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


class KubeconfigError(Exception):
    """A kubeconfig could not be read or does not hold what is needed."""


@dataclass
class Cluster:
    server: str = ""
    location_of_origin: str = ""
    tls_server_name: str = ""
    insecure_skip_tls_verify: bool = False
    certificate_authority: str = ""
    certificate_authority_data: bytes | None = None
    proxy_url: str = ""


@dataclass
class Context:
    cluster: str = ""
    user: str = ""
    namespace: str = ""


@dataclass
class Config:
    current_context: str = ""
    clusters: dict[str, Cluster] = field(default_factory=dict)
    contexts: dict[str, Context] = field(default_factory=dict)
    users: dict[str, dict[str, Any]] = field(default_factory=dict)


def _named_entries(document: dict[str, Any], section: str, body_key: str):
    for entry in document.get(section) or []:
        if not isinstance(entry, dict):
            raise KubeconfigError(f"invalid entry in {section}")
        yield str(entry.get("name") or ""), entry.get(body_key) or {}


def _parse_cluster(body: dict[str, Any], path: str) -> Cluster:
    authority = body.get("certificate-authority") or ""
    if authority and not os.path.isabs(authority):
        authority = os.path.join(os.path.dirname(os.path.abspath(path)), authority)
    encoded = body.get("certificate-authority-data")
    data = None
    if encoded:
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as err:
            raise KubeconfigError(f"invalid certificate-authority-data: {err}") from err
    return Cluster(
        server=body.get("server") or "",
        location_of_origin=path,
        tls_server_name=body.get("tls-server-name") or "",
        insecure_skip_tls_verify=bool(body.get("insecure-skip-tls-verify", False)),
        certificate_authority=authority,
        certificate_authority_data=data,
        proxy_url=body.get("proxy-url") or "",
    )


def load_kubeconfig(path: str | os.PathLike) -> Config:
    """Read a kubeconfig file."""
    path = os.fspath(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise KubeconfigError(f"stat {path}: no such file or directory") from None
    except OSError as err:
        raise KubeconfigError(str(err)) from err
    try:
        document = yaml.safe_load(text) or {}
    except yaml.YAMLError as err:
        raise KubeconfigError(f"error loading config file {path!r}: {err}") from err
    if not isinstance(document, dict):
        raise KubeconfigError(f"error loading config file {path!r}: not a mapping")

    return Config(
        current_context=document.get("current-context") or "",
        clusters={name: _parse_cluster(body, path) for name, body in _named_entries(document, "clusters", "cluster")},
        contexts={
            name: Context(
                cluster=body.get("cluster") or "",
                user=body.get("user") or "",
                namespace=body.get("namespace") or "",
            )
            for name, body in _named_entries(document, "contexts", "context")
        },
        users={name: dict(body) for name, body in _named_entries(document, "users", "user")},
    )


def _cluster_document(cluster: Cluster) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if cluster.certificate_authority:
        body["certificate-authority"] = cluster.certificate_authority
    if cluster.certificate_authority_data:
        body["certificate-authority-data"] = base64.b64encode(cluster.certificate_authority_data).decode("ascii")
    if cluster.insecure_skip_tls_verify:
        body["insecure-skip-tls-verify"] = True
    if cluster.proxy_url:
        body["proxy-url"] = cluster.proxy_url
    body["server"] = cluster.server
    if cluster.tls_server_name:
        body["tls-server-name"] = cluster.tls_server_name
    return body


def _context_document(context: Context) -> dict[str, Any]:
    body = {"cluster": context.cluster, "user": context.user}
    if context.namespace:
        body["namespace"] = context.namespace
    return body


def dump_kubeconfig(config: Config) -> str:
    """Render a config as kubeconfig YAML."""
    document = {
        "apiVersion": "v1",
        "clusters": [{"cluster": _cluster_document(c), "name": n} for n, c in config.clusters.items()],
        "contexts": [{"context": _context_document(c), "name": n} for n, c in config.contexts.items()],
        "current-context": config.current_context,
        "kind": "Config",
        "preferences": {},
        "users": [{"name": n, "user": u} for n, u in config.users.items()],
    }
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)


def load_current_cluster(config: Config) -> Cluster:
    """Return the cluster that the current context points to."""
    context = config.contexts.get(config.current_context)
    if context is None:
        raise KubeconfigError("failed to find the given Current Context in Contexts of the kubeconfig")
    cluster = config.clusters.get(context.cluster)
    if cluster is None:
        raise KubeconfigError("failed to find the given CurrentContext Cluster in Clusters of the kubeconfig")
    return cluster