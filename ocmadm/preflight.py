"""Preflight checks run before initialising a hub."""

from __future__ import annotations

import dataclasses
import ipaddress
import os
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from ocmadm.client import ApiError, MemoryClient, NotFoundError, create_or_update_config_map
from ocmadm.kubeconfig import (
    Cluster,
    Config,
    KubeconfigError,
    dump_kubeconfig,
    load_current_cluster,
    load_kubeconfig,
)

BOOTSTRAP_CONFIG_MAP = "cluster-info"
NAMESPACE_PUBLIC = "kube-public"

_CONTROLPLANE_NAME = re.compile(r"[a-z0-9]([-a-z0-9]*[a-z0-9])?")
_DOMAIN_WARNING = "Hub Api Server is a domain name, maybe you should set HostAlias in klusterlet"

CheckResult = tuple[list[str], list[Exception]]


class _MissingPort(ValueError):
    pass


def _split_host(hostport: str) -> str:
    """Return the host part of host:port, raising _MissingPort when there is no port."""
    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise ValueError(f"address {hostport}: missing ']' in address")
        rest = hostport[end + 1:]
        if not rest:
            raise _MissingPort(f"address {hostport}: missing port in address")
        if not rest.startswith(":") or ":" in rest[1:]:
            raise ValueError(f"address {hostport}: too many colons in address")
        return hostport[1:end]
    colons = hostport.count(":")
    if colons == 0:
        raise _MissingPort(f"address {hostport}: missing port in address")
    if colons > 1:
        raise ValueError(f"address {hostport}: too many colons in address")
    return hostport.split(":", 1)[0]


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def check_server(server: str) -> CheckResult:
    """Warn when the API server is addressed by a domain name."""
    try:
        netloc = urlsplit(server).netloc
    except ValueError as err:
        return [], [err]
    hostport = netloc.rpartition("@")[2]
    try:
        host = _split_host(hostport)
    except _MissingPort:
        host = hostport
    except ValueError as err:
        return [], [err]
    if not _is_ip(host):
        return [_DOMAIN_WARNING], []
    return [], []


def _raw_config(source: Config | str | os.PathLike) -> Config:
    if isinstance(source, Config):
        return source
    return load_kubeconfig(source)


@dataclass
class SingletonControlplaneCheck:
    controlplane_name: str

    def check(self) -> CheckResult:
        if _CONTROLPLANE_NAME.fullmatch(self.controlplane_name) is None:
            return [], [ValueError(
                "validate ControlplaneName failed: should match `^[a-z0-9]([-a-z0-9]*[a-z0-9])?$`"
            )]
        return [], []

    def name(self) -> str:
        return "SingletonControlplane check"


@dataclass
class HubApiServerCheck:
    config: Config | str | os.PathLike

    def check(self) -> CheckResult:
        try:
            cluster = load_current_cluster(_raw_config(self.config))
        except KubeconfigError as err:
            return [], [err]
        return check_server(cluster.server)

    def name(self) -> str:
        return "HubApiServer check"


@dataclass
class ClusterInfoCheck:
    """Checks that the cluster-info ConfigMap exists, creating it when missing."""

    namespace: str
    resource_name: str
    config: Config | str | os.PathLike
    client: MemoryClient

    def check(self) -> CheckResult:
        try:
            config_map = self.client.get("ConfigMap", self.resource_name, self.namespace)
        except NotFoundError:
            warning = (
                "no ConfigMap named cluster-info in the kube-public namespace, clusteradm will creates it"
            )
            try:
                cluster = load_current_cluster(_raw_config(self.config))
            except KubeconfigError as err:
                return [], [err]
            try:
                create_cluster_info(self.client, cluster)
            except (ApiError, KubeconfigError) as err:
                return [warning], [err]
            return [warning], []
        except ApiError as err:
            return [], [err]
        if not (config_map.get("data") or {}).get("kubeconfig"):
            return [], [ValueError("empty kubeconfig data in cluster-info")]
        return [], []

    def name(self) -> str:
        return "cluster-info check"


def _flattened(cluster: Cluster) -> Cluster:
    if not cluster.certificate_authority:
        return cluster
    try:
        data = Path(cluster.certificate_authority).read_bytes()
    except OSError as err:
        raise KubeconfigError(str(err)) from err
    return dataclasses.replace(cluster, certificate_authority="", certificate_authority_data=data)


def create_cluster_info(client: MemoryClient, cluster: Cluster) -> None:
    """Create or update the cluster-info ConfigMap in the kube-public namespace."""
    kubeconfig = dump_kubeconfig(Config(clusters={"": _flattened(cluster)}))
    config_map = {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": BOOTSTRAP_CONFIG_MAP, "namespace": NAMESPACE_PUBLIC},
        "immutable": True,
        "data": {"kubeconfig": kubeconfig},
    }
    create_or_update_config_map(client, config_map)