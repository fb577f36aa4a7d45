"""Summaries of managed clusters and managed cluster sets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ocmadm.tables import Column, Table, add_fields, find_status_condition

CLUSTERSET_LABEL = "cluster.open-cluster-management.io/clusterset"
CONDITION_AVAILABLE = "ManagedClusterConditionAvailable"
CONDITION_CLUSTERSET_EMPTY = "ClusterSetEmpty"
SELECTOR_EXCLUSIVE = "ExclusiveClusterSetLabel"
SELECTOR_LABEL = "LabelSelector"

CLUSTER_COLUMNS = (
    Column("Name", "string"),
    Column("Accepted", "boolean"),
    Column("Available", "string"),
    Column("ClusterSet", "string"),
    Column("CPU", "string"),
    Column("Memory", "string"),
    Column("Kubernetes Version", "string"),
)

CLUSTERSET_COLUMNS = (
    Column("Name", "string"),
    Column("Bound Namespaces", "string"),
    Column("Status", "string"),
)


@dataclass(frozen=True)
class ClusterFields:
    """What is shown about one managed cluster."""

    accepted: bool = False
    available: str = ""
    version: str = ""
    cpu: str = ""
    memory: str = ""
    clusterset: str = ""


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


def _name(obj: Mapping[str, Any]) -> str:
    return _metadata(obj).get("name") or ""


def _labels(obj: Mapping[str, Any]) -> Mapping[str, str]:
    return _metadata(obj).get("labels") or {}


def cluster_fields(cluster: Mapping[str, Any]) -> ClusterFields:
    """Pick out acceptance, availability, version, capacity and cluster set."""
    status = cluster.get("status") or {}
    available = find_status_condition(status.get("conditions"), CONDITION_AVAILABLE)
    capacity = status.get("capacity") or {}
    return ClusterFields(
        accepted=bool((cluster.get("spec") or {}).get("hubAcceptsClient", False)),
        available=str(available.get("status", "")) if available is not None else "",
        version=(status.get("version") or {}).get("kubernetes") or "",
        cpu=str(capacity["cpu"]) if "cpu" in capacity else "",
        memory=str(capacity["memory"]) if "memory" in capacity else "",
        clusterset=_labels(cluster).get(CLUSTERSET_LABEL, ""),
    )


def clusters_table(clusters: Iterable[Mapping[str, Any]]) -> Table:
    """One row for each cluster."""
    table = Table(list(CLUSTER_COLUMNS))
    for cluster in clusters:
        fields = cluster_fields(cluster)
        table.add_row(
            _name(cluster),
            fields.accepted,
            fields.available,
            fields.clusterset,
            fields.cpu,
            fields.memory,
            fields.version,
        )
    return table


def clusters_tree(clusters: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """One tree node for each cluster, keyed by cluster name."""
    tree: dict[str, dict[str, Any]] = {}
    for cluster in clusters:
        fields = cluster_fields(cluster)
        add_fields(
            tree,
            _name(cluster),
            {
                ".Accepted": fields.accepted,
                ".Available": fields.available,
                ".ClusterSet": fields.clusterset,
                ".KubernetesVersion": fields.version,
                ".Capacity.Cpu": fields.cpu,
                ".Capacity.Memory": fields.memory,
            },
        )
    return tree


def clusterset_fields(clusterset: Mapping[str, Any], bindings: Iterable[str] | None) -> tuple[str, str]:
    """Return the bound namespaces, comma separated, and the emptiness message."""
    bound = ",".join(bindings or ())
    empty = find_status_condition((clusterset.get("status") or {}).get("conditions"), CONDITION_CLUSTERSET_EMPTY)
    status = (empty.get("message") or "") if empty is not None else ""
    return bound, status


def binding_map(bindings: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Map each cluster set name to the namespaces it is bound to."""
    result: dict[str, list[str]] = {}
    for binding in bindings:
        clusterset = (binding.get("spec") or {}).get("clusterSet") or ""
        result.setdefault(clusterset, []).append(_metadata(binding).get("namespace") or "")
    return result


def _expression_matches(labels: Mapping[str, str], expression: Mapping[str, Any]) -> bool:
    key = expression.get("key") or ""
    operator = expression.get("operator")
    values = expression.get("values") or []
    if operator == "In":
        return key in labels and labels[key] in values
    if operator == "NotIn":
        return not (key in labels and labels[key] in values)
    if operator == "Exists":
        return key in labels
    if operator == "DoesNotExist":
        return key not in labels
    raise ValueError(f"{operator!r} is not a valid label selector operator")


def _selector_matches(labels: Mapping[str, str], selector: Mapping[str, Any]) -> bool:
    if any(labels.get(k) != v for k, v in (selector.get("matchLabels") or {}).items()):
        return False
    return all(_expression_matches(labels, e) for e in selector.get("matchExpressions") or ())


def clusters_in_clusterset(
    clusterset: Mapping[str, Any], clusters: Iterable[Mapping[str, Any]]
) -> list[str]:
    """Names of the clusters that the cluster set's selector picks."""
    selector = (clusterset.get("spec") or {}).get("clusterSelector") or {}
    selector_type = selector.get("selectorType") or SELECTOR_EXCLUSIVE
    if selector_type == SELECTOR_EXCLUSIVE:
        wanted = _name(clusterset)
        return [_name(c) for c in clusters if _labels(c).get(CLUSTERSET_LABEL) == wanted]
    if selector_type == SELECTOR_LABEL:
        label_selector = selector.get("labelSelector")
        if label_selector is None:
            return []
        return [_name(c) for c in clusters if _selector_matches(_labels(c), label_selector)]
    raise ValueError(f"selectorType is not right: {selector_type}")


def clustersets_table(
    clustersets: Iterable[Mapping[str, Any]], bindings: Iterable[Mapping[str, Any]]
) -> Table:
    """One row for each cluster set."""
    bound = binding_map(bindings)
    table = Table(list(CLUSTERSET_COLUMNS))
    for clusterset in clustersets:
        name = _name(clusterset)
        namespaces, status = clusterset_fields(clusterset, bound.get(name))
        table.add_row(name, namespaces, status)
    return table


def clustersets_tree(
    clustersets: Iterable[Mapping[str, Any]],
    bindings: Iterable[Mapping[str, Any]],
    clusters: Iterable[Mapping[str, Any]],
) -> dict[str, dict[str, Any]]:
    """One tree node for each cluster set, with its member clusters."""
    bound = binding_map(bindings)
    cluster_list = list(clusters)
    tree: dict[str, dict[str, Any]] = {}
    for clusterset in clustersets:
        name = _name(clusterset)
        namespaces, status = clusterset_fields(clusterset, bound.get(name))
        add_fields(
            tree,
            name,
            {
                ".BoundNamespace": namespaces,
                ".Status": status,
                ".Clusters": clusters_in_clusterset(clusterset, cluster_list),
            },
        )
    return tree