"""Summaries of placements and the clusters they selected."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ocmadm.tables import Column, Table, add_fields, find_status_condition, sanitize_condition

PLACEMENT_LABEL = "cluster.open-cluster-management.io/placement"
CONDITION_SATISFIED = "PlacementSatisfied"
CONDITION_MISCONFIGURED = "PlacementMisconfigured"
NO_CLUSTER_SELECTED = "NoClusterSelected"

PLACEMENT_COLUMNS = (
    Column("Name", "string"),
    Column("Status", "string"),
    Column("Reason", "string"),
    Column("SeletedClusters", "array"),
)


@dataclass(frozen=True)
class PlacementFields:
    """What is shown about one placement."""

    namespace: str = ""
    clustersets: list[str] = field(default_factory=list)
    satisfied: str = "unknown"
    misconfigured: str = "unknown"
    number: int = 0
    decision: list[str] = field(default_factory=list)


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


def _name(obj: Mapping[str, Any]) -> str:
    return _metadata(obj).get("name") or ""


def selected_clusters(decisions: Iterable[Mapping[str, Any]]) -> dict[str, list[Mapping[str, Any]]]:
    """Map each placement name to the cluster decisions made for it.

    When several decision objects name the same placement, the last one wins.
    """
    selected: dict[str, list[Mapping[str, Any]]] = {}
    for decision in decisions:
        placement = (_metadata(decision).get("labels") or {}).get(PLACEMENT_LABEL, "")
        selected[placement] = list((decision.get("status") or {}).get("decisions") or [])
    return selected


def _cluster_names(decisions: Iterable[Mapping[str, Any]]) -> list[str]:
    return [d.get("clusterName") or "" for d in decisions]


def placement_fields(
    placement: Mapping[str, Any],
    selected: Mapping[str, list[Mapping[str, Any]]],
    colored: bool = True,
) -> PlacementFields:
    """Pick out namespace, cluster sets, conditions, selection count and decisions."""
    status = placement.get("status") or {}
    conditions = status.get("conditions")
    name = _name(placement)
    if name in selected:
        decision = _cluster_names(selected[name])
    else:
        decision = [NO_CLUSTER_SELECTED]
    return PlacementFields(
        namespace=_metadata(placement).get("namespace") or "",
        clustersets=list((placement.get("spec") or {}).get("clusterSets") or []),
        satisfied=sanitize_condition(find_status_condition(conditions, CONDITION_SATISFIED), colored),
        misconfigured=sanitize_condition(
            find_status_condition(conditions, CONDITION_MISCONFIGURED), colored
        ),
        number=int(status.get("numberOfSelectedClusters") or 0),
        decision=decision,
    )


def placement_row(placement: Mapping[str, Any], clusters: list[str]) -> list[Any]:
    """A table row: name, first condition's status and reason, and selected clusters."""
    conditions = (placement.get("status") or {}).get("conditions") or []
    if not conditions:
        raise ValueError(f"placement {_name(placement)} has no status conditions")
    first = conditions[0]
    return [_name(placement), first.get("status", ""), first.get("reason", ""), list(clusters)]


def placements_table(
    placements: Iterable[Mapping[str, Any]], decisions: Iterable[Mapping[str, Any]]
) -> Table:
    """One row for each placement."""
    selected = selected_clusters(decisions)
    table = Table(list(PLACEMENT_COLUMNS))
    for placement in placements:
        clusters = _cluster_names(selected.get(_name(placement), []))
        table.add_row(*placement_row(placement, clusters))
    return table


def placements_tree(
    placements: Iterable[Mapping[str, Any]],
    decisions: Iterable[Mapping[str, Any]],
    colored: bool = True,
) -> dict[str, dict[str, Any]]:
    """One tree node for each placement, keyed by placement name."""
    selected = selected_clusters(decisions)
    tree: dict[str, dict[str, Any]] = {}
    for placement in placements:
        fields = placement_fields(placement, selected, colored)
        add_fields(
            tree,
            _name(placement),
            {
                ".Namespace": fields.namespace,
                ".ClusterSet": fields.clustersets,
                ".Status.NumberOfSelectedClusters": fields.number,
                ".Status.Conditions.PlacementConditionSatisfied": fields.satisfied,
                ".Status.Conditions.PlacementConditionMisconfigured": fields.misconfigured,
                ".PlacementDecision": fields.decision,
            },
        )
    return tree