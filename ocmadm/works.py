"""Summaries of manifest works."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ocmadm.tables import Column, Table, add_fields, find_status_condition

CONDITION_APPLIED = "Applied"
CONDITION_AVAILABLE = "Available"

WORK_COLUMNS = (
    Column("Name", "string"),
    Column("Cluster", "string"),
    Column("Number Of Manifests", "integer"),
    Column("Applied", "string"),
    Column("Available", "string"),
)


@dataclass(frozen=True)
class WorkFields:
    """What is shown about one manifest work."""

    cluster: str = ""
    number: int = 0
    applied: str = ""
    available: str = ""


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


def _condition_status(conditions: Any, condition_type: str) -> str:
    condition = find_status_condition(conditions, condition_type)
    return str(condition.get("status", "")) if condition is not None else ""


def work_fields(work: Mapping[str, Any]) -> WorkFields:
    """Pick out the cluster, manifest count and applied and available status."""
    manifests = ((work.get("spec") or {}).get("workload") or {}).get("manifests") or []
    conditions = (work.get("status") or {}).get("conditions")
    return WorkFields(
        cluster=_metadata(work).get("namespace") or "",
        number=len(manifests),
        applied=_condition_status(conditions, CONDITION_APPLIED),
        available=_condition_status(conditions, CONDITION_AVAILABLE),
    )


def work_details(prefix: str, work: Mapping[str, Any]) -> dict[str, str]:
    """Describe the conditions of each applied resource, keyed under prefix."""
    resource_status = (work.get("status") or {}).get("resourceStatus") or {}
    details: dict[str, str] = {}
    for manifest in resource_status.get("manifests") or ():
        meta = manifest.get("resourceMeta") or {}
        name = meta.get("name") or ""
        namespace = meta.get("namespace") or ""
        target = f"{namespace}/{name}" if namespace else name
        key = f"{prefix}.{meta.get('kind') or meta.get('resource') or ''}.{target}"
        details[key] = ", ".join(
            f"{c.get('type', '')} -> {c.get('status', '')}" for c in manifest.get("conditions") or ()
        )
    return details


def works_table(works: Iterable[Mapping[str, Any]]) -> Table:
    """One row for each manifest work."""
    table = Table(list(WORK_COLUMNS))
    for work in works:
        fields = work_fields(work)
        table.add_row(
            _metadata(work).get("name") or "",
            fields.cluster,
            fields.number,
            fields.applied,
            fields.available,
        )
    return table


def works_tree(works: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """One tree node for each work, keyed by cluster and work name."""
    tree: dict[str, dict[str, Any]] = {}
    for work in works:
        fields = work_fields(work)
        node = f"{fields.cluster}.{_metadata(work).get('name') or ''}"
        add_fields(
            tree,
            node,
            {
                ".Number of Manifests": fields.number,
                ".Applied": fields.applied,
                ".Available": fields.available,
            },
        )
        add_fields(tree, node, work_details(".Resources", work))
    return tree