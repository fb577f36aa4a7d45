"""Summaries of add-ons enabled on managed clusters."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from ocmadm.tables import Column, Table, add_fields, find_status_condition, sanitize_condition
from ocmadm.works import work_details

ADDON_NAME_LABEL = "open-cluster-management.io/addon-name"
TESTED_CONDITIONS = ("Available", "ManifestApplied", "RegistrationApplied")

ADDON_COLUMNS = (
    Column("Name", "string"),
    Column("InstalledClusters", "integer"),
)


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


def _name(obj: Mapping[str, Any]) -> str:
    return _metadata(obj).get("name") or ""


def _namespace(obj: Mapping[str, Any]) -> str:
    return _metadata(obj).get("namespace") or ""


def should_show(selecting_addons: Sequence[str] | None, addon_name: str) -> bool:
    """An empty selection shows every add-on."""
    if not selecting_addons:
        return True
    return addon_name in selecting_addons


def addon_condition(addon: Mapping[str, Any], colored: bool = True) -> dict[str, str]:
    """Describe the tested conditions of a managed cluster add-on."""
    conditions = (addon.get("status") or {}).get("conditions")
    namespace = _namespace(addon)
    return {
        f".{namespace}.Status.{condition_type}": (
            f"{condition_type} -> "
            f"{sanitize_condition(find_status_condition(conditions, condition_type), colored)}"
        )
        for condition_type in TESTED_CONDITIONS
    }


def group_by_name(addons: Iterable[Mapping[str, Any]]) -> dict[str, list[Mapping[str, Any]]]:
    """Group managed cluster add-ons by their name."""
    grouped: dict[str, list[Mapping[str, Any]]] = {}
    for addon in addons:
        grouped.setdefault(_name(addon), []).append(addon)
    return grouped


def addons_table(
    cluster_management_addons: Iterable[Mapping[str, Any]],
    addons_by_name: Mapping[str, list[Mapping[str, Any]]],
    selecting: Sequence[str] | None = None,
) -> Table:
    """One row for each shown add-on with the number of clusters it is installed on."""
    table = Table(list(ADDON_COLUMNS))
    for cma in cluster_management_addons:
        name = _name(cma)
        if not should_show(selecting, name):
            continue
        table.add_row(name, len(addons_by_name.get(name, [])))
    return table


def addons_tree(
    cluster_management_addons: Iterable[Mapping[str, Any]],
    addons_by_name: Mapping[str, list[Mapping[str, Any]]],
    works: Iterable[Mapping[str, Any]],
    clusters: Iterable[str],
    selecting: Sequence[str] | None = None,
    colored: bool = True,
) -> dict[str, dict[str, Any]]:
    """One tree node per shown add-on, with its conditions and manifest works per cluster."""
    cluster_set = set(clusters)
    work_list = list(works)
    tree: dict[str, dict[str, Any]] = {}
    for cma in cluster_management_addons:
        cma_name = _name(cma)
        if not should_show(selecting, cma_name):
            continue
        for addon in addons_by_name.get(cma_name, []):
            addon_namespace = _namespace(addon)
            if addon_namespace not in cluster_set:
                continue
            add_fields(tree, cma_name, addon_condition(addon, colored))
            for work in work_list:
                labels = _metadata(work).get("labels") or {}
                if _namespace(work) in cluster_set and labels.get(ADDON_NAME_LABEL) == _name(addon):
                    add_fields(
                        tree, cma_name, work_details(f".{addon_namespace}.ManifestWork", work)
                    )
    return tree