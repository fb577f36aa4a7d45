from ocmadm.addons import (
    ADDON_NAME_LABEL,
    addon_condition,
    addons_table,
    addons_tree,
    group_by_name,
    should_show,
)
from ocmadm.works import work_details


def _cma(name):
    return {"kind": "ClusterManagementAddOn", "metadata": {"name": name}}


def _mca(name, namespace, conditions=None):
    return {
        "kind": "ManagedClusterAddOn",
        "metadata": {"name": name, "namespace": namespace},
        "status": {"conditions": conditions or []},
    }


def _work(name, namespace, addon):
    return {
        "kind": "ManifestWork",
        "metadata": {"name": name, "namespace": namespace, "labels": {ADDON_NAME_LABEL: addon}},
        "status": {
            "resourceStatus": {
                "manifests": [
                    {
                        "resourceMeta": {"kind": "Deployment", "name": "agent", "namespace": "ns"},
                        "conditions": [{"type": "Applied", "status": "True"}],
                    }
                ]
            }
        },
    }


def test_should_show():
    assert should_show([], "anything") is True
    assert should_show(None, "anything") is True
    assert should_show(["a", "b"], "b") is True
    assert should_show(["a", "b"], "c") is False


def test_addon_condition():
    addon = _mca("a1", "cluster1", [{"type": "Available", "status": "True"},
                                     {"type": "ManifestApplied", "status": "False"}])
    conds = addon_condition(addon, colored=False)
    assert conds[".cluster1.Status.Available"] == "Available -> true"
    assert conds[".cluster1.Status.ManifestApplied"] == "ManifestApplied -> false"
    assert conds[".cluster1.Status.RegistrationApplied"] == "RegistrationApplied -> unknown"


def test_addon_condition_colored_false_decorated():
    addon = _mca("a1", "cluster1", [{"type": "Available", "status": "False"}])
    value = addon_condition(addon, colored=True)[".cluster1.Status.Available"]
    assert value.startswith("Available -> ")
    assert value != "Available -> false"


def test_group_by_name():
    grouped = group_by_name([_mca("a1", "c1"), _mca("a2", "c1"), _mca("a1", "c2")])
    assert sorted(grouped) == ["a1", "a2"]
    assert [a["metadata"]["namespace"] for a in grouped["a1"]] == ["c1", "c2"]


def test_table_counts_and_selection():
    grouped = group_by_name([_mca("a1", "c1"), _mca("a1", "c2")])
    table = addons_table([_cma("a1"), _cma("a2")], grouped)
    assert [c.name for c in table.columns] == ["Name", "InstalledClusters"]
    assert table.rows == [["a1", 2], ["a2", 0]]
    selected = addons_table([_cma("a1"), _cma("a2")], grouped, ["a2"])
    assert selected.rows == [["a2", 0]]


def test_tree_filters_clusters():
    grouped = group_by_name([_mca("a1", "c1"), _mca("a1", "c2")])
    tree = addons_tree([_cma("a1")], grouped, [], ["c1"], colored=False)
    assert list(tree) == ["a1"]
    assert ".c1.Status.Available" in tree["a1"]
    assert ".c2.Status.Available" not in tree["a1"]


def test_tree_includes_matching_works():
    grouped = group_by_name([_mca("a1", "c1")])
    work = _work("w1", "c1", "a1")
    other = _work("w2", "c1", "a2")
    tree = addons_tree([_cma("a1")], grouped, [work, other], ["c1"], colored=False)
    expected = work_details(".c1.ManifestWork", work)
    assert expected
    assert all(tree["a1"][key] == value for key, value in expected.items())
    assert all(k.startswith(".c1.") for k in tree["a1"])


def test_tree_selection_excludes_addon():
    grouped = group_by_name([_mca("a1", "c1")])
    tree = addons_tree([_cma("a1")], grouped, [], ["c1"], selecting=["a2"])
    assert tree == {}