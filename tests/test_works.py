from ocmadm.works import WorkFields, work_details, work_fields, works_table, works_tree


MANIFESTS = [
    {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "cm1", "namespace": "default"}},
    {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "demo"}},
]


def make_work(name, cluster, applied="True", available="False", with_status=True):
    work = {
        "kind": "ManifestWork",
        "metadata": {"name": name, "namespace": cluster},
        "spec": {"workload": {"manifests": MANIFESTS}},
    }
    if with_status:
        work["status"] = {
            "conditions": [
                {"type": "Applied", "status": applied},
                {"type": "Available", "status": available},
            ],
            "resourceStatus": {
                "manifests": [
                    {
                        "resourceMeta": {"kind": "ConfigMap", "name": "cm1", "namespace": "default"},
                        "conditions": [{"type": "Applied", "status": "True"}],
                    },
                    {
                        "resourceMeta": {"kind": "Namespace", "name": "demo"},
                        "conditions": [{"type": "Available", "status": "False"}],
                    },
                ]
            },
        }
    return work


def test_work_fields():
    fields = work_fields(make_work("work1", "cluster1"))
    assert fields == WorkFields(cluster="cluster1", number=len(MANIFESTS), applied="True", available="False")


def test_work_fields_without_status():
    fields = work_fields(make_work("work1", "cluster1", with_status=False))
    assert fields.applied == ""
    assert fields.available == ""
    assert fields.number == len(MANIFESTS)


def test_work_details_one_entry_per_resource():
    details = work_details(".Resources", make_work("work1", "cluster1"))
    assert len(details) == 2
    assert all(key.startswith(".Resources.") for key in details)
    assert any("cm1" in key and "ConfigMap" in key for key in details)
    assert any("Applied" in value for value in details.values())


def test_work_details_without_status_is_empty():
    assert work_details(".Resources", make_work("work1", "cluster1", with_status=False)) == {}


def test_works_table():
    works = [make_work("work1", "cluster1"), make_work("work2", "cluster2", applied="False")]
    table = works_table(works)
    assert [c.name for c in table.columns] == [
        "Name", "Cluster", "Number Of Manifests", "Applied", "Available",
    ]
    assert table.rows == [
        ["work1", "cluster1", len(MANIFESTS), "True", "False"],
        ["work2", "cluster2", len(MANIFESTS), "False", "False"],
    ]


def test_works_tree():
    tree = works_tree([make_work("work1", "cluster1")])
    assert list(tree) == ["cluster1.work1"]
    node = tree["cluster1.work1"]
    assert node[".Applied"] == "True"
    assert node[".Available"] == "False"
    assert node[".Number of Manifests"] == len(MANIFESTS)
    resource_keys = [k for k in node if k.startswith(".Resources.")]
    assert len(resource_keys) == 2