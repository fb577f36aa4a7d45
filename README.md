# ocmadm

A library for preparing and inspecting a multicluster hub. It offers:

- preflight checks to run before a hub is initialised;
- the list of built-in hub add-ons and their manifest files;
- table and tree summaries of managed clusters, cluster sets, manifest
  works, placements and add-ons;
- deletion of cluster sets and manifest works.

Resources are plain dictionaries shaped like Kubernetes objects
(`kind`, `metadata`, `spec`, `status`). The functions that talk to a cluster
accept any client that has the methods `get`, `list`, `create`, `update`
and `delete` with the signatures of `ocmadm.client.MemoryClient`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## The in-memory client

`ocmadm.client.MemoryClient` keeps objects in memory, keyed by kind,
namespace and name. It records every request as an `Action(verb, kind,
namespace, name)` in its `actions` list. It raises these errors:

- `NotFoundError` when a requested object is missing;
- `AlreadyExistsError` when an object being created is already present.

Both errors derive from `ApiError`. The `failures` argument maps a
`(verb, kind)` pair to an error. The client raises that error for any
matching request, after it has recorded the request.

```python
from ocmadm.client import MemoryClient, create_or_update_config_map

client = MemoryClient()
create_or_update_config_map(client, {
    "kind": "ConfigMap",
    "metadata": {"name": "cluster-info", "namespace": "kube-public"},
    "data": {"kubeconfig": "..."},
})
print(client.actions)
```

`list(kind, namespace, field_name, label_selector)` treats an empty
namespace as all namespaces. `field_name` matches the object name.
`label_selector` accepts terms of the forms `key=value`, `key!=value`,
`key` and `!key`, separated by commas.

## Kubeconfig

`ocmadm.kubeconfig` has three functions:

- `load_kubeconfig(path)` reads a file into a `Config`, which holds
  `Cluster` and `Context` entries. It raises `KubeconfigError` when the file
  is missing or invalid.
- `dump_kubeconfig(config)` writes a `Config` back as YAML.
- `load_current_cluster(config)` returns the cluster that the current
  context points to.

The path is used as given; `~` is not expanded.

```python
import os
from ocmadm.kubeconfig import load_kubeconfig, load_current_cluster

config = load_kubeconfig(os.path.expanduser("~/.kube/config"))
cluster = load_current_cluster(config)
print(cluster.server)
```

## Preflight checks

In `ocmadm.preflight`, every check has a `name()` method and a `check()`
method. `check()` returns a pair: a list of warnings and a list of errors.

- `SingletonControlplaneCheck(controlplane_name)` checks the name against
  `^[a-z0-9]([-a-z0-9]*[a-z0-9])?$`.
- `HubApiServerCheck(config)` warns when the current cluster's server is a
  domain name rather than an IP address. `config` may be a `Config` or the
  path of a kubeconfig file. The same test on a single URL is available as
  `check_server(server)`.
- `ClusterInfoCheck(namespace, resource_name, config, client)` reports an
  error if the ConfigMap exists but has no `kubeconfig` data. If the
  ConfigMap is missing, it returns a warning and creates it with
  `create_cluster_info(client, cluster)`.

`create_cluster_info` inlines the certificate authority file into the
generated kubeconfig. It stores the result in an immutable `cluster-info`
ConfigMap in `kube-public`.

```python
from ocmadm.client import MemoryClient
from ocmadm.preflight import ClusterInfoCheck

check = ClusterInfoCheck("kube-public", "cluster-info", config, MemoryClient())
warnings, errors = check.check()
```

## Hub add-ons

`ocmadm.hubaddon` knows two built-in add-ons: `application-manager` and
`governance-policy-framework`.

- `validate_names(names)` raises `ValueError` for an empty string or an
  unknown name.
- `parse_addon_names(names)` splits a comma separated string, drops repeated
  names and trims whitespace.
- `deployment_files(addon)` returns an `AddonDeploymentFiles` with
  `crd_files`, `config_files` and `deployment_files`, or `None` for an
  unknown add-on.
- `create_namespace(client, namespace)` creates a namespace unless it
  already exists.
- `Values` holds the add-ons to install, the namespace, a bundle version and
  the create-namespace choice.

```python
from ocmadm.hubaddon import validate_names, parse_addon_names, deployment_files

validate_names("application-manager,governance-policy-framework")
for addon in parse_addon_names("application-manager,application-manager"):
    files = deployment_files(addon)
    print(addon, files.crd_files, files.config_files, files.deployment_files)
```

## Reports

Each report comes in two shapes:

- a `Table`, which has a list of `Column` and a list of rows;
- a tree, which is a dictionary from a node name to a dictionary of dotted
  field paths.

The report functions are:

- `ocmadm.clusters`
  - `clusters_table`, `clusters_tree`
  - `clustersets_table`, `clustersets_tree`
  - `clusters_in_clusterset`, which supports the exclusive cluster-set
    label and label selectors
- `ocmadm.works`: `works_table`, `works_tree`, `work_details`
- `ocmadm.placements`: `placements_table`, `placements_tree`
- `ocmadm.addons`: `addons_table`, `addons_tree`, `group_by_name`,
  `should_show`

`ocmadm.tables` holds the shared helpers:

- `find_status_condition`;
- `sanitize_condition`, which gives `"true"`, `"false"` or `"unknown"`;
- `add_fields`.

When `colored=True`, the report functions print `"false"` in red.

```python
from ocmadm.clusters import clusters_table

table = clusters_table(client.list("ManagedCluster"))
print([c.name for c in table.columns])
for row in table.rows:
    print(row)
```

## Deleting resources

`ocmadm.delete` has these functions:

- `validate_clusterset_args(args)` and `validate_work_args(args)` return
  the single name from a list of arguments. They raise `ValueError` when the
  list has no name or more than one.
- `delete_clusterset(client, clusterset, dry_run, out)` deletes a cluster
  set and writes a message to `out`. It refuses to delete the `default`
  cluster set and any cluster set that is still bound to a namespace.
- `delete_work(client, cluster, work_name, force, out, timeout)` deletes a
  ManifestWork and waits for it to disappear. With `force`, it clears the
  work's finalizers. It raises `DeleteTimeoutError` if the work remains
  after `timeout` seconds.
- `delete_work_in_clusters(...)` does the same for each cluster. It raises
  the collected errors after all clusters have been tried.

## What the package does not do

- There is no command-line tool.
- There is no client for a real API server. `MemoryClient` is the only
  client included.
- The package lists add-on manifest file paths but does not ship, render or
  apply those manifests.
- It does not install a hub or join clusters to it.