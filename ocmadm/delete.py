"""Deleting managed cluster sets and manifest works."""

from __future__ import annotations

import sys
import time
from typing import Iterable, Sequence, TextIO

from ocmadm.client import ApiError, MemoryClient, NotFoundError

DEFAULT_CLUSTERSET = "default"
DEFAULT_WORK_TIMEOUT = 10.0

_CLUSTERSET = "ManagedClusterSet"
_CLUSTERSET_BINDING = "ManagedClusterSetBinding"
_MANIFEST_WORK = "ManifestWork"
_POLL_INTERVAL = 0.1


class DeleteTimeoutError(ApiError):
    """An object was not removed within the allowed time."""


def _wait_until_deleted(
    client: MemoryClient,
    kind: str,
    name: str,
    namespace: str | None = None,
    timeout: float | None = None,
) -> bool:
    """Poll until the object is gone; return False if the timeout passes first."""
    deadline = None if timeout is None else time.monotonic() + timeout
    interval = _POLL_INTERVAL if timeout is None else min(_POLL_INTERVAL, max(timeout, 0.0))
    while True:
        try:
            client.get(kind, name, namespace)
        except NotFoundError:
            return True
        if deadline is not None and time.monotonic() >= deadline:
            return False
        time.sleep(interval)


def validate_clusterset_args(args: Sequence[str]) -> str:
    """Return the single cluster set name given on the command line."""
    if not args:
        raise ValueError("the name of the clusterset must be specified")
    if len(args) > 1:
        raise ValueError("only one clusterset can be deleted")
    return args[0]


def delete_clusterset(
    client: MemoryClient,
    clusterset: str,
    dry_run: bool = False,
    out: TextIO | None = None,
) -> None:
    """Delete a cluster set unless it is the default one or still bound to a namespace."""
    out = out if out is not None else sys.stdout

    if clusterset == DEFAULT_CLUSTERSET:
        out.write(f"Clusterset {clusterset} can not be deleted\n")
        return

    try:
        client.get(_CLUSTERSET, clusterset)
    except NotFoundError:
        out.write(f"Clusterset {clusterset} not found or is already deleted\n")
        return

    try:
        bindings = client.list(_CLUSTERSET_BINDING, None, field_name=clusterset)
    except NotFoundError:
        bindings = []
    if bindings:
        out.write(
            f"Clusterset {clusterset} still bind to a namespace! Please unbind before deleted.\n"
        )
        return

    if dry_run:
        out.write(f"Clusterset {clusterset} is deleted\n")
        return

    client.delete(_CLUSTERSET, clusterset)
    _wait_until_deleted(client, _CLUSTERSET, clusterset)
    out.write(f"Clusterset {clusterset} is deleted\n")


def validate_work_args(args: Sequence[str]) -> str:
    """Return the single work name given on the command line."""
    if not args:
        raise ValueError("work name must be specified")
    if len(args) > 1:
        raise ValueError("only one work name can be specified")
    return args[0]


def delete_work(
    client: MemoryClient,
    cluster: str,
    work_name: str,
    force: bool = False,
    out: TextIO | None = None,
    timeout: float = DEFAULT_WORK_TIMEOUT,
) -> None:
    """Delete a manifest work in a cluster namespace and wait for it to go.

    With force, finalizers still on the work are removed so that it can go.
    """
    out = out if out is not None else sys.stdout

    try:
        client.get(_MANIFEST_WORK, work_name, cluster)
    except NotFoundError:
        out.write(f"work {work_name} not found or is already deleted\n")
        return

    try:
        client.delete(_MANIFEST_WORK, work_name, cluster)
    except NotFoundError:
        pass

    if force:
        try:
            work = client.get(_MANIFEST_WORK, work_name, cluster)
        except NotFoundError:
            out.write(f"work {work_name} is deleted\n")
            return
        metadata = work.setdefault("metadata", {})
        if metadata.get("finalizers"):
            metadata["finalizers"] = []
            client.update(work)

    if not _wait_until_deleted(client, _MANIFEST_WORK, work_name, cluster, timeout):
        raise DeleteTimeoutError(f"delete work {work_name} timeout, failed to delete")

    out.write(f"work {work_name} in cluster {cluster} is deleted\n")


def delete_work_in_clusters(
    client: MemoryClient,
    clusters: Iterable[str],
    work_name: str,
    force: bool = False,
    out: TextIO | None = None,
    timeout: float = DEFAULT_WORK_TIMEOUT,
) -> None:
    """Delete the work in every cluster, then raise the collected errors, if any."""
    errors: list[Exception] = []
    for cluster in sorted(set(clusters)):
        try:
            delete_work(client, cluster, work_name, force, out, timeout)
        except ApiError as err:
            errors.append(err)
    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise ApiError("[" + ", ".join(str(e) for e in errors) + "]") from errors[0]