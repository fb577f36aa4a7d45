"""Preflight checks, hub add-on planning, resource reports and deletion for multicluster hubs."""

__version__ = "0.1.0"

__all__ = [
    "client",
    "kubeconfig",
    "preflight",
    "hubaddon",
    "tables",
    "clusters",
    "works",
    "placements",
    "addons",
    "delete",
]