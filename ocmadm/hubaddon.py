"""Built-in hub add-ons and the resources that install them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ocmadm.client import ApiError, MemoryClient, NotFoundError

APP_MGR_ADDON_NAME = "application-manager"
POLICY_FRAMEWORK_ADDON_NAME = "governance-policy-framework"
DEFAULT_NAMESPACE = "open-cluster-management"

_POLICY_DIR = "policy"
_APPMGR_DIR = "appmgr"
_POLICY_CRD_PREFIX = "policy.open-cluster-management.io_"


@dataclass(frozen=True)
class AddonDeploymentFiles:
    """Manifest files of one add-on; they are applied as CRDs, then config, then deployments."""

    config_files: tuple[str, ...] = ()
    deployment_files: tuple[str, ...] = ()
    crd_files: tuple[str, ...] = ()


@dataclass
class Values:
    """The values used when rendering add-on manifests."""

    hub_addons: list[str] = field(default_factory=list)
    namespace: str = DEFAULT_NAMESPACE
    bundle_version: Any = None
    create_namespace: bool = False


def _manifests(directory: str, *stems: str) -> tuple[str, ...]:
    """Paths of the YAML manifests with the given stems in an add-on directory."""
    return tuple(f"addon/{directory}/{stem}.yaml" for stem in stems)


def _prefixed(prefix: str, *names: str) -> list[str]:
    return [prefix + name for name in names]


def _policy_framework_files() -> AddonDeploymentFiles:
    config = (
        _prefixed("addon-controller_", "clusterrole", "clusterrolebinding", "role",
                  "rolebinding", "serviceaccount")
        + _prefixed("propagator_", "clusterrole", "clusterrolebinding", "role",
                    "rolebinding", "service", "serviceaccount")
        + _prefixed("clustermanagementaddon_", "configpolicy", "policyframework")
    )
    crds = _prefixed(_POLICY_CRD_PREFIX, "placementbindings", "policies",
                     "policyautomations", "policysets")
    return AddonDeploymentFiles(
        config_files=_manifests(_POLICY_DIR, *config),
        crd_files=_manifests(_POLICY_DIR, *crds)
        + _manifests(_APPMGR_DIR, "crd_placementrule"),
        deployment_files=_manifests(
            _POLICY_DIR, *_prefixed("", "addon-controller_deployment", "propagator_deployment")
        ),
    )


def _application_manager_files() -> AddonDeploymentFiles:
    config = [
        "clustermanagementaddon_appmgr",
        *_prefixed("clusterrole_", "agent", "binding"),
        "clusterrole",
        *_prefixed("service_", "account", "metrics", "operator"),
        "mutatingwebhookconfiguration",
    ]
    crds = _prefixed("crd_", "channel", "helmrelease", "placementrule", "subscription",
                     "subscriptionstatuses", "report", "clusterreport")
    deployments = _prefixed("deployment_", "channel", "subscription", "placementrule",
                            "appsubsummary")
    return AddonDeploymentFiles(
        config_files=_manifests(_APPMGR_DIR, *config),
        crd_files=_manifests(_APPMGR_DIR, *crds),
        deployment_files=_manifests(_APPMGR_DIR, *deployments),
    )


ADDON_DEPLOYMENT_FILES: dict[str, AddonDeploymentFiles] = {
    POLICY_FRAMEWORK_ADDON_NAME: _policy_framework_files(),
    APP_MGR_ADDON_NAME: _application_manager_files(),
}


def validate_names(names: str) -> None:
    """Raise ValueError unless every comma separated name is a built-in add-on."""
    if not names:
        raise ValueError("names is missing")
    for name in names.split(","):
        if name not in ADDON_DEPLOYMENT_FILES:
            raise ValueError(f"invalid add-on name {name}")


def parse_addon_names(names: str) -> list[str]:
    """Split comma separated names, dropping repeats and trimming whitespace."""
    seen: set[str] = set()
    addons = []
    for name in names.split(","):
        if name not in seen:
            seen.add(name)
            addons.append(name.strip())
    return addons


def deployment_files(addon: str) -> AddonDeploymentFiles | None:
    """The manifest files of a built-in add-on, or None for an unknown one."""
    return ADDON_DEPLOYMENT_FILES.get(addon)


def create_namespace(client: MemoryClient, namespace: str) -> None:
    """Create the namespace unless it exists already."""
    try:
        client.get("Namespace", namespace)
    except NotFoundError:
        try:
            client.create({"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": namespace}})
        except ApiError as err:
            raise ApiError(f"failed to create namespace {namespace}: {err}") from err
    except ApiError as err:
        raise ApiError(f"failed to get namespace {namespace}: {err}") from err