import pytest

from ocmadm.client import ApiError, MemoryClient
from ocmadm.hubaddon import (
    APP_MGR_ADDON_NAME,
    POLICY_FRAMEWORK_ADDON_NAME,
    Values,
    create_namespace,
    deployment_files,
    parse_addon_names,
    validate_names,
)


def test_validate_invalid_addon_name():
    with pytest.raises(ValueError, match="invalid add-on name no-such-addon"):
        validate_names("no-such-addon")


def test_validate_missing_names():
    with pytest.raises(ValueError, match="names is missing"):
        validate_names("")


def test_validate_does_not_trim():
    with pytest.raises(ValueError, match="invalid add-on name  governance-policy-framework"):
        validate_names("application-manager, governance-policy-framework")


def test_validate_accepts_builtin_names():
    validate_names("application-manager,governance-policy-framework")
    assert parse_addon_names("application-manager,governance-policy-framework") == [
        APP_MGR_ADDON_NAME,
        POLICY_FRAMEWORK_ADDON_NAME,
    ]


def test_parse_drops_repeats():
    assert parse_addon_names("application-manager,application-manager") == ["application-manager"]


def test_parse_trims_but_dedupes_raw_names():
    assert parse_addon_names("application-manager, application-manager") == [
        "application-manager",
        "application-manager",
    ]


def test_unknown_addon_has_no_files():
    assert deployment_files("no-such-addon") is None


def test_policy_framework_files():
    files = deployment_files(POLICY_FRAMEWORK_ADDON_NAME)
    assert "addon/appmgr/crd_placementrule.yaml" in files.crd_files
    assert files.deployment_files == (
        "addon/policy/addon-controller_deployment.yaml",
        "addon/policy/propagator_deployment.yaml",
    )
    assert len(files.config_files) == 13


def test_application_manager_files():
    files = deployment_files(APP_MGR_ADDON_NAME)
    assert files.crd_files[0] == "addon/appmgr/crd_channel.yaml"
    assert len(files.crd_files) == 7
    assert len(files.deployment_files) == 4


def test_values_defaults():
    values = Values()
    assert values.namespace == "open-cluster-management"
    assert values.hub_addons == []
    assert values.create_namespace is False


def test_create_namespace_when_missing():
    client = MemoryClient()
    create_namespace(client, "addons")
    assert [a.verb for a in client.actions] == ["get", "create"]
    assert client.get("Namespace", "addons")["metadata"]["name"] == "addons"


def test_create_namespace_when_present():
    client = MemoryClient([{"kind": "Namespace", "metadata": {"name": "addons"}}])
    create_namespace(client, "addons")
    assert [a.verb for a in client.actions] == ["get"]


def test_create_namespace_create_failure():
    client = MemoryClient(failures={("create", "Namespace"): ApiError("denied")})
    with pytest.raises(ApiError, match="failed to create namespace addons: denied"):
        create_namespace(client, "addons")


def test_create_namespace_get_failure():
    client = MemoryClient(failures={("get", "Namespace"): ApiError("denied")})
    with pytest.raises(ApiError, match="failed to get namespace addons: denied"):
        create_namespace(client, "addons")