import pytest

from ocmadm.kubeconfig import (
    Cluster,
    Config,
    Context,
    KubeconfigError,
    dump_kubeconfig,
    load_current_cluster,
    load_kubeconfig,
)

KUBECONFIG = """\
apiVersion: v1
clusters:
- cluster:
    server: https://localhost:8443
  name: localhost
contexts:
- context:
    cluster: localhost
    user: admin
  name: admin
current-context: admin
kind: Config
users:
- name: admin
  user:
    token: token
"""


@pytest.fixture
def kubeconfig_path(tmp_path):
    path = tmp_path / "kubeconfig"
    path.write_text(KUBECONFIG)
    return path


def test_load_current_cluster(kubeconfig_path):
    config = load_kubeconfig(kubeconfig_path)
    assert load_current_cluster(config) == Cluster(
        server="https://localhost:8443",
        location_of_origin=str(kubeconfig_path),
    )


def test_missing_file(tmp_path):
    path = tmp_path / "invalid_path"
    with pytest.raises(KubeconfigError, match="no such file or directory"):
        load_kubeconfig(path)


def test_missing_context():
    config = Config(current_context="nope")
    with pytest.raises(KubeconfigError, match="Current Context in Contexts"):
        load_current_cluster(config)


def test_missing_cluster():
    config = Config(current_context="a", contexts={"a": Context(cluster="gone")})
    with pytest.raises(KubeconfigError, match="CurrentContext Cluster in Clusters"):
        load_current_cluster(config)


def test_round_trip(tmp_path):
    config = Config(
        current_context="ctx",
        clusters={"c": Cluster(server="https://10.0.0.1:6443", certificate_authority_data=b"CA", tls_server_name="hub")},
        contexts={"ctx": Context(cluster="c", user="u", namespace="ns")},
        users={"u": {"token": "token"}},
    )
    path = tmp_path / "out"
    path.write_text(dump_kubeconfig(config))
    loaded = load_kubeconfig(path)
    assert loaded.current_context == "ctx"
    assert loaded.contexts == config.contexts
    assert loaded.users == {"u": {"token": "token"}}
    cluster = loaded.clusters["c"]
    assert cluster.server == "https://10.0.0.1:6443"
    assert cluster.certificate_authority_data == b"CA"
    assert cluster.tls_server_name == "hub"


def test_relative_certificate_authority_is_resolved(tmp_path):
    path = tmp_path / "kc"
    path.write_text("clusters:\n- name: c\n  cluster:\n    server: https://x\n    certificate-authority: ca.crt\n")
    assert load_kubeconfig(path).clusters["c"].certificate_authority == str(tmp_path / "ca.crt")


def test_invalid_certificate_data(tmp_path):
    path = tmp_path / "kc"
    path.write_text("clusters:\n- name: c\n  cluster:\n    certificate-authority-data: '***'\n")
    with pytest.raises(KubeconfigError, match="certificate-authority-data"):
        load_kubeconfig(path)


def test_not_a_mapping(tmp_path):
    path = tmp_path / "kc"
    path.write_text("- a\n- b\n")
    with pytest.raises(KubeconfigError, match="not a mapping"):
        load_kubeconfig(path)