import pytest

from capvapi.cloudprovider import (
    CPICloudConfig,
    CPIConfig,
    CPIDiskConfig,
    CPIGlobalConfig,
    CPILabelConfig,
    CPINetworkConfig,
    CPIProviderConfig,
    CPIStorageConfig,
    CPIVCenterConfig,
    CPIWorkspaceConfig,
    IniError,
    is_empty,
    is_not_empty,
)
from capvapi.jsonfields import from_dict, to_dict


def _sample_config():
    password = "password"
    return CPIConfig(
        global_=CPIGlobalConfig(
            insecure=True,
            round_tripper_count=3,
            username="admin",
            password=password,
            port="443",
            api_disable=True,
            cluster_id="ns/cluster",
        ),
        vcenter={
            "vc-b": CPIVCenterConfig(datacenters="dc2", port="8443"),
            "vc-a": CPIVCenterConfig(username="ops", round_tripper_count=5),
        },
        network=CPINetworkConfig(name="VM Network"),
        disk=CPIDiskConfig(scsi_controller_type="pvscsi"),
        workspace=CPIWorkspaceConfig(
            server="vc-a", datacenter="dc1", folder="f", datastore="ds", resource_pool="rp"
        ),
        labels=CPILabelConfig(zone="k8s-zone", region="k8s-region"),
    )


def test_marshal_empty_config_is_empty():
    assert CPIConfig().marshal_ini() == b""


def test_marshal_pinned_output():
    password = "password"
    cfg = CPIConfig(
        global_=CPIGlobalConfig(insecure=True, username="admin", password=password, port="443"),
        vcenter={"10.0.0.1": CPIVCenterConfig(datacenters="dc1")},
        network=CPINetworkConfig(name="VM Network"),
    )
    expected = (
        b"[Global]\n"
        b"insecure-flag = true\n"
        b'user = "admin"\n'
        b'password = "password"\n'
        b'port = "443"\n'
        b"\n"
        b'[VirtualCenter "10.0.0.1"]\n'
        b'datacenters = "dc1"\n'
        b"\n"
        b"[Network]\n"
        b'public-network = "VM Network"\n'
        b"\n"
    )
    assert cfg.marshal_ini() == expected


def test_marshal_escapes_quotes_backslashes_and_tabs():
    cfg = CPIConfig(disk=CPIDiskConfig(scsi_controller_type='a"b\\c\td'))
    assert cfg.marshal_ini() == b'[Disk]\nscsicontrollertype = "a\\"b\\\\c\\td"\n\n'


def test_marshal_sorts_vcenters_and_orders_sections():
    text = _sample_config().marshal_ini().decode()
    positions = [
        text.index("[Global]"),
        text.index('[VirtualCenter "vc-a"]'),
        text.index('[VirtualCenter "vc-b"]'),
        text.index("[Network]"),
        text.index("[Disk]"),
        text.index("[Workspace]"),
        text.index("[Labels]"),
    ]
    assert positions == sorted(positions)


def test_marshal_skips_false_pointer_bool():
    cfg = CPIConfig(global_=CPIGlobalConfig(username="u", api_disable=False))
    assert b"api-disable" not in cfg.marshal_ini()
    cfg.global_.api_disable = True
    assert b"api-disable = true" in cfg.marshal_ini()


def test_marshal_omits_provider_config():
    cfg = CPIConfig(
        provider_config=CPIProviderConfig(cloud=CPICloudConfig(controller_image="img"))
    )
    assert cfg.marshal_ini() == b""


def test_round_trip():
    original = _sample_config()
    restored = CPIConfig()
    restored.unmarshal_ini(original.marshal_ini())
    assert restored == original


def test_round_trip_with_escapes():
    original = CPIConfig(workspace=CPIWorkspaceConfig(folder='x "y" \\z\tw'))
    restored = CPIConfig()
    restored.unmarshal_ini(original.marshal_ini())
    assert restored.workspace.folder == 'x "y" \\z\tw'


def test_unmarshal_preserves_provider_config():
    provider = CPIProviderConfig(storage=CPIStorageConfig(attacher_image="att"))
    cfg = CPIConfig(provider_config=provider, labels=CPILabelConfig(zone="old"))
    cfg.unmarshal_ini("[Labels]\nregion = r\n")
    assert cfg.provider_config == provider
    assert cfg.labels == CPILabelConfig(region="r")


def test_unmarshal_accepts_str_and_comments():
    cfg = CPIConfig()
    cfg.unmarshal_ini(
        "; leading comment\n"
        "[global]\n"
        "# another comment\n"
        "USER = admin ; trailing comment\n"
        'port = "44;3"\n'
    )
    assert cfg.global_.username == "admin"
    assert cfg.global_.port == "44;3"


def test_unmarshal_blank_bool_is_true():
    cfg = CPIConfig()
    cfg.unmarshal_ini(b"[Global]\ninsecure-flag\n")
    assert cfg.global_.insecure is True


@pytest.mark.parametrize("word,expected", [("yes", True), ("off", False), ("0", False)])
def test_unmarshal_bool_words(word, expected):
    cfg = CPIConfig()
    cfg.unmarshal_ini(f"[Global]\napi-disable = {word}\n")
    assert cfg.global_.api_disable is expected


def test_unmarshal_repeated_subsection_merges():
    cfg = CPIConfig()
    cfg.unmarshal_ini('[VirtualCenter "vc"]\nuser = a\n[VirtualCenter "vc"]\nport = 1\n')
    assert cfg.vcenter == {"vc": CPIVCenterConfig(username="a", port="1")}


def test_unknown_variable_is_ignored_by_default():
    cfg = CPIConfig()
    cfg.unmarshal_ini('[Labels]\nzone = "a"\nbogus = 1\n')
    assert cfg.labels.zone == "a"


def test_unknown_variable_fatal_leaves_config_untouched():
    cfg = CPIConfig(labels=CPILabelConfig(zone="z"))
    with pytest.raises(IniError):
        cfg.unmarshal_ini('[Labels]\nzone = "a"\nbogus = 1\n', warn_as_fatal=True)
    assert cfg.labels.zone == "z"


def test_unknown_section():
    cfg = CPIConfig()
    cfg.unmarshal_ini("[Nope]\nx = 1\n[Disk]\nscsicontrollertype = lsi\n")
    assert cfg.disk.scsi_controller_type == "lsi"
    with pytest.raises(IniError):
        CPIConfig().unmarshal_ini("[Nope]\nx = 1\n", warn_as_fatal=True)


@pytest.mark.parametrize(
    "text",
    [
        "[Global\n",
        "user = a\n",
        "[Global]\nuser a\n",
        '[Global]\nuser = "open\n',
        "[Global]\nsoap-roundtrip-count = many\n",
        "[Global]\nsoap-roundtrip-count = 2147483648\n",
        "[Global]\ninsecure-flag = maybe\n",
        "[Global]\nuser\n",
        '[Global "sub"]\n',
        "[VirtualCenter]\n",
    ],
)
def test_fatal_errors(text):
    with pytest.raises(IniError):
        CPIConfig().unmarshal_ini(text)


def test_is_empty():
    assert is_empty(CPIConfig())
    assert is_empty(CPIGlobalConfig(api_disable=False))
    assert not is_empty(CPIGlobalConfig(api_disable=True))
    assert is_not_empty(CPIProviderConfig(cloud=CPICloudConfig(extra_args={"a": "b"})))
    assert is_empty(CPIProviderConfig(cloud=CPICloudConfig()))
    assert is_empty(None)


def test_is_empty_rejects_unknown_kinds():
    with pytest.raises(TypeError):
        is_empty(object())


def test_marshal_cloud_provider_args():
    assert CPICloudConfig().marshal_cloud_provider_args() == [
        "--v=2",
        "--cloud-provider=vsphere",
        "--cloud-config=/etc/cloud/vsphere.conf",
    ]
    args = CPICloudConfig(extra_args={"foo": "bar"}).marshal_cloud_provider_args()
    assert args[-1] == "--foo=bar"
    assert len(args) == 4


def test_json_skips_cluster_id():
    assert to_dict(CPIGlobalConfig(cluster_id="c", username="u")) == {"username": "u"}


def test_json_round_trip():
    original = _sample_config()
    original.global_.cluster_id = ""
    original.provider_config = CPIProviderConfig(
        cloud=CPICloudConfig(controller_image="img", extra_args={"k": "v"})
    )
    data = to_dict(original)
    assert data["virtualCenter"]["vc-a"]["username"] == "ops"
    assert from_dict(CPIConfig, data) == original