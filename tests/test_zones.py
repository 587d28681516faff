import pytest

from capvapi.jsonfields import from_dict, to_dict
from capvapi.types import Condition, ObjectMeta
from capvapi.zones import (
    FailureDomain,
    FailureDomainHostGroup,
    FailureDomainType,
    Network,
    PlacementConstraint,
    Topology,
    VSphereDeploymentZone,
    VSphereDeploymentZoneList,
    VSphereDeploymentZoneSpec,
    VSphereDeploymentZoneStatus,
    VSphereFailureDomain,
    VSphereFailureDomainList,
    VSphereFailureDomainSpec,
)


def _failure_domain():
    return VSphereFailureDomain(
        metadata=ObjectMeta(name="fd-a"),
        spec=VSphereFailureDomainSpec(
            region=FailureDomain(
                name="region-a",
                type=FailureDomainType.DATACENTER,
                tag_category="k8s-region",
                auto_configure=True,
            ),
            zone=FailureDomain(
                name="zone-a",
                type=FailureDomainType.HOST_GROUP,
                tag_category="k8s-zone",
            ),
            topology=Topology(
                datacenter="dc0",
                compute_cluster="cluster0",
                host_group=FailureDomainHostGroup(name="hosts-a", auto_configure=False),
            ),
        ),
    )


def _deployment_zone():
    return VSphereDeploymentZone(
        metadata=ObjectMeta(name="zone-a"),
        spec=VSphereDeploymentZoneSpec(
            server="vcenter.example.com",
            failure_domain="fd-a",
            control_plane=True,
            placement_constraint=PlacementConstraint(
                resource_pool="pool",
                datastore="ds",
                network=[Network(network_name="vm-net", dhcp4=True, dhcp6=False)],
                folder="folder",
            ),
        ),
        status=VSphereDeploymentZoneStatus(
            ready=True, conditions=[Condition(type="Ready", status="True")]
        ),
    )


def test_failure_domain_type_values_match_api():
    assert FailureDomainType("HostGroup") is FailureDomainType.HOST_GROUP
    assert FailureDomainType("ComputeCluster") is FailureDomainType.COMPUTE_CLUSTER
    assert FailureDomainType("Datacenter") is FailureDomainType.DATACENTER


def test_failure_domain_type_rejects_unknown():
    with pytest.raises(ValueError):
        FailureDomainType("Rack")


def test_failure_domain_encodes_type_as_string():
    encoded = to_dict(_failure_domain())
    assert encoded["spec"]["region"]["type"] == "Datacenter"
    assert encoded["spec"]["zone"]["type"] == "HostGroup"
    assert encoded["spec"]["region"]["tagCategory"] == "k8s-region"


def test_failure_domain_round_trip():
    original = _failure_domain()
    decoded = from_dict(VSphereFailureDomain, to_dict(original))
    assert decoded == original


def test_empty_topology_omits_optional_fields():
    assert to_dict(Topology(datacenter="dc0")) == {"datacenter": "dc0"}


def test_false_auto_configure_is_kept():
    encoded = to_dict(FailureDomainHostGroup(name="hosts", auto_configure=False))
    assert encoded == {"name": "hosts", "autoConfigure": False}


def test_failure_domain_required_fields_always_encoded():
    encoded = to_dict(FailureDomain())
    assert encoded == {"name": "", "type": "", "tagCategory": ""}


def test_deployment_zone_network_uses_capitalised_key():
    encoded = to_dict(_deployment_zone())
    constraint = encoded["spec"]["placementConstraint"]
    assert constraint["Network"] == [{"networkName": "vm-net", "dhcp4": True, "dhcp6": False}]
    assert "network" not in constraint


def test_deployment_zone_round_trip():
    original = _deployment_zone()
    decoded = from_dict(VSphereDeploymentZone, to_dict(original))
    assert decoded == original


def test_deployment_zone_defaults_omit_optional_fields():
    encoded = to_dict(VSphereDeploymentZone())
    assert encoded["spec"] == {"placementConstraint": {}}
    assert encoded["status"] == {}


def test_deployment_zone_list_round_trip():
    original = VSphereDeploymentZoneList(items=[_deployment_zone(), VSphereDeploymentZone()])
    decoded = from_dict(VSphereDeploymentZoneList, to_dict(original))
    assert decoded == original
    assert len(decoded.items) == 2


def test_failure_domain_list_encodes_items_even_when_empty():
    assert to_dict(VSphereFailureDomainList())["items"] == []


def test_decoding_wrong_type_raises():
    with pytest.raises(TypeError):
        from_dict(Topology, {"datacenter": 5})


def test_decoding_wrong_list_type_raises():
    with pytest.raises(TypeError):
        from_dict(PlacementConstraint, {"Network": {"networkName": "x"}})