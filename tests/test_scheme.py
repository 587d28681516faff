import dataclasses

import pytest

from capvapi.resources import ObjectReference, VSphereCluster, VSphereVM, VSphereVMList
from capvapi.scheme import (
    GROUP_NAME,
    GROUP_VERSION,
    KINDS,
    VERSION,
    GroupVersion,
    UnknownKindError,
    from_manifest,
    kind_for,
    to_manifest,
)
from capvapi.types import ObjectMeta
from capvapi.zones import Network, VSphereDeploymentZone, VSphereFailureDomain


def test_group_version_api_version():
    assert GROUP_VERSION.api_version() == "infrastructure.cluster.x-k8s.io/v1alpha3"
    assert GROUP_VERSION == GroupVersion(GROUP_NAME, VERSION)


def test_group_version_without_group():
    assert GroupVersion("", "v1").api_version() == "v1"


def test_kind_for_instance_and_class():
    assert kind_for(VSphereVM()) == "VSphereVM"
    assert kind_for(VSphereFailureDomain) == "VSphereFailureDomain"


@pytest.mark.parametrize("obj", [object(), Network(), ObjectReference()])
def test_kind_for_unregistered_raises(obj):
    with pytest.raises(UnknownKindError):
        kind_for(obj)


def test_every_kind_maps_to_itself():
    for kind, cls in KINDS.items():
        assert kind_for(cls) == kind


def test_to_manifest_sets_api_version_and_kind():
    manifest = to_manifest(VSphereCluster(metadata=ObjectMeta(name="c1", namespace="ns")))
    assert manifest["apiVersion"] == GROUP_VERSION.api_version()
    assert manifest["kind"] == "VSphereCluster"
    assert manifest["metadata"] == {"name": "c1", "namespace": "ns"}
    assert list(manifest)[:2] == ["apiVersion", "kind"]


def test_to_manifest_does_not_modify_object():
    vm = VSphereVM()
    to_manifest(vm)
    assert vm.api_version == ""
    assert vm.kind == ""


def test_manifest_round_trip():
    zone = VSphereDeploymentZone(metadata=ObjectMeta(name="z1"))
    decoded = from_manifest(to_manifest(zone))
    assert decoded == dataclasses.replace(
        zone, api_version=GROUP_VERSION.api_version(), kind="VSphereDeploymentZone"
    )
    assert to_manifest(decoded) == to_manifest(zone)


def test_list_manifest_round_trip():
    vms = VSphereVMList(items=[VSphereVM(metadata=ObjectMeta(name="vm1"))])
    decoded = from_manifest(to_manifest(vms))
    assert isinstance(decoded, VSphereVMList)
    assert decoded.items == vms.items


def test_from_manifest_wrong_api_version_raises():
    manifest = to_manifest(VSphereVM())
    manifest["apiVersion"] = "infrastructure.cluster.x-k8s.io/v1alpha4"
    with pytest.raises(UnknownKindError):
        from_manifest(manifest)


def test_from_manifest_unknown_kind_raises():
    with pytest.raises(UnknownKindError):
        from_manifest({"apiVersion": GROUP_VERSION.api_version(), "kind": "Machine"})


def test_from_manifest_missing_kind_raises():
    with pytest.raises(UnknownKindError):
        from_manifest({"apiVersion": GROUP_VERSION.api_version()})


def test_from_manifest_requires_object():
    with pytest.raises(TypeError):
        from_manifest(["VSphereVM"])