"""The API group and version of the infrastructure resources and the
registry of their kinds, used to read and write whole manifests."""

from dataclasses import dataclass
from typing import Any

from capvapi.jsonfields import from_dict, to_dict
from capvapi.resources import (
    HAProxyLoadBalancer,
    HAProxyLoadBalancerList,
    VSphereCluster,
    VSphereClusterList,
    VSphereMachine,
    VSphereMachineList,
    VSphereMachineTemplate,
    VSphereMachineTemplateList,
    VSphereVM,
    VSphereVMList,
)
from capvapi.zones import (
    VSphereDeploymentZone,
    VSphereDeploymentZoneList,
    VSphereFailureDomain,
    VSphereFailureDomainList,
)

#: The API version.
VERSION = "v1alpha3"

#: The name of the API group.
GROUP_NAME = "infrastructure.cluster.x-k8s.io"


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    def api_version(self) -> str:
        """The ``apiVersion`` string: ``group/version``, or the bare version."""
        return f"{self.group}/{self.version}" if self.group else self.version

    def __str__(self) -> str:
        return self.api_version()


#: The group version in which the resources are registered.
GROUP_VERSION = GroupVersion(GROUP_NAME, VERSION)


class UnknownKindError(LookupError):
    """Raised for a type or manifest kind that is not registered."""


_REGISTERED = (
    HAProxyLoadBalancer,
    HAProxyLoadBalancerList,
    VSphereCluster,
    VSphereClusterList,
    VSphereDeploymentZone,
    VSphereDeploymentZoneList,
    VSphereFailureDomain,
    VSphereFailureDomainList,
    VSphereMachine,
    VSphereMachineList,
    VSphereMachineTemplate,
    VSphereMachineTemplateList,
    VSphereVM,
    VSphereVMList,
)

#: Registered kinds mapped to the classes that hold them.
KINDS: dict[str, type] = {cls.__name__: cls for cls in _REGISTERED}


def kind_for(obj) -> str:
    """The registered kind of an object or class."""
    cls = obj if isinstance(obj, type) else type(obj)
    kind = cls.__name__
    if KINDS.get(kind) is not cls:
        raise UnknownKindError(f"no kind is registered for type {cls.__name__}")
    return kind


def to_manifest(obj) -> dict:
    """Encode a registered object with its ``apiVersion`` and ``kind`` set."""
    kind = kind_for(obj)
    body = to_dict(obj)
    body.pop("apiVersion", None)
    body.pop("kind", None)
    return {"apiVersion": GROUP_VERSION.api_version(), "kind": kind, **body}


def from_manifest(data: Any):
    """Decode a manifest of a registered kind in this group version."""
    if not isinstance(data, dict):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    api_version = data.get("apiVersion")
    kind = data.get("kind")
    if api_version != GROUP_VERSION.api_version():
        raise UnknownKindError(
            f"apiVersion {api_version!r} is not {GROUP_VERSION.api_version()!r}"
        )
    cls = KINDS.get(kind) if isinstance(kind, str) else None
    if cls is None:
        raise UnknownKindError(f"no kind {kind!r} is registered in {api_version}")
    return from_dict(cls, data)