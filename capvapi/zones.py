"""Cluster-scoped placement resources: failure domains and the deployment
zones that place machines within them."""

import enum
from dataclasses import dataclass

from capvapi.jsonfields import json_field
from capvapi.resources import _ListMeta
from capvapi.types import Condition, ObjectMeta


class FailureDomainType(str, enum.Enum):
    """The vSphere construct that a failure domain maps to."""

    HOST_GROUP = "HostGroup"
    COMPUTE_CLUSTER = "ComputeCluster"
    DATACENTER = "Datacenter"

    def __str__(self) -> str:
        return self.value


# --- VSphereFailureDomain -------------------------------------------------


@dataclass
class FailureDomain:
    """The name and type of a region or zone."""

    name: str = json_field("name", default="")
    type: str = json_field("type", default="")
    tag_category: str = json_field("tagCategory", default="")
    auto_configure: bool | None = json_field("autoConfigure", omitempty=True, default=None)


@dataclass
class FailureDomainHostGroup:
    """A host group used as a failure domain."""

    name: str = json_field("name", default="")
    auto_configure: bool | None = json_field("autoConfigure", omitempty=True, default=None)


@dataclass
class Topology:
    """The vSphere constructs that describe a failure domain."""

    datacenter: str = json_field("datacenter", default="")
    compute_cluster: str | None = json_field("computeCluster", omitempty=True, default=None)
    host_group: FailureDomainHostGroup | None = json_field(
        "hostGroup", omitempty=True, default=None
    )


@dataclass
class VSphereFailureDomainSpec:
    """Desired state of a VSphereFailureDomain."""

    region: FailureDomain = json_field("region", default_factory=FailureDomain)
    zone: FailureDomain = json_field("zone", default_factory=FailureDomain)
    topology: Topology = json_field("topology", default_factory=Topology)


@dataclass
class VSphereFailureDomain:
    """A failure domain described in vSphere terms."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: ObjectMeta = json_field("metadata", omitempty=True, default_factory=ObjectMeta)
    spec: VSphereFailureDomainSpec = json_field(
        "spec", omitempty=True, default_factory=VSphereFailureDomainSpec
    )


@dataclass
class VSphereFailureDomainList:
    """A list of VSphereFailureDomain objects."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: _ListMeta = json_field("metadata", omitempty=True, default_factory=_ListMeta)
    items: list[VSphereFailureDomain] = json_field("items", default_factory=list)


# --- VSphereDeploymentZone ------------------------------------------------


@dataclass
class Network:
    """Networking of a deployment zone."""

    network_name: str = json_field("networkName", omitempty=True, default="")
    dhcp4: bool | None = json_field("dhcp4", omitempty=True, default=None)
    dhcp6: bool | None = json_field("dhcp6", omitempty=True, default=None)


@dataclass
class PlacementConstraint:
    """Where VMs are placed within a failure domain."""

    resource_pool: str = json_field("resourcePool", omitempty=True, default="")
    datastore: str = json_field("datastore", omitempty=True, default="")
    network: list[Network] = json_field("Network", omitempty=True, default_factory=list)
    folder: str = json_field("folder", omitempty=True, default="")


@dataclass
class VSphereDeploymentZoneSpec:
    """Desired state of a VSphereDeploymentZone."""

    server: str = json_field("server", omitempty=True, default="")
    failure_domain: str = json_field("failureDomain", omitempty=True, default="")
    control_plane: bool | None = json_field("controlPlane", omitempty=True, default=None)
    placement_constraint: PlacementConstraint = json_field(
        "placementConstraint", default_factory=PlacementConstraint
    )


@dataclass
class VSphereDeploymentZoneStatus:
    """Observed state of a VSphereDeploymentZone."""

    ready: bool | None = json_field("ready", omitempty=True, default=None)
    conditions: list[Condition] = json_field("conditions", omitempty=True, default_factory=list)


@dataclass
class VSphereDeploymentZone:
    """A zone in which machines are deployed, bound to a failure domain."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: ObjectMeta = json_field("metadata", omitempty=True, default_factory=ObjectMeta)
    spec: VSphereDeploymentZoneSpec = json_field(
        "spec", omitempty=True, default_factory=VSphereDeploymentZoneSpec
    )
    status: VSphereDeploymentZoneStatus = json_field(
        "status", omitempty=True, default_factory=VSphereDeploymentZoneStatus
    )


@dataclass
class VSphereDeploymentZoneList:
    """A list of VSphereDeploymentZone objects."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: _ListMeta = json_field("metadata", omitempty=True, default_factory=_ListMeta)
    items: list[VSphereDeploymentZone] = json_field("items", default_factory=list)