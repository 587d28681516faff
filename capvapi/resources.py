"""Namespaced infrastructure resources: clusters, machines, machine
templates, virtual machines and HAProxy load balancers, with their lists."""

from dataclasses import dataclass

from capvapi.cloudprovider import CPIConfig
from capvapi.jsonfields import json_field
from capvapi.types import (
    APIEndpoint,
    Condition,
    MachineAddress,
    NetworkStatus,
    ObjectMeta,
    SSHUser,
    VirtualMachineCloneSpec,
)

#: Lets the cluster reconciler clean up before a VSphereCluster is removed.
CLUSTER_FINALIZER = "vspherecluster.infrastructure.cluster.x-k8s.io"

#: Lets the machine reconciler clean up before a VSphereMachine is removed.
MACHINE_FINALIZER = "vspheremachine.infrastructure.cluster.x-k8s.io"

#: Lets the VM reconciler clean up before a VSphereVM is removed.
VM_FINALIZER = "vspherevm.infrastructure.cluster.x-k8s.io"

#: Lets the load balancer reconciler clean up before an HAProxyLoadBalancer is removed.
HAPROXY_LOAD_BALANCER_FINALIZER = "haproxyloadbalancer.infrastructure.cluster.x-k8s.io"


@dataclass
class _ListMeta:
    """Metadata of a list of API objects."""

    resource_version: str = json_field("resourceVersion", omitempty=True, default="")
    continue_: str = json_field("continue", omitempty=True, default="")
    remaining_item_count: int | None = json_field(
        "remainingItemCount", omitempty=True, default=None
    )


@dataclass
class _FailureDomainSpec:
    """A failure domain as reported by the infrastructure."""

    control_plane: bool = json_field("controlPlane", omitempty=True, default=False)
    attributes: dict[str, str] = json_field("attributes", omitempty=True, default_factory=dict)


@dataclass
class ObjectReference:
    """A reference to another API object."""

    kind: str = json_field("kind", omitempty=True, default="")
    namespace: str = json_field("namespace", omitempty=True, default="")
    name: str = json_field("name", omitempty=True, default="")
    uid: str = json_field("uid", omitempty=True, default="")
    api_version: str = json_field("apiVersion", omitempty=True, default="")
    resource_version: str = json_field("resourceVersion", omitempty=True, default="")
    field_path: str = json_field("fieldPath", omitempty=True, default="")


# --- VSphereCluster -------------------------------------------------------


@dataclass
class VSphereClusterSpec:
    """Desired state of a VSphereCluster."""

    server: str = json_field("server", omitempty=True, default="")
    insecure: bool | None = json_field("insecure", omitempty=True, default=None)
    thumbprint: str = json_field("thumbprint", omitempty=True, default="")
    cloud_provider_configuration: CPIConfig = json_field(
        "cloudProviderConfiguration", omitempty=True, default_factory=CPIConfig
    )
    control_plane_endpoint: APIEndpoint = json_field(
        "controlPlaneEndpoint", default_factory=APIEndpoint
    )
    load_balancer_ref: ObjectReference | None = json_field(
        "loadBalancerRef", omitempty=True, default=None
    )


@dataclass
class VSphereClusterStatus:
    """Observed state of a VSphereCluster."""

    ready: bool = json_field("ready", omitempty=True, default=False)
    conditions: list[Condition] = json_field("conditions", omitempty=True, default_factory=list)
    failure_domains: dict[str, _FailureDomainSpec] = json_field(
        "failureDomains", omitempty=True, default_factory=dict
    )


@dataclass
class VSphereCluster:
    """A cluster's vSphere infrastructure."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: ObjectMeta = json_field("metadata", omitempty=True, default_factory=ObjectMeta)
    spec: VSphereClusterSpec = json_field(
        "spec", omitempty=True, default_factory=VSphereClusterSpec
    )
    status: VSphereClusterStatus = json_field(
        "status", omitempty=True, default_factory=VSphereClusterStatus
    )


@dataclass
class VSphereClusterList:
    """A list of VSphereCluster objects."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: _ListMeta = json_field("metadata", omitempty=True, default_factory=_ListMeta)
    items: list[VSphereCluster] = json_field("items", default_factory=list)


# --- VSphereMachine -------------------------------------------------------


@dataclass
class VSphereMachineSpec(VirtualMachineCloneSpec):
    """Desired state of a VSphereMachine; the clone spec is inlined."""

    provider_id: str | None = json_field("providerID", omitempty=True, default=None)
    failure_domain: str | None = json_field("failureDomain", omitempty=True, default=None)


@dataclass
class VSphereMachineStatus:
    """Observed state of a VSphereMachine."""

    ready: bool = json_field("ready", default=False)
    addresses: list[MachineAddress] = json_field(
        "addresses", omitempty=True, default_factory=list
    )
    network: list[NetworkStatus] = json_field("network", omitempty=True, default_factory=list)
    failure_reason: str | None = json_field("failureReason", omitempty=True, default=None)
    failure_message: str | None = json_field("failureMessage", omitempty=True, default=None)
    conditions: list[Condition] = json_field("conditions", omitempty=True, default_factory=list)


@dataclass
class VSphereMachine:
    """A machine backed by a vSphere virtual machine."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: ObjectMeta = json_field("metadata", omitempty=True, default_factory=ObjectMeta)
    spec: VSphereMachineSpec = json_field(
        "spec", omitempty=True, default_factory=VSphereMachineSpec
    )
    status: VSphereMachineStatus = json_field(
        "status", omitempty=True, default_factory=VSphereMachineStatus
    )


@dataclass
class VSphereMachineList:
    """A list of VSphereMachine objects."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: _ListMeta = json_field("metadata", omitempty=True, default_factory=_ListMeta)
    items: list[VSphereMachine] = json_field("items", default_factory=list)


# --- VSphereVM ------------------------------------------------------------


@dataclass
class VSphereVMSpec(VirtualMachineCloneSpec):
    """Desired state of a VSphereVM; the clone spec is inlined."""

    bootstrap_ref: ObjectReference | None = json_field(
        "bootstrapRef", omitempty=True, default=None
    )
    bios_uuid: str = json_field("biosUUID", omitempty=True, default="")


@dataclass
class VSphereVMStatus:
    """Observed state of a VSphereVM."""

    ready: bool = json_field("ready", omitempty=True, default=False)
    addresses: list[str] = json_field("addresses", omitempty=True, default_factory=list)
    clone_mode: str = json_field("cloneMode", omitempty=True, default="")
    snapshot: str = json_field("snapshot", omitempty=True, default="")
    task_ref: str = json_field("taskRef", omitempty=True, default="")
    network: list[NetworkStatus] = json_field("network", omitempty=True, default_factory=list)
    failure_reason: str | None = json_field("failureReason", omitempty=True, default=None)
    failure_message: str | None = json_field("failureMessage", omitempty=True, default=None)
    conditions: list[Condition] = json_field("conditions", omitempty=True, default_factory=list)


@dataclass
class VSphereVM:
    """A vSphere virtual machine."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: ObjectMeta = json_field("metadata", omitempty=True, default_factory=ObjectMeta)
    spec: VSphereVMSpec = json_field("spec", omitempty=True, default_factory=VSphereVMSpec)
    status: VSphereVMStatus = json_field(
        "status", omitempty=True, default_factory=VSphereVMStatus
    )


@dataclass
class VSphereVMList:
    """A list of VSphereVM objects."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: _ListMeta = json_field("metadata", omitempty=True, default_factory=_ListMeta)
    items: list[VSphereVM] = json_field("items", default_factory=list)


# --- VSphereMachineTemplate -----------------------------------------------


@dataclass
class VSphereMachineTemplateResource:
    """The data needed to create a VSphereMachine from a template."""

    spec: VSphereMachineSpec = json_field("spec", default_factory=VSphereMachineSpec)


@dataclass
class VSphereMachineTemplateSpec:
    """Desired state of a VSphereMachineTemplate."""

    template: VSphereMachineTemplateResource = json_field(
        "template", default_factory=VSphereMachineTemplateResource
    )


@dataclass
class VSphereMachineTemplate:
    """A template from which VSphereMachines are created."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: ObjectMeta = json_field("metadata", omitempty=True, default_factory=ObjectMeta)
    spec: VSphereMachineTemplateSpec = json_field(
        "spec", omitempty=True, default_factory=VSphereMachineTemplateSpec
    )


@dataclass
class VSphereMachineTemplateList:
    """A list of VSphereMachineTemplate objects."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: _ListMeta = json_field("metadata", omitempty=True, default_factory=_ListMeta)
    items: list[VSphereMachineTemplate] = json_field("items", default_factory=list)


# --- HAProxyLoadBalancer --------------------------------------------------


@dataclass
class HAProxyLoadBalancerSpec:
    """Desired state of an HAProxyLoadBalancer."""

    virtual_machine_configuration: VirtualMachineCloneSpec = json_field(
        "virtualMachineConfiguration", default_factory=VirtualMachineCloneSpec
    )
    user: SSHUser | None = json_field("user", omitempty=True, default=None)


@dataclass
class HAProxyLoadBalancerStatus:
    """Observed state of an HAProxyLoadBalancer."""

    ready: bool = json_field("ready", omitempty=True, default=False)
    address: str = json_field("address", omitempty=True, default="")


@dataclass
class HAProxyLoadBalancer:
    """A control plane load balancer run on an HAProxy VM."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: ObjectMeta = json_field("metadata", omitempty=True, default_factory=ObjectMeta)
    spec: HAProxyLoadBalancerSpec = json_field(
        "spec", omitempty=True, default_factory=HAProxyLoadBalancerSpec
    )
    status: HAProxyLoadBalancerStatus = json_field(
        "status", omitempty=True, default_factory=HAProxyLoadBalancerStatus
    )


@dataclass
class HAProxyLoadBalancerList:
    """A list of HAProxyLoadBalancer objects."""

    api_version: str = json_field("apiVersion", omitempty=True, default="")
    kind: str = json_field("kind", omitempty=True, default="")
    metadata: _ListMeta = json_field("metadata", omitempty=True, default_factory=_ListMeta)
    items: list[HAProxyLoadBalancer] = json_field("items", default_factory=list)