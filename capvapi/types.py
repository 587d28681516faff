"""Shared infrastructure API types: virtual machine clone specs, networks,
endpoints, conditions and the constants that go with them."""

import enum
from dataclasses import dataclass

from capvapi.jsonfields import json_field

#: Marks a cluster's infrastructure as ready for machines to be created.
ANNOTATION_CLUSTER_INFRASTRUCTURE_READY = (
    "vsphere.infrastructure.cluster.x-k8s.io/infrastructure-ready"
)

#: Marks a cluster's control plane as ready.
ANNOTATION_CONTROL_PLANE_READY = "vsphere.infrastructure.cluster.x-k8s.io/control-plane-ready"

#: The value of the ready annotations.
VALUE_READY = "true"


class _StrEnum(str, enum.Enum):
    def __str__(self) -> str:
        return self.value


class CloneMode(_StrEnum):
    """How a VM is cloned from its template."""

    FULL_CLONE = "fullClone"
    LINKED_CLONE = "linkedClone"


class VirtualMachineState(_StrEnum):
    """The provisioning state of a VM."""

    NOT_FOUND = "notfound"
    PENDING = "pending"
    READY = "ready"


class VirtualMachinePowerState(_StrEnum):
    """The power state of a VM."""

    POWERED_ON = "poweredOn"
    POWERED_OFF = "poweredOff"
    SUSPENDED = "suspended"


class VSphereMachineProviderConditionType(_StrEnum):
    """Condition types of a machine provider."""

    MACHINE_CREATED = "MachineCreated"


class ConditionType(_StrEnum):
    """Condition types reported on clusters, machines and VMs."""

    LOAD_BALANCER_AVAILABLE = "LoadBalancerAvailable"
    CCM_AVAILABLE = "CCMAvailable"
    CSI_AVAILABLE = "CSIAvailable"
    VCENTER_AVAILABLE = "VCenterAvailable"
    VM_PROVISIONED = "VMProvisioned"


class ConditionReason(_StrEnum):
    """Reasons attached to conditions."""

    LOAD_BALANCER_PROVISIONING = "LoadBalancerProvisioning"
    LOAD_BALANCER_PROVISIONING_FAILED = "LoadBalancerProvisioningFailed"
    CCM_PROVISIONING_FAILED = "CCMProvisioningFailed"
    CSI_PROVISIONING_FAILED = "CSIProvisioningFailed"
    VCENTER_UNREACHABLE = "VCenterUnreachable"
    WAITING_FOR_CLUSTER_INFRASTRUCTURE = "WaitingForClusterInfrastructure"
    WAITING_FOR_BOOTSTRAP_DATA = "WaitingForBootstrapData"
    WAITING_FOR_STATIC_IP_ALLOCATION = "WaitingForStaticIPAllocation"
    CLONING = "Cloning"
    CLONING_FAILED = "CloningFailed"
    POWERING_ON = "PoweringOn"
    POWERING_ON_FAILED = "PoweringOnFailed"
    TASK_FAILURE = "TaskFailure"
    WAITING_FOR_NETWORK_ADDRESSES = "WaitingForNetworkAddresses"


@dataclass
class Condition:
    """An observation of one aspect of an object's state."""

    type: str = json_field("type", default="")
    status: str = json_field("status", default="")
    severity: str = json_field("severity", omitempty=True, default="")
    last_transition_time: str = json_field("lastTransitionTime", omitempty=True, default="")
    reason: str = json_field("reason", omitempty=True, default="")
    message: str = json_field("message", omitempty=True, default="")


@dataclass
class ObjectMeta:
    """Identifying metadata of an API object."""

    name: str = json_field("name", omitempty=True, default="")
    generate_name: str = json_field("generateName", omitempty=True, default="")
    namespace: str = json_field("namespace", omitempty=True, default="")
    uid: str = json_field("uid", omitempty=True, default="")
    resource_version: str = json_field("resourceVersion", omitempty=True, default="")
    generation: int = json_field("generation", omitempty=True, default=0)
    creation_timestamp: str | None = json_field(
        "creationTimestamp", omitempty=True, default=None
    )
    deletion_timestamp: str | None = json_field(
        "deletionTimestamp", omitempty=True, default=None
    )
    labels: dict[str, str] = json_field("labels", omitempty=True, default_factory=dict)
    annotations: dict[str, str] = json_field(
        "annotations", omitempty=True, default_factory=dict
    )
    finalizers: list[str] = json_field("finalizers", omitempty=True, default_factory=list)


@dataclass
class MachineAddress:
    """An address assigned to a machine."""

    type: str = json_field("type", default="")
    address: str = json_field("address", default="")


@dataclass
class APIEndpoint:
    """A reachable Kubernetes API endpoint."""

    host: str = json_field("host", default="")
    port: int = json_field("port", default=0)

    def is_zero(self) -> bool:
        """True if either the host or the port is unset."""
        return self.host == "" or self.port == 0

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class NetworkRouteSpec:
    """A static network route."""

    to: str = json_field("to", default="")
    via: str = json_field("via", default="")
    metric: int = json_field("metric", default=0)


@dataclass
class NetworkDeviceSpec:
    """Network configuration of one of a VM's network devices."""

    network_name: str = json_field("networkName", default="")
    device_name: str = json_field("deviceName", omitempty=True, default="")
    dhcp4: bool = json_field("dhcp4", omitempty=True, default=False)
    dhcp6: bool = json_field("dhcp6", omitempty=True, default=False)
    gateway4: str = json_field("gateway4", omitempty=True, default="")
    gateway6: str = json_field("gateway6", omitempty=True, default="")
    ip_addrs: list[str] = json_field("ipAddrs", omitempty=True, default_factory=list)
    mtu: int | None = json_field("mtu", omitempty=True, default=None)
    mac_addr: str = json_field("macAddr", omitempty=True, default="")
    nameservers: list[str] = json_field("nameservers", omitempty=True, default_factory=list)
    routes: list[NetworkRouteSpec] = json_field("routes", omitempty=True, default_factory=list)
    search_domains: list[str] = json_field(
        "searchDomains", omitempty=True, default_factory=list
    )


@dataclass
class NetworkSpec:
    """A VM's network configuration."""

    devices: list[NetworkDeviceSpec] = json_field("devices", default_factory=list)
    routes: list[NetworkRouteSpec] = json_field("routes", omitempty=True, default_factory=list)
    preferred_api_server_cidr: str = json_field(
        "preferredAPIServerCidr", omitempty=True, default=""
    )


@dataclass
class NetworkStatus:
    """Reported state of one of a VM's networks."""

    connected: bool = json_field("connected", omitempty=True, default=False)
    ip_addrs: list[str] = json_field("ipAddrs", omitempty=True, default_factory=list)
    mac_addr: str = json_field("macAddr", default="")
    network_name: str = json_field("networkName", omitempty=True, default="")


@dataclass
class VirtualMachine:
    """Data about a virtual machine object."""

    name: str = json_field("name", default="")
    bios_uuid: str = json_field("biosUUID", default="")
    state: str = json_field("state", default="")
    network: list[NetworkStatus] = json_field("network", default_factory=list)


@dataclass
class SSHUser:
    """A user granted remote access to a system."""

    name: str = json_field("name", default="")
    authorized_keys: list[str] = json_field("authorizedKeys", default_factory=list)


@dataclass
class VirtualMachineCloneSpec:
    """Information used to clone a virtual machine."""

    template: str = json_field("template", default="")
    clone_mode: str = json_field("cloneMode", omitempty=True, default="")
    snapshot: str = json_field("snapshot", omitempty=True, default="")
    server: str = json_field("server", omitempty=True, default="")
    thumbprint: str = json_field("thumbprint", omitempty=True, default="")
    datacenter: str = json_field("datacenter", omitempty=True, default="")
    folder: str = json_field("folder", omitempty=True, default="")
    datastore: str = json_field("datastore", omitempty=True, default="")
    storage_policy_name: str = json_field("storagePolicyName", omitempty=True, default="")
    resource_pool: str = json_field("resourcePool", omitempty=True, default="")
    network: NetworkSpec = json_field("network", default_factory=NetworkSpec)
    num_cpus: int = json_field("numCPUs", omitempty=True, default=0)
    num_cores_per_socket: int = json_field("numCoresPerSocket", omitempty=True, default=0)
    memory_mib: int = json_field("memoryMiB", omitempty=True, default=0)
    disk_gib: int = json_field("diskGiB", omitempty=True, default=0)
    custom_vmx_keys: dict[str, str] = json_field(
        "customVMXKeys", omitempty=True, default_factory=dict
    )