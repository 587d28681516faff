# capvapi

Typed Python models for the `infrastructure.cluster.x-k8s.io/v1alpha3` API
group. The group describes vSphere clusters, machines, virtual machines,
machine templates, HAProxy load balancers, deployment zones and failure
domains.

The package also reads and writes the vSphere cloud provider's INI
configuration. It turns resources into plain manifest dictionaries and reads
them back.

## Installation

```
pip install capvapi
```

The package has no runtime dependencies.

## Modules

- `capvapi.types` holds the shared types. These are `APIEndpoint`,
  `NetworkSpec`, `NetworkDeviceSpec`, `NetworkRouteSpec`, `NetworkStatus`,
  `VirtualMachine`, `VirtualMachineCloneSpec`, `SSHUser`, `ObjectMeta`,
  `Condition` and `MachineAddress`. The module also has the enums
  `CloneMode`, `VirtualMachineState`, `VirtualMachinePowerState`,
  `VSphereMachineProviderConditionType`, `ConditionType` and
  `ConditionReason`, and the ready-annotation constants.
- `capvapi.resources` holds the namespaced resources and their lists:
  - `VSphereCluster`
  - `VSphereMachine`
  - `VSphereVM`
  - `VSphereMachineTemplate`
  - `HAProxyLoadBalancer`

  It also has their spec and status classes, `ObjectReference` and the
  finalizer constants.
- `capvapi.zones` holds `VSphereFailureDomain` and `VSphereDeploymentZone`
  with their lists, specs and `FailureDomainType`.
- `capvapi.cloudprovider` holds `CPIConfig` and its section classes. It also
  has the INI encoding, `is_empty` and `is_not_empty`.
- `capvapi.scheme` holds `GroupVersion`, `GROUP_VERSION`, the `KINDS`
  registry, `kind_for`, `to_manifest`, `from_manifest` and
  `UnknownKindError`.
- `capvapi.jsonfields` holds `json_field`, `to_dict` and `from_dict`. The
  models use them to map between dataclasses and JSON data.

## Resources and manifests

Every resource is a dataclass.

- `to_manifest` gives the dictionary you would write out as JSON or YAML. It
  fills in `apiVersion` and `kind`.
- `from_manifest` reads such a dictionary back into the registered class.

```python
from capvapi.resources import VSphereCluster, VSphereClusterSpec
from capvapi.types import APIEndpoint, ObjectMeta
from capvapi.scheme import to_manifest, from_manifest, kind_for

cluster = VSphereCluster(
    metadata=ObjectMeta(name="workload", namespace="default"),
    spec=VSphereClusterSpec(
        server="vcenter.example.com",
        control_plane_endpoint=APIEndpoint(host="10.0.0.10", port=6443),
    ),
)

manifest = to_manifest(cluster)
assert manifest["apiVersion"] == "infrastructure.cluster.x-k8s.io/v1alpha3"
assert manifest["kind"] == kind_for(cluster) == "VSphereCluster"

decoded = from_manifest(manifest)
assert decoded.kind == "VSphereCluster"
assert decoded.spec.control_plane_endpoint == APIEndpoint(host="10.0.0.10", port=6443)
```

The decoded object keeps the manifest's `apiVersion` and `kind` in its
`api_version` and `kind` fields.

`from_manifest` raises `UnknownKindError` in two cases: when the
`apiVersion` is not this group version, and when the `kind` is not
registered. `kind_for` raises `UnknownKindError` for types that are not
registered.

Decoding checks types and raises `TypeError` or `ValueError` on a mismatch.

### JSON field names

Field names on the wire follow the API's JSON names, such as
`controlPlaneEndpoint`, `numCPUs` and `diskGiB`.

Some fields are declared omit-when-empty:

- a field typed `X | None` is left out only when it is `None`;
- any other such field is left out when it is false, zero, an empty string,
  an empty list or an empty dict.

Unknown keys are ignored when decoding.

## Cloud provider configuration

`CPIConfig` holds the cloud provider's `Global`, `VirtualCenter`, `Network`,
`Disk`, `Workspace` and `Labels` sections. It also holds a `provider_config`
that has no INI form.

```python
from capvapi.cloudprovider import CPIConfig, CPIGlobalConfig, CPIVCenterConfig

password = "password"
config = CPIConfig(
    global_=CPIGlobalConfig(username="admin", password=password, insecure=True),
    vcenter={"vcenter.example.com": CPIVCenterConfig(datacenters="dc0")},
)

ini_bytes = config.marshal_ini()

parsed = CPIConfig()
parsed.unmarshal_ini(ini_bytes)
assert parsed.vcenter["vcenter.example.com"].datacenters == "dc0"
```

### Writing INI

`marshal_ini` writes the sections in a fixed order. Virtual center sections
are sorted by name. Empty sections and empty properties are left out.

String values are quoted. Backslashes, double quotes and tabs inside them
are escaped.

### Reading INI

`unmarshal_ini` accepts bytes or text. It replaces the six INI sections and
leaves `provider_config` untouched.

It always raises `IniError` for these:

- malformed lines;
- a variable outside a section;
- a bad subsection;
- an invalid boolean;
- an invalid integer, or one out of the 32-bit range.

It skips unknown sections and variables by default. Pass
`warn_as_fatal=True` to reject them too. The configuration is then left
unchanged.

### Other helpers

`CPICloudConfig.marshal_cloud_provider_args()` builds the command-line
arguments for the cloud controller pod. These are the three fixed arguments
followed by `--key=value` for each entry in `extra_args`.

`is_empty` and `is_not_empty` report whether a configuration value has been
set at all. For a dataclass, every field must be empty. `is_empty` raises
`TypeError` for values of other kinds.

## What the package does not do

The package models and encodes the v1alpha3 objects only. It does not:

- convert them to or from other API versions;
- talk to a Kubernetes API server or to vSphere;
- run controllers or webhooks;
- parse YAML.

Manifests go in and out as plain dictionaries.

## Running the tests

```
pip install -e ".[test]"
pytest
```