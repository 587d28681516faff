"""Configuration of the vSphere cloud provider and its INI encoding.

The INI dialect is the one read by the cloud provider: sections such as
``[Global]``, map sections with a quoted subsection such as
``[VirtualCenter "10.0.0.1"]``, ``name = value`` variables, ``;`` and ``#``
comments, and double-quoted values with backslash escapes.
"""

import dataclasses
import io
import re
import typing
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, NamedTuple

from capvapi.jsonfields import json_field

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_INI_ESCAPE_CHARS = re.compile(r'([\\"])')
_HEADER = re.compile(
    r'\[\s*([A-Za-z0-9.\-]+)\s*(?:"((?:[^"\\]|\\["\\])*)"\s*)?\]\s*(?:[;#].*)?'
)
_VARIABLE = re.compile(r"([A-Za-z][A-Za-z0-9\-]*)\s*(.*)")
_SUBSECTION_ESCAPE = re.compile(r'\\(["\\])')
_VALUE_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t", "b": "\b"}
_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})


class IniError(ValueError):
    """Raised when INI data cannot be read into a configuration."""


@dataclass
class CPIGlobalConfig:
    """The cloud provider's global configuration."""

    insecure: bool = json_field("insecure", omitempty=True, default=False)
    round_tripper_count: int = json_field("roundTripperCount", omitempty=True, default=0)
    username: str = json_field("username", omitempty=True, default="")
    password: str = json_field("password", omitempty=True, default="")
    secret_name: str = json_field("secretName", omitempty=True, default="")
    secret_namespace: str = json_field("secretNamespace", omitempty=True, default="")
    port: str = json_field("port", omitempty=True, default="")
    ca_file: str = json_field("caFile", omitempty=True, default="")
    thumbprint: str = json_field("thumbprint", omitempty=True, default="")
    datacenters: str = json_field("datacenters", omitempty=True, default="")
    service_account: str = json_field("serviceAccount", omitempty=True, default="")
    secrets_directory: str = json_field("secretsDirectory", omitempty=True, default="")
    api_disable: bool | None = json_field("apiDisable", omitempty=True, default=None)
    api_bind_port: str = json_field("apiBindPort", omitempty=True, default="")
    cluster_id: str = json_field("-", default="")

    _ini_names: ClassVar[dict[str, str]] = {
        "insecure": "insecure-flag",
        "round_tripper_count": "soap-roundtrip-count",
        "username": "user",
        "password": "password",
        "secret_name": "secret-name",
        "secret_namespace": "secret-namespace",
        "port": "port",
        "ca_file": "ca-file",
        "thumbprint": "thumbprint",
        "datacenters": "datacenters",
        "service_account": "service-account",
        "secrets_directory": "secrets-directory",
        "api_disable": "api-disable",
        "api_bind_port": "api-binding",
        "cluster_id": "cluster-id",
    }


@dataclass
class CPIVCenterConfig:
    """The cloud provider's configuration of one vCenter."""

    username: str = json_field("username", omitempty=True, default="")
    password: str = json_field("password", omitempty=True, default="")
    port: str = json_field("port", omitempty=True, default="")
    datacenters: str = json_field("datacenters", omitempty=True, default="")
    round_tripper_count: int = json_field("roundTripperCount", omitempty=True, default=0)
    thumbprint: str = json_field("thumbprint", omitempty=True, default="")

    _ini_names: ClassVar[dict[str, str]] = {
        "username": "user",
        "password": "password",
        "port": "port",
        "datacenters": "datacenters",
        "round_tripper_count": "soap-roundtrip-count",
        "thumbprint": "thumbprint",
    }


@dataclass
class CPINetworkConfig:
    """The cloud provider's network configuration."""

    name: str = json_field("name", omitempty=True, default="")

    _ini_names: ClassVar[dict[str, str]] = {"name": "public-network"}


@dataclass
class CPIDiskConfig:
    """The cloud provider's disk configuration."""

    scsi_controller_type: str = json_field("scsiControllerType", omitempty=True, default="")

    _ini_names: ClassVar[dict[str, str]] = {"scsi_controller_type": "scsicontrollertype"}


@dataclass
class CPIWorkspaceConfig:
    """The cloud provider's workspace configuration."""

    server: str = json_field("server", omitempty=True, default="")
    datacenter: str = json_field("datacenter", omitempty=True, default="")
    folder: str = json_field("folder", omitempty=True, default="")
    datastore: str = json_field("datastore", omitempty=True, default="")
    resource_pool: str = json_field("resourcePool", omitempty=True, default="")

    _ini_names: ClassVar[dict[str, str]] = {
        "server": "server",
        "datacenter": "datacenter",
        "folder": "folder",
        "datastore": "default-datastore",
        "resource_pool": "resourcepool-path",
    }


@dataclass
class CPILabelConfig:
    """The categories and tags backing the zone and region node labels."""

    zone: str = json_field("zone", omitempty=True, default="")
    region: str = json_field("region", omitempty=True, default="")

    _ini_names: ClassVar[dict[str, str]] = {"zone": "zone", "region": "region"}


@dataclass
class CPICloudConfig:
    """Settings of the cloud controller manager deployment."""

    controller_image: str = json_field("controllerImage", omitempty=True, default="")
    extra_args: dict[str, str] = json_field("extraArgs", omitempty=True, default_factory=dict)

    def marshal_cloud_provider_args(self) -> list[str]:
        """Command-line arguments for the cloud provider's pod spec."""
        args = [
            "--v=2",
            "--cloud-provider=vsphere",
            "--cloud-config=/etc/cloud/vsphere.conf",
        ]
        args.extend(f"--{key}={value}" for key, value in (self.extra_args or {}).items())
        return args


@dataclass
class CPIStorageConfig:
    """Images of the storage driver deployment."""

    controller_image: str = json_field("controllerImage", omitempty=True, default="")
    node_driver_image: str = json_field("nodeDriverImage", omitempty=True, default="")
    attacher_image: str = json_field("attacherImage", omitempty=True, default="")
    provisioner_image: str = json_field("provisionerImage", omitempty=True, default="")
    metadata_syncer_image: str = json_field("metadataSyncerImage", omitempty=True, default="")
    liveness_probe_image: str = json_field("livenessProbeImage", omitempty=True, default="")
    registrar_image: str = json_field("registrarImage", omitempty=True, default="")


@dataclass
class CPIProviderConfig:
    """Extra information used to configure the external cloud provider."""

    cloud: CPICloudConfig | None = json_field("cloud", omitempty=True, default=None)
    storage: CPIStorageConfig | None = json_field("storage", omitempty=True, default=None)


class _SectionSpec(NamedTuple):
    attr: str
    name: str
    cls: type
    is_map: bool


@dataclass
class CPIConfig:
    """The vSphere cloud provider's configuration."""

    global_: CPIGlobalConfig = json_field(
        "global", omitempty=True, default_factory=CPIGlobalConfig
    )
    vcenter: dict[str, CPIVCenterConfig] = json_field(
        "virtualCenter", omitempty=True, default_factory=dict
    )
    network: CPINetworkConfig = json_field(
        "network", omitempty=True, default_factory=CPINetworkConfig
    )
    disk: CPIDiskConfig = json_field("disk", omitempty=True, default_factory=CPIDiskConfig)
    workspace: CPIWorkspaceConfig = json_field(
        "workspace", omitempty=True, default_factory=CPIWorkspaceConfig
    )
    labels: CPILabelConfig = json_field(
        "labels", omitempty=True, default_factory=CPILabelConfig
    )
    provider_config: CPIProviderConfig = json_field(
        "providerConfig", omitempty=True, default_factory=CPIProviderConfig
    )

    def marshal_ini(self) -> bytes:
        """Encode the INI sections of this configuration."""
        out = io.StringIO()
        for spec in _SECTIONS:
            value = getattr(self, spec.attr)
            if is_empty(value):
                continue
            if spec.is_map:
                for key in sorted(value):
                    _write_section(out, f'{spec.name} "{key}"', value[key])
            else:
                _write_section(out, spec.name, value)
        return out.getvalue().encode("utf-8")

    def unmarshal_ini(self, data, *, warn_as_fatal=False) -> None:
        """Replace the INI sections of this configuration with those in ``data``.

        Unknown sections and variables are ignored unless ``warn_as_fatal`` is
        set, in which case they raise :class:`IniError` and leave the
        configuration untouched.  Syntax errors and bad values always raise.
        """
        text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
        parsed: dict[str, Any] = {
            spec.attr: ({} if spec.is_map else spec.cls()) for spec in _SECTIONS
        }
        warnings: list[str] = []
        in_section = False
        current = None

        for lineno, event in _scan(text):
            if isinstance(event, _SectionEvent):
                in_section = True
                spec = _lookup_section(event.name)
                if spec is None:
                    warnings.append(f"line {lineno}: unknown section {event.name!r}")
                    current = None
                elif spec.is_map:
                    if event.subsection is None:
                        raise IniError(
                            f"line {lineno}: section {spec.name!r} requires a subsection name"
                        )
                    current = parsed[spec.attr].setdefault(event.subsection, spec.cls())
                else:
                    if event.subsection is not None:
                        raise IniError(
                            f"line {lineno}: section {spec.name!r} does not allow "
                            "a subsection name"
                        )
                    current = parsed[spec.attr]
                continue

            if not in_section:
                raise IniError(f"line {lineno}: variable {event.name!r} outside of a section")
            if current is None:
                continue
            attr = _lookup_property(type(current), event.name)
            if attr is None:
                warnings.append(f"line {lineno}: unknown variable {event.name!r}")
                continue
            setattr(current, attr, _convert(type(current), attr, event.value, lineno))

        if warnings and warn_as_fatal:
            raise IniError("; ".join(warnings))

        for spec in _SECTIONS:
            setattr(self, spec.attr, parsed[spec.attr])


_SECTIONS = (
    _SectionSpec("global_", "Global", CPIGlobalConfig, False),
    _SectionSpec("vcenter", "VirtualCenter", CPIVCenterConfig, True),
    _SectionSpec("network", "Network", CPINetworkConfig, False),
    _SectionSpec("disk", "Disk", CPIDiskConfig, False),
    _SectionSpec("workspace", "Workspace", CPIWorkspaceConfig, False),
    _SectionSpec("labels", "Labels", CPILabelConfig, False),
)


def is_empty(obj) -> bool:
    """True if ``obj`` is its empty value or, for a dataclass, all its fields are."""
    if obj is None:
        return True
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return all(is_empty(getattr(obj, f.name)) for f in dataclasses.fields(obj))
    if isinstance(obj, bool):
        return not obj
    if isinstance(obj, (int, float)):
        return obj == 0
    if isinstance(obj, (str, bytes, list, tuple, dict)):
        return len(obj) == 0
    raise TypeError(f"invalid kind: {type(obj).__name__}")


def is_not_empty(obj) -> bool:
    """The negation of :func:`is_empty`."""
    return not is_empty(obj)


def _format_value(value: Any) -> str:
    text = ("true" if value else "false") if isinstance(value, bool) else str(value)
    text = _INI_ESCAPE_CHARS.sub(r"\\\1", text).replace("\t", "\\t")
    if isinstance(value, str):
        text = f'"{text}"'
    return text


def _write_section(out: io.StringIO, section_name: str, section: Any) -> None:
    out.write(f"[{section_name}]\n")
    for attr, name in type(section)._ini_names.items():
        value = getattr(section, attr)
        if is_empty(value):
            continue
        out.write(f"{name} = {_format_value(value)}\n")
    out.write("\n")


class _SectionEvent(NamedTuple):
    name: str
    subsection: str | None


class _VariableEvent(NamedTuple):
    name: str
    value: str | None


def _scan(text: str) -> Iterator[tuple[int, _SectionEvent | _VariableEvent]]:
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line[0] in ";#":
            continue
        if line.startswith("["):
            match = _HEADER.fullmatch(line)
            if match is None:
                raise IniError(f"line {lineno}: invalid section header {line!r}")
            subsection = match.group(2)
            if subsection is not None:
                subsection = _SUBSECTION_ESCAPE.sub(r"\1", subsection)
            yield lineno, _SectionEvent(match.group(1), subsection)
            continue
        match = _VARIABLE.fullmatch(line)
        if match is None:
            raise IniError(f"line {lineno}: invalid variable {line!r}")
        name, rest = match.groups()
        if not rest or rest[0] in ";#":
            yield lineno, _VariableEvent(name, None)
        elif rest[0] == "=":
            yield lineno, _VariableEvent(name, _parse_value(rest[1:].lstrip(), lineno))
        else:
            raise IniError(f"line {lineno}: expected '=' after {name!r}")


def _parse_value(text: str, lineno: int) -> str:
    chars: list[str] = []
    keep = 0
    quoted = False
    stream = iter(text)
    for ch in stream:
        if ch == "\\":
            escaped = next(stream, None)
            if escaped is None:
                raise IniError(f"line {lineno}: unterminated escape")
            if escaped not in _VALUE_ESCAPES:
                raise IniError(f"line {lineno}: invalid escape '\\{escaped}'")
            chars.append(_VALUE_ESCAPES[escaped])
            keep = len(chars)
        elif ch == '"':
            quoted = not quoted
            keep = len(chars)
        elif not quoted and ch in ";#":
            break
        else:
            chars.append(ch)
            if quoted or not ch.isspace():
                keep = len(chars)
    if quoted:
        raise IniError(f"line {lineno}: unterminated quoted value")
    return "".join(chars[:keep])


def _lookup_section(name: str) -> _SectionSpec | None:
    folded = name.casefold()
    return next((spec for spec in _SECTIONS if spec.name.casefold() == folded), None)


def _lookup_property(cls: type, name: str) -> str | None:
    folded = name.casefold()
    return next(
        (attr for attr, ini in cls._ini_names.items() if ini.casefold() == folded), None
    )


def _base_type(cls: type, attr: str) -> type:
    hint = next(f.type for f in dataclasses.fields(cls) if f.name == attr)
    args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
    return args[0] if args else hint


def _convert(cls: type, attr: str, raw: str | None, lineno: int) -> Any:
    base = _base_type(cls, attr)
    name = cls._ini_names[attr]
    if base is bool:
        if raw is None:
            return True
        word = raw.strip().casefold()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise IniError(f"line {lineno}: invalid boolean {raw!r} for {name!r}")
    if raw is None:
        raise IniError(f"line {lineno}: missing value for {name!r}")
    if base is int:
        try:
            number = int(raw.strip(), 10)
        except ValueError:
            raise IniError(f"line {lineno}: invalid integer {raw!r} for {name!r}") from None
        if not _INT32_MIN <= number <= _INT32_MAX:
            raise IniError(f"line {lineno}: integer {raw!r} out of range for {name!r}")
        return number
    return raw