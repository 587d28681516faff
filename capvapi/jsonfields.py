"""Dataclass fields with JSON names and omit-when-empty encoding.

Fields declared with :func:`json_field` carry their wire name and an
``omitempty`` flag.  :func:`to_dict` turns such dataclasses into plain JSON
data and :func:`from_dict` reads them back, checking types on the way.
"""

import dataclasses
import enum
import functools
import re
import types
import typing
from typing import Any, TypeVar

_JSON_NAME = "json_name"
_OMIT_EMPTY = "omitempty"

#: A field given this name is never encoded nor decoded.
SKIP = "-"

T = TypeVar("T")

_LEXEME_PATTERN = re.compile(r"'[^']*'|\"[^\"]*\"|[A-Za-z_][\w.]*|[\[\],|]")

_KNOWN_NAMES: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "bytes": bytes,
    "list": list,
    "dict": dict,
    "tuple": tuple,
    "Any": Any,
    "Optional": typing.Optional,
    "Union": typing.Union,
    "List": typing.List,
    "Dict": typing.Dict,
    "typing.Any": Any,
    "typing.Optional": typing.Optional,
    "typing.Union": typing.Union,
    "typing.List": typing.List,
    "typing.Dict": typing.Dict,
}


def json_field(
    name,
    *,
    omitempty=False,
    default=dataclasses.MISSING,
    default_factory=dataclasses.MISSING,
):
    """Declare a dataclass field that is serialised under ``name``.

    With ``omitempty`` the field is left out of the encoding when it holds an
    empty value.  A field typed ``X | None`` is only left out when it is
    ``None``; any other field when it is false, zero, empty or ``None``.
    """
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata={_JSON_NAME: name, _OMIT_EMPTY: omitempty},
    )


def _json_name(f: dataclasses.Field) -> str:
    return f.metadata.get(_JSON_NAME, f.name)


class _AnnotationParser:
    """Resolve a textual annotation against a namespace without running it."""

    def __init__(self, text: str, namespace: dict):
        self.text = text
        self.lexemes = _LEXEME_PATTERN.findall(text)
        self.pos = 0
        self.namespace = namespace

    def parse(self) -> Any:
        result = self._union()
        if self.pos != len(self.lexemes):
            raise TypeError(f"cannot parse annotation {self.text!r}")
        return result

    def _peek(self):
        return self.lexemes[self.pos] if self.pos < len(self.lexemes) else None

    def _take(self) -> str:
        lexeme = self._peek()
        if lexeme is None:
            raise TypeError(f"cannot parse annotation {self.text!r}")
        self.pos += 1
        return lexeme

    def _union(self) -> Any:
        members = [self._primary()]
        while self._peek() == "|":
            self.pos += 1
            members.append(self._primary())
        if len(members) == 1:
            return members[0]
        return typing.Union[tuple(members)]

    def _primary(self) -> Any:
        lexeme = self._take()
        if lexeme[0] in "'\"":
            return _AnnotationParser(lexeme[1:-1], self.namespace).parse()
        if lexeme in ("[", "]", ",", "|"):
            raise TypeError(f"cannot parse annotation {self.text!r}")
        base = self._lookup(lexeme)
        if self._peek() != "[":
            return base
        self.pos += 1
        args = [self._union()]
        while self._peek() == ",":
            self.pos += 1
            args.append(self._union())
        if self._take() != "]":
            raise TypeError(f"cannot parse annotation {self.text!r}")
        return base[args[0]] if len(args) == 1 else base[tuple(args)]

    def _lookup(self, name: str) -> Any:
        if name == "None":
            return type(None)
        try:
            return self.namespace[name]
        except KeyError:
            raise TypeError(f"cannot resolve annotation name {name!r}") from None


def _owner(cls: type, field_name: str) -> type:
    for klass in cls.__mro__:
        if field_name in klass.__dict__.get("__annotations__", {}):
            return klass
    return cls


def _namespace(cls: type, klass: type) -> dict:
    namespace = dict(_KNOWN_NAMES)
    namespace[klass.__name__] = klass
    namespace.setdefault(cls.__name__, cls)
    return namespace


@functools.lru_cache(maxsize=None)
def _hints(cls: type) -> dict:
    hints = {}
    for f in dataclasses.fields(cls):
        tp = f.type
        if isinstance(tp, str):
            tp = _AnnotationParser(tp, _namespace(cls, _owner(cls, f.name))).parse()
        hints[f.name] = tp
    return hints


def _is_union(tp: Any) -> bool:
    return typing.get_origin(tp) in (typing.Union, types.UnionType)


def _allows_none(tp: Any) -> bool:
    if tp is Any or tp is type(None):
        return True
    return _is_union(tp) and type(None) in typing.get_args(tp)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, enum.Enum):
        return _is_empty(value.value)
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict)):
        return len(value) == 0
    return False


def _encode(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, enum.Enum):
        return _encode(value.value)
    if isinstance(value, dict):
        return {_encode(key): _encode(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


def to_dict(obj) -> dict:
    """Encode a dataclass instance as a JSON-ready dictionary."""
    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"expected a dataclass instance, got {type(obj).__name__}")
    hints = _hints(type(obj))
    result = {}
    for f in dataclasses.fields(obj):
        name = _json_name(f)
        if name == SKIP:
            continue
        value = getattr(obj, f.name)
        if f.metadata.get(_OMIT_EMPTY):
            if _allows_none(hints.get(f.name, Any)):
                if value is None:
                    continue
            elif _is_empty(value):
                continue
        result[name] = _encode(value)
    return result


def from_dict(cls: type[T], data) -> T:
    """Decode JSON data into an instance of the dataclass ``cls``.

    Unknown keys are ignored and missing keys keep the field's default.
    A ``null`` for a field that cannot hold ``None`` also keeps the default.
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"expected a dataclass type, got {cls!r}")
    return _decode_dataclass(cls, data, cls.__name__)


def _decode_dataclass(cls: type, data: Any, path: str) -> Any:
    if not isinstance(data, dict):
        raise TypeError(f"{path}: expected an object, got {type(data).__name__}")
    hints = _hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        name = _json_name(f)
        if name == SKIP or name not in data:
            continue
        hint = hints.get(f.name, Any)
        value = data[name]
        if value is None and not _allows_none(hint):
            continue
        kwargs[f.name] = _decode(hint, value, f"{path}.{name}")
    return cls(**kwargs)


def _decode(tp: Any, value: Any, path: str) -> Any:
    if tp is Any:
        return value

    if _is_union(tp):
        args = typing.get_args(tp)
        if value is None:
            if type(None) in args:
                return None
            raise TypeError(f"{path}: null is not allowed")
        failure: Exception | None = None
        for arg in args:
            if arg is type(None):
                continue
            try:
                return _decode(arg, value, path)
            except (TypeError, ValueError) as exc:
                failure = exc
        raise failure if failure else TypeError(f"{path}: cannot decode {value!r}")

    origin = typing.get_origin(tp)
    if origin is list:
        if not isinstance(value, list):
            raise TypeError(f"{path}: expected an array, got {type(value).__name__}")
        (item_tp,) = typing.get_args(tp) or (Any,)
        return [_decode(item_tp, item, f"{path}[{pos}]") for pos, item in enumerate(value)]
    if origin is dict:
        if not isinstance(value, dict):
            raise TypeError(f"{path}: expected an object, got {type(value).__name__}")
        key_tp, val_tp = typing.get_args(tp) or (Any, Any)
        return {
            _decode(key_tp, key, path): _decode(val_tp, item, f"{path}.{key}")
            for key, item in value.items()
        }

    if isinstance(tp, type):
        if dataclasses.is_dataclass(tp):
            return _decode_dataclass(tp, value, path)
        if issubclass(tp, enum.Enum):
            try:
                return tp(value)
            except ValueError:
                raise ValueError(f"{path}: {value!r} is not a valid {tp.__name__}") from None
        if tp is bool:
            if isinstance(value, bool):
                return value
            raise TypeError(f"{path}: expected a boolean, got {type(value).__name__}")
        if tp is int:
            if isinstance(value, bool):
                raise TypeError(f"{path}: expected an integer, got bool")
            if isinstance(value, int):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
            raise TypeError(f"{path}: expected an integer, got {value!r}")
        if tp is float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
            raise TypeError(f"{path}: expected a number, got {value!r}")
        if isinstance(value, tp):
            return value
        raise TypeError(f"{path}: expected {tp.__name__}, got {type(value).__name__}")

    raise TypeError(f"{path}: unsupported field type {tp!r}")