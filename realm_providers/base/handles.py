"""Remote object handles and typed remote-call arguments.

``Handle`` is an opaque, immutable reference to a bean living on the remote
management service. It carries only the object name the service reported;
there is no type information beyond that.

``RemoteArg`` is a closed tagged union over the four argument kinds a remote
operation accepts (boolean, string, integer, handle). Each kind knows the
signature type the management service declares for it, so transports can
build operation signatures without inspecting Python runtime types.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Tuple, Union


@dataclass(frozen=True)
class Handle:
    """Opaque reference to a remote bean, identified by its object name."""

    object_name: str

    def __post_init__(self) -> None:
        if not isinstance(self.object_name, str) or not self.object_name.strip():
            raise ValueError("Handle requires a non-empty object name")

    def __str__(self) -> str:
        return self.object_name


class ArgKind(str, Enum):
    """Closed set of argument kinds accepted by remote operations."""

    BOOLEAN = "boolean"
    STRING = "string"
    INTEGER = "integer"
    HANDLE = "handle"

    @property
    def signature_type(self) -> str:
        """Type name used in remote operation signatures."""
        return _SIGNATURE_TYPES[self]


_SIGNATURE_TYPES = {
    ArgKind.BOOLEAN: "boolean",
    ArgKind.STRING: "java.lang.String",
    ArgKind.INTEGER: "int",
    ArgKind.HANDLE: "javax.management.ObjectName",
}

ArgValue = Union[bool, str, int, Handle]


def _accepts(kind: ArgKind, value: Any) -> bool:
    if kind is ArgKind.BOOLEAN:
        return isinstance(value, bool)
    if kind is ArgKind.STRING:
        return isinstance(value, str)
    if kind is ArgKind.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, Handle)


@dataclass(frozen=True)
class RemoteArg:
    """A single typed argument for a remote operation."""

    kind: ArgKind
    value: ArgValue

    def __post_init__(self) -> None:
        if not _accepts(self.kind, self.value):
            raise TypeError(f"{type(self.value).__name__} value {self.value!r} is not a valid {self.kind.value} argument")

    @classmethod
    def boolean(cls, value: bool) -> "RemoteArg":
        return cls(ArgKind.BOOLEAN, value)

    @classmethod
    def string(cls, value: str) -> "RemoteArg":
        return cls(ArgKind.STRING, value)

    @classmethod
    def integer(cls, value: int) -> "RemoteArg":
        return cls(ArgKind.INTEGER, value)

    @classmethod
    def handle(cls, value: Handle) -> "RemoteArg":
        return cls(ArgKind.HANDLE, value)

    def wire_value(self) -> Union[bool, str, int]:
        """Return the primitive value sent to the service (handles become object names)."""
        if isinstance(self.value, Handle):
            return self.value.object_name
        return self.value


def signature(args: Sequence[RemoteArg]) -> Tuple[str, ...]:
    """Return the operation signature (declared types) for ``args``."""
    return tuple(a.kind.signature_type for a in args)


OBJECT_NAME_KEY = "objectName"


def decode_handles(value: Any) -> Any:
    """Convert JSON bean references (``{"objectName": ...}``) into handles, recursing into lists."""
    if isinstance(value, dict) and set(value) == {OBJECT_NAME_KEY}:
        return Handle(str(value[OBJECT_NAME_KEY]))
    if isinstance(value, list):
        return [decode_handles(v) for v in value]
    return value


__all__ = ["Handle", "ArgKind", "RemoteArg", "ArgValue", "signature", "decode_handles", "OBJECT_NAME_KEY"]
