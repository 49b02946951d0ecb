"""Documentation model shared by extraction and rendering."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Tuple


class TypeKind(str, Enum):
    """Shape of a type declaration's right-hand side."""

    STRUCT = "struct"
    INTERFACE = "interface"
    FUNCTION = "function"
    ARRAY = "array"
    MAP = "map"
    CHANNEL = "channel"
    OTHER = "type"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FunctionDoc:
    """A package-level function or a method bound to a type."""

    name: str
    doc: str
    signature: str


@dataclass(frozen=True)
class FieldDoc:
    """A single declared struct field."""

    name: str
    type: str
    tag: str = ""
    doc: str = ""


@dataclass(frozen=True)
class TypeDoc:
    """A named type with its fields, methods and underlying type text."""

    name: str
    doc: str
    decl: str
    kind: TypeKind
    fields: Tuple[FieldDoc, ...] = ()
    methods: Tuple[FunctionDoc, ...] = ()
    underlying: str = ""


@dataclass(frozen=True)
class ValueDoc:
    """A constant or variable name with the declaration it came from."""

    name: str
    doc: str
    decl: str


@dataclass(frozen=True)
class PackageDoc:
    """Everything godocgen knows about one Go package."""

    name: str
    import_path: str
    doc: str
    functions: Tuple[FunctionDoc, ...] = ()
    types: Tuple[TypeDoc, ...] = ()
    constants: Tuple[ValueDoc, ...] = ()
    variables: Tuple[ValueDoc, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready mapping with stable key order."""
        payload = _as_lists(asdict(self))
        for type_payload in payload["types"]:
            type_payload["kind"] = TypeKind(type_payload["kind"]).value
        return payload


def _as_lists(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _as_lists(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_as_lists(item) for item in value]
    return value


__all__ = ["FieldDoc", "FunctionDoc", "PackageDoc", "TypeDoc", "TypeKind", "ValueDoc"]
