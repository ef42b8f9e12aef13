"""Intermediate Representation (IR) for introspected GraphQL schemas.

This module defines dataclasses that describe the storage-relevant part of a
GraphQL schema (object-like types, enums and scalars) in a backend-agnostic
way, suitable for ORM code generation.
"""

from dataclasses import dataclass, field
from enum import Enum


class TypeKind(str, Enum):
    """Kind tag of an object-like type."""

    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"


class FieldKind(str, Enum):
    """What a field's base type refers to."""

    SCALAR = "SCALAR"
    REFERENCE = "REFERENCE"
    ENUM = "ENUM"


@dataclass(frozen=True)
class FieldType:
    """Base type of a field once all NonNull/List wrappers are removed."""
    kind: FieldKind
    name: str

    @classmethod
    def scalar(cls, name: str) -> "FieldType":
        return cls(FieldKind.SCALAR, name)

    @classmethod
    def reference(cls, name: str) -> "FieldType":
        return cls(FieldKind.REFERENCE, name)

    @classmethod
    def enum(cls, name: str) -> "FieldType":
        return cls(FieldKind.ENUM, name)


@dataclass
class IRField:
    """Represents a field of an object or interface type."""
    name: str
    field_type: FieldType
    is_nullable: bool = True  # True unless wrapped in NonNull
    is_list: bool = False
    description: str | None = None


@dataclass
class IRObjectType:
    """Represents a GraphQL object, interface or union type.

    Unions carry no fields; their member names live in union_members.
    """
    name: str
    kind: TypeKind = TypeKind.OBJECT
    fields: list[IRField] = field(default_factory=list)
    description: str | None = None
    interfaces: list[str] = field(default_factory=list)
    union_members: list[str] = field(default_factory=list)

    @property
    def is_object(self) -> bool:
        return self.kind is TypeKind.OBJECT

    def get_field(self, name: str) -> IRField | None:
        """Look up a field by its GraphQL name."""
        for ir_field in self.fields:
            if ir_field.name == name:
                return ir_field
        return None


@dataclass
class IREnumValue:
    """Represents a single value in a GraphQL enum."""
    name: str
    description: str | None = None


@dataclass
class IREnum:
    """Represents a GraphQL enum type."""
    name: str
    values: list[IREnumValue] = field(default_factory=list)
    description: str | None = None

    @property
    def value_names(self) -> list[str]:
        return [v.name for v in self.values]


@dataclass
class IRScalar:
    """Represents a GraphQL scalar type."""
    name: str
    description: str | None = None


@dataclass
class IRSchema:
    """Complete intermediate representation of an introspected schema.

    Dicts keep introspection order so generated output is deterministic.
    """
    objects: dict[str, IRObjectType] = field(default_factory=dict)
    enums: dict[str, IREnum] = field(default_factory=dict)
    scalars: dict[str, IRScalar] = field(default_factory=dict)

    def get_object(self, name: str) -> IRObjectType | None:
        return self.objects.get(name)

    def object_types(self) -> list[IRObjectType]:
        """Return only true OBJECT-kind types, in schema order."""
        return [t for t in self.objects.values() if t.is_object]

    @property
    def is_empty(self) -> bool:
        return not self.objects and not self.enums
