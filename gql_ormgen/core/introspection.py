"""Raw GraphQL introspection payload models.

These pydantic models mirror the standard introspection response shape so a
decoded JSON payload validates directly:

    raw = RawSchema.from_introspection(response_json)

A schema can also be built from SDL through graphql-core, which produces the
same introspection shape:

    raw = RawSchema.from_sdl(Path("schema.graphqls").read_text())
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any

from graphql import build_schema, introspection_from_schema
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RawTypeKind(str, Enum):
    """The __TypeKind values of the introspection system."""

    SCALAR = "SCALAR"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    INPUT_OBJECT = "INPUT_OBJECT"
    LIST = "LIST"
    NON_NULL = "NON_NULL"


class _RawModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class RawTypeRef(_RawModel):
    """A possibly wrapped reference to a type, used by fields and arguments."""

    kind: RawTypeKind | None = None
    name: str | None = None
    of_type: "RawTypeRef | None" = None


class RawInputValue(_RawModel):
    name: str
    description: str | None = None
    type_ref: RawTypeRef = Field(alias="type")
    default_value: str | None = None


class RawField(_RawModel):
    name: str
    description: str | None = None
    args: list[RawInputValue] = Field(default_factory=list)
    type_ref: RawTypeRef = Field(alias="type")
    is_deprecated: bool = False
    deprecation_reason: str | None = None


class RawEnumValue(_RawModel):
    name: str
    description: str | None = None
    is_deprecated: bool = False
    deprecation_reason: str | None = None


class RawType(_RawModel):
    """One entry of __schema.types.

    LIST and NON_NULL entries always carry of_type; other kinds may omit it.
    """

    kind: RawTypeKind
    name: str | None = None
    description: str | None = None
    fields: list[RawField] | None = None
    interfaces: list[RawTypeRef] | None = None
    possible_types: list[RawTypeRef] | None = None
    enum_values: list[RawEnumValue] | None = None
    input_fields: list[RawInputValue] | None = None
    of_type: RawTypeRef | None = None


class RawDirective(_RawModel):
    name: str
    description: str | None = None
    locations: list[str] = Field(default_factory=list)
    args: list[RawInputValue] = Field(default_factory=list)


class RawSchema(_RawModel):
    """The __schema object of an introspection response."""

    query_type: RawTypeRef | None = None
    mutation_type: RawTypeRef | None = None
    subscription_type: RawTypeRef | None = None
    types: list[RawType] = Field(default_factory=list)
    directives: list[RawDirective] = Field(default_factory=list)

    @classmethod
    def from_introspection(cls, payload: dict[str, Any]) -> "RawSchema":
        """Validate an introspection result.

        Accepts the full response envelope ({"data": {"__schema": ...}}),
        the data object ({"__schema": ...}) or the bare schema object.
        """
        if "data" in payload and isinstance(payload["data"], dict):
            payload = payload["data"]
        if "__schema" in payload:
            payload = payload["__schema"]
        return cls.model_validate(payload)

    @classmethod
    def from_json(cls, text: str) -> "RawSchema":
        return cls.from_introspection(json.loads(text))

    @classmethod
    def from_json_file(cls, path: str | Path) -> "RawSchema":
        return cls.from_json(Path(path).read_text(encoding="utf-8"))

    @classmethod
    def from_sdl(cls, sdl: str) -> "RawSchema":
        """Build the introspection shape from an SDL document."""
        schema = build_schema(sdl)
        return cls.from_introspection(introspection_from_schema(schema))

    @property
    def root_type_names(self) -> set[str]:
        """Names of the query, mutation and subscription root types."""
        roots = (self.query_type, self.mutation_type, self.subscription_type)
        return {r.name for r in roots if r is not None and r.name}


SDL_SUFFIXES = (".graphql", ".graphqls", ".gql")


def load_raw_schema(path: str | Path) -> RawSchema:
    """Load a RawSchema from a local introspection JSON or SDL file."""
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return RawSchema.from_json(content)
    if path.suffix.lower() in SDL_SUFFIXES:
        return RawSchema.from_sdl(content)
    raise ValueError(
        f"Unsupported schema file: {path.name} "
        f"(expected .json or one of {', '.join(SDL_SUFFIXES)})"
    )
