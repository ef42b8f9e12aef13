"""Introspection schema normalizer.

Turns a RawSchema (the introspection payload) into an IRSchema.
"""

import logging

from .introspection import RawField, RawSchema, RawType, RawTypeKind, RawTypeRef
from .ir import (
    FieldKind,
    FieldType,
    IREnum,
    IREnumValue,
    IRField,
    IRObjectType,
    IRScalar,
    IRSchema,
    TypeKind,
)

logger = logging.getLogger(__name__)

BUILTIN_SCALARS = ("String", "Int", "Float", "Boolean", "ID")

# Prefix reserved by the GraphQL introspection system (__Type, __Schema, ...)
META_PREFIX = "__"

_OBJECT_KINDS = {
    RawTypeKind.OBJECT: TypeKind.OBJECT,
    RawTypeKind.INTERFACE: TypeKind.INTERFACE,
}


class SchemaError(Exception):
    """Raised when the introspection payload is malformed."""

    def __init__(
        self,
        message: str,
        type_name: str | None = None,
        field_name: str | None = None,
    ):
        self.message = message
        self.type_name = type_name
        self.field_name = field_name
        location = ".".join(p for p in (type_name, field_name) if p)
        super().__init__(f"{message} ({location})" if location else message)


def resolve_type_ref(type_ref: RawTypeRef) -> tuple[FieldType, bool, bool] | None:
    """Unwrap a NonNull/List chain into (base type, is_nullable, is_list).

    NonNull forces is_nullable=False, List forces is_list=True; nested lists
    collapse into a single is_list flag. Returns None when a wrapper has no
    of_type or the named leaf has no name.
    """
    if type_ref.kind is RawTypeKind.NON_NULL:
        if type_ref.of_type is None:
            return None
        inner = resolve_type_ref(type_ref.of_type)
        if inner is None:
            return None
        field_type, _, is_list = inner
        return field_type, False, is_list

    if type_ref.kind is RawTypeKind.LIST:
        if type_ref.of_type is None:
            return None
        inner = resolve_type_ref(type_ref.of_type)
        if inner is None:
            return None
        field_type, is_nullable, _ = inner
        return field_type, is_nullable, True

    if not type_ref.name:
        return None
    if type_ref.name in BUILTIN_SCALARS:
        return FieldType.scalar(type_ref.name), True, False
    # Reclassified as ENUM or SCALAR by the normalizer once all types are known
    return FieldType.reference(type_ref.name), True, False


class SchemaNormalizer:
    """Builds the IR from an introspected schema."""

    def __init__(self, raw: RawSchema, exclude_root_types: bool = False):
        """Initialize a normalizer.

        Args:
            raw: The introspection payload
            exclude_root_types: Skip the Query/Mutation/Subscription root
                types, which never describe stored data
        """
        self.raw = raw
        self.exclude_root_types = exclude_root_types
        self.ir = IRSchema()

    def normalize(self) -> IRSchema:
        """Walk all raw types once and return the complete IR."""
        skipped_roots = self.raw.root_type_names if self.exclude_root_types else set()

        for raw_type in self.raw.types:
            name = raw_type.name
            if not name or name.startswith(META_PREFIX):
                continue
            if name in BUILTIN_SCALARS:
                if raw_type.kind is RawTypeKind.SCALAR:
                    self.ir.scalars[name] = IRScalar(name=name, description=raw_type.description)
                continue
            if name in skipped_roots:
                continue

            if raw_type.kind in _OBJECT_KINDS:
                self._process_object_type(raw_type)
            elif raw_type.kind is RawTypeKind.UNION:
                self._process_union(raw_type)
            elif raw_type.kind is RawTypeKind.ENUM:
                self._process_enum(raw_type)
            elif raw_type.kind is RawTypeKind.SCALAR:
                self.ir.scalars[name] = IRScalar(name=name, description=raw_type.description)
            else:
                # Input objects have no storage counterpart
                logger.debug("Skipping %s type %s", raw_type.kind.value, name)

        self._reclassify_references()
        logger.debug(
            "Normalized schema: %d object types, %d enums, %d scalars",
            len(self.ir.objects), len(self.ir.enums), len(self.ir.scalars),
        )
        return self.ir

    def _process_object_type(self, raw_type: RawType):
        name = raw_type.name
        self.ir.objects[name] = IRObjectType(
            name=name,
            kind=_OBJECT_KINDS[raw_type.kind],
            fields=[self._process_field(name, f) for f in raw_type.fields or []],
            description=raw_type.description,
            interfaces=[i.name for i in raw_type.interfaces or [] if i.name],
        )

    def _process_union(self, raw_type: RawType):
        self.ir.objects[raw_type.name] = IRObjectType(
            name=raw_type.name,
            kind=TypeKind.UNION,
            description=raw_type.description,
            union_members=[p.name for p in raw_type.possible_types or [] if p.name],
        )

    def _process_enum(self, raw_type: RawType):
        values = [
            IREnumValue(name=v.name, description=v.description)
            for v in raw_type.enum_values or []
        ]
        self.ir.enums[raw_type.name] = IREnum(
            name=raw_type.name,
            values=values,
            description=raw_type.description,
        )

    @staticmethod
    def _process_field(type_name: str, raw_field: RawField) -> IRField:
        resolved = resolve_type_ref(raw_field.type_ref)
        if resolved is None:
            raise SchemaError(
                "Cannot resolve field type: malformed introspection type reference",
                type_name=type_name,
                field_name=raw_field.name,
            )
        field_type, is_nullable, is_list = resolved
        return IRField(
            name=raw_field.name,
            field_type=field_type,
            is_nullable=is_nullable,
            is_list=is_list,
            description=raw_field.description,
        )

    def _reclassify_references(self):
        """Turn references to known enums and custom scalars into their real kind."""
        for ir_type in self.ir.objects.values():
            for ir_field in ir_type.fields:
                if ir_field.field_type.kind is not FieldKind.REFERENCE:
                    continue
                target = ir_field.field_type.name
                if target in self.ir.enums:
                    ir_field.field_type = FieldType.enum(target)
                elif target in self.ir.scalars:
                    ir_field.field_type = FieldType.scalar(target)


def normalize(raw: RawSchema, exclude_root_types: bool = False) -> IRSchema:
    """Normalize a RawSchema into a fresh IRSchema."""
    return SchemaNormalizer(raw, exclude_root_types=exclude_root_types).normalize()
