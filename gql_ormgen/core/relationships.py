"""Heuristic foreign-key relationship inference.

Relationships are derived from naming conventions and never stored in the IR:
a field "authorId" on an object type points at the type "Author" when such a
type exists. The pass is kept apart from the normalizer so callers can swap
it for an explicit source of relationships (see CodeGenerator's
relationship_resolver argument).
"""

from dataclasses import dataclass
from enum import Enum

from .ir import IRField, IRSchema

FOREIGN_KEY_SUFFIX = "Id"


class RelationshipType(str, Enum):
    BELONGS_TO = "belongs_to"
    # Declared for explicit relationship sources; never inferred
    HAS_MANY = "has_many"
    HAS_ONE = "has_one"


@dataclass(frozen=True)
class Relationship:
    """An inferred link from one object type's field to another type."""
    field_name: str
    related_type: str
    relationship_type: RelationshipType = RelationshipType.BELONGS_TO
    foreign_key: bool = True


def foreign_key_target(ir_field: IRField) -> str | None:
    """Return the type name a foreign-key-shaped field points at, if any.

    "categoryId" -> "Category". A field literally named "id" cannot be
    resolved without more schema context and yields None.
    """
    name = ir_field.name
    if name == "id":
        return None
    if not name.endswith(FOREIGN_KEY_SUFFIX) or len(name) <= len(FOREIGN_KEY_SUFFIX):
        return None
    prefix = name[: -len(FOREIGN_KEY_SUFFIX)]
    return prefix[0].upper() + prefix[1:]


def detect_relationships(ir: IRSchema) -> dict[str, list[Relationship]]:
    """Infer BelongsTo relationships for every OBJECT type.

    Types without relationships are omitted from the result.
    """
    relationships: dict[str, list[Relationship]] = {}

    for ir_type in ir.object_types():
        found = []
        for ir_field in ir_type.fields:
            related = foreign_key_target(ir_field)
            if related is not None and related in ir.objects:
                found.append(
                    Relationship(
                        field_name=ir_field.name,
                        related_type=related,
                        relationship_type=RelationshipType.BELONGS_TO,
                        foreign_key=True,
                    )
                )
        if found:
            relationships[ir_type.name] = found

    return relationships
