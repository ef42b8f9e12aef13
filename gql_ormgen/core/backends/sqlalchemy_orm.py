"""Entity-model backend: SQLAlchemy declarative models.

Output layout:
    entities/__init__.py  index re-exporting every generated symbol
    entities/_base.py     declarative Base
    entities/<enum>.py    one module per enum
    entities/<type>.py    model, <Type>Column, <Type>PrimaryKey, <Type>Relation
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from ..config import CodegenConfig
from ..ir import IRObjectType, IRSchema
from ..naming import constant_case, safe_identifier, table_name, to_snake_case
from ..relationships import FOREIGN_KEY_SUFFIX, Relationship, RelationshipType, detect_relationships
from ..scalars import ScalarRegistry
from .base import Backend, ColumnSpec, GenerationError, ImportBlock, MigrationFile, RelationshipResolver
from .migrations import MigrationEmitter, timestamped_migration_name

logger = logging.getLogger(__name__)

BASE_MODULE = "_base"

# Attribute names claimed by DeclarativeBase
DECLARATIVE_RESERVED = frozenset({"metadata", "registry"})


class SqlAlchemyOrmBackend(Backend):
    """Emits one declarative model module per object type."""

    schema_file = "entities/__init__.py"
    objects_only_by_default = True

    def __init__(
        self,
        template_dir: str | Path | None = None,
        generated_at: datetime | None = None,
        relationship_resolver: RelationshipResolver = detect_relationships,
    ):
        """
        Args:
            template_dir: Optional directory with custom Jinja2 templates.
            generated_at: Base timestamp for migration names. When None, the
                          current UTC time is taken on every emit_migrations call.
            relationship_resolver: See Backend.
        """
        super().__init__(template_dir, relationship_resolver)
        self.generated_at = generated_at

    def emit_schema(self, ir: IRSchema, config: CodegenConfig) -> str:
        types = self.storage_types(ir, config)
        relationships = self.relationships(ir)
        emitted = {t.name for t in types}

        modules = [
            {"module": to_snake_case(enum.name), "names": [enum.name]}
            for enum in ir.enums.values()
        ]
        for ir_type in types:
            names = [ir_type.name, f"{ir_type.name}Column", f"{ir_type.name}PrimaryKey"]
            if self._belongs_to(ir_type, relationships, emitted):
                names.append(f"{ir_type.name}Relation")
            modules.append({"module": to_snake_case(ir_type.name), "names": names})

        return self.render("orm_index.py.j2", self.schema_file, {
            "entities": bool(types),
            "modules": modules,
        })

    def emit_entities(self, ir: IRSchema, config: CodegenConfig) -> dict[str, str]:
        types = self.storage_types(ir, config)
        relationships = self.relationships(ir)
        emitted = {t.name for t in types}
        scalars = config.scalar_registry()

        entities = {}
        if types:
            entities[f"{BASE_MODULE}.py"] = self.render("orm_base.py.j2", f"{BASE_MODULE}.py", {})

        for enum in ir.enums.values():
            filename = f"{to_snake_case(enum.name)}.py"
            entities[filename] = self.render("orm_enum.py.j2", filename, {"enum": enum})

        for ir_type in types:
            filename = f"{to_snake_case(ir_type.name)}.py"
            if filename in entities:
                raise GenerationError(
                    f"Entity module {filename} for type {ir_type.name} collides with another module"
                )
            entities[filename] = self._render_entity(
                ir_type, config, scalars, self._belongs_to(ir_type, relationships, emitted),
                emitted, filename,
            )

        logger.debug("Rendered %d entity modules", len(entities))
        return entities

    def emit_migrations(self, ir: IRSchema, config: CodegenConfig) -> list[MigrationFile]:
        generated_at = self.generated_at or datetime.now(timezone.utc)
        relationships = self.relationships(ir)
        emitter = MigrationEmitter(config.db, config.scalar_registry(), config.table_naming)
        return [
            emitter.emit(
                ir_type,
                timestamped_migration_name(ir_type.name, generated_at, sequence),
                relationships.get(ir_type.name),
            )
            for sequence, ir_type in enumerate(self.storage_types(ir, config))
        ]

    @staticmethod
    def _belongs_to(
        ir_type: IRObjectType,
        relationships: dict[str, list[Relationship]],
        emitted: set[str],
    ) -> list[Relationship]:
        return [
            r for r in relationships.get(ir_type.name, [])
            if r.relationship_type is RelationshipType.BELONGS_TO and r.related_type in emitted
        ]

    def _render_entity(
        self,
        ir_type: IRObjectType,
        config: CodegenConfig,
        scalars: ScalarRegistry,
        belongs_to: list[Relationship],
        emitted: set[str],
        filename: str,
    ) -> str:
        columns = [
            replace(column, attribute=f"{column.attribute}_")
            if column.attribute in DECLARATIVE_RESERVED else column
            for column in self.build_columns(ir_type, config, scalars, belongs_to, emitted)
        ]
        primary_key = next(column for column in columns if column.primary_key)
        relations = _relations(ir_type, columns, belongs_to)

        imports = ImportBlock()
        imports.add_from("sqlalchemy.orm", "Mapped")
        imports.add_from("sqlalchemy.orm", "mapped_column")
        if relations:
            imports.add_from("sqlalchemy.orm", "relationship")
        self.column_imports(columns, imports)
        self.python_imports(ir_type, columns, config, scalars, imports)
        for column in columns:
            if column.foreign_key:
                imports.add_from("sqlalchemy", "ForeignKey")
            if column.uuid_default:
                imports.add_from("uuid", "uuid4")
        imports.add_from(f".{BASE_MODULE}", "Base")
        for enum_name in self.enum_names(ir_type):
            imports.add_from(f".{to_snake_case(enum_name)}", enum_name)

        return self.render("orm_entity.py.j2", filename, {
            "imports": imports,
            "name": ir_type.name,
            "table_name": table_name(ir_type.name, config.table_naming),
            "description": ir_type.description,
            "columns": columns,
            "primary_key": primary_key,
            "relations": relations,
        })


def _relations(
    ir_type: IRObjectType,
    columns: list[ColumnSpec],
    belongs_to: list[Relationship],
) -> list[dict]:
    """Relationship attributes for the BELONGS_TO links of one type.

    "categoryId" becomes the attribute "category"; a name already taken by a
    column gets a "_ref" suffix.
    """
    by_column = {column.name: column for column in columns}
    taken = {column.attribute for column in columns} | DECLARATIVE_RESERVED

    relations = []
    for relationship in belongs_to:
        column = by_column[to_snake_case(relationship.field_name)]
        attribute = safe_identifier(to_snake_case(relationship.field_name[: -len(FOREIGN_KEY_SUFFIX)]))
        while attribute in taken:
            attribute += "_ref"
        taken.add(attribute)
        relations.append({
            "attribute": attribute,
            "member": constant_case(attribute),
            "kind": relationship.relationship_type.value,
            "related_type": relationship.related_type,
            "column": column,
            "self_referential": relationship.related_type == ir_type.name,
        })
    return relations
