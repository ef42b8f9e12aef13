"""Table-declaration backend: SQLAlchemy Core tables plus pydantic row models.

Output layout:
    schema.py           MetaData, enum classes and one Table(...) per type
    entities/<type>.py  <Type> read model and New<Type> insert model
"""

import logging
from dataclasses import replace

from ..config import CodegenConfig
from ..ir import IRObjectType, IRSchema
from ..naming import quote, table_name, to_snake_case
from ..scalars import ScalarRegistry
from .base import Backend, ColumnSpec, ImportBlock, MigrationFile
from .migrations import MigrationEmitter, migration_name

logger = logging.getLogger(__name__)


class SqlAlchemyCoreBackend(Backend):
    """Emits a shared schema module and per-type pydantic models."""

    schema_file = "schema.py"
    objects_only_by_default = False

    def emit_schema(self, ir: IRSchema, config: CodegenConfig) -> str:
        scalars = config.scalar_registry()
        relationships = self.relationships(ir)
        types = self.storage_types(ir, config)
        emitted = {t.name for t in types}

        imports = ImportBlock()
        for name in ("MetaData", "Table", "Column"):
            imports.add_from("sqlalchemy", name)

        tables = []
        for ir_type in types:
            columns = self.build_columns(
                ir_type, config, scalars, relationships.get(ir_type.name), emitted
            )
            self.column_imports(columns, imports)
            for column in columns:
                if column.foreign_key:
                    imports.add_from("sqlalchemy", "ForeignKey")
                if column.uuid_default:
                    imports.add_from("uuid", "uuid4")
            tables.append({
                "variable": f"{to_snake_case(ir_type.name)}_table",
                "name": table_name(ir_type.name, config.table_naming),
                "description": ir_type.description,
                "columns": columns,
            })

        logger.debug("Rendering %d tables and %d enums", len(tables), len(ir.enums))
        return self.render("core_schema.py.j2", self.schema_file, {
            "imports": imports,
            "enums": list(ir.enums.values()),
            "tables": tables,
        })

    def emit_entities(self, ir: IRSchema, config: CodegenConfig) -> dict[str, str]:
        scalars = config.scalar_registry()
        entities = {}
        for ir_type in self.storage_types(ir, config):
            filename = f"{to_snake_case(ir_type.name)}.py"
            entities[filename] = self._render_models(ir_type, config, scalars, filename)
        return entities

    def emit_migrations(self, ir: IRSchema, config: CodegenConfig) -> list[MigrationFile]:
        relationships = self.relationships(ir)
        emitter = MigrationEmitter(config.db, config.scalar_registry(), config.table_naming)
        return [
            emitter.emit(ir_type, migration_name(ir_type.name), relationships.get(ir_type.name))
            for ir_type in self.storage_types(ir, config)
        ]

    def _render_models(
        self,
        ir_type: IRObjectType,
        config: CodegenConfig,
        scalars: ScalarRegistry,
        filename: str,
    ) -> str:
        columns = _model_columns(self.build_columns(ir_type, config, scalars))

        imports = ImportBlock()
        imports.add_from("pydantic", "BaseModel")
        imports.add_from("pydantic", "ConfigDict")
        self.python_imports(ir_type, columns, config, scalars, imports)
        for enum_name in self.enum_names(ir_type):
            imports.add_from("..schema", enum_name)
        if any(column.attribute != column.name for column in columns):
            imports.add_from("pydantic", "Field")

        return self.render("core_entity.py.j2", filename, {
            "imports": imports,
            "table_name": table_name(ir_type.name, config.table_naming),
            "name": ir_type.name,
            "description": ir_type.description,
            "read_fields": [_model_field(column) for column in columns],
            "insert_fields": [_model_field(column) for column in columns if not column.primary_key],
        })


def _model_field(column: ColumnSpec) -> dict[str, str]:
    """Attribute, annotation and default for one pydantic model field."""
    if column.attribute != column.name:
        if column.nullable:
            default = f" = Field(None, alias={quote(column.name)})"
        else:
            default = f" = Field(alias={quote(column.name)})"
    else:
        default = " = None" if column.nullable else ""
    return {
        "attribute": column.attribute,
        "annotation": column.annotation,
        "default": default,
    }


def _model_columns(columns: list[ColumnSpec]) -> list[ColumnSpec]:
    """Rename attributes pydantic would treat as private.

    "_id" becomes "field_id"; the column name stays reachable through the
    field alias.
    """
    taken = {column.attribute for column in columns}
    renamed = []
    for column in columns:
        if column.attribute.startswith("_"):
            attribute = f"field{column.attribute}"
            while attribute in taken:
                attribute += "_"
            taken.add(attribute)
            column = replace(column, attribute=attribute)
        renamed.append(column)
    return renamed
