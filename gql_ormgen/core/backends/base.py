"""Shared machinery for backend emitters.

Renders Jinja2 templates to produce Python code from the IR.

Template lookup order:
1. config.template_dir (if provided)
2. Package default templates
"""

import ast
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from ..config import CodegenConfig
from ..ir import FieldKind, IRField, IRObjectType, IRSchema
from ..naming import (
    constant_case,
    pascal_case,
    quote,
    safe_comment,
    safe_docstring,
    safe_identifier,
    table_name,
    to_snake_case,
)
from ..options import DatabaseType
from ..relationships import Relationship, detect_relationships
from ..scalars import ScalarRegistry
from ..type_mapping import (
    column_type_for_field,
    column_type_import,
    id_auto_increments,
    id_column_type,
    id_python_type,
    python_import_for_field,
    python_import_for_type,
    python_type_for_field,
)

logger = logging.getLogger(__name__)

PRIMARY_KEY_NAME = "id"

RelationshipResolver = Callable[[IRSchema], dict[str, list[Relationship]]]


class GenerationError(Exception):
    """Raised when a backend produces an invalid artifact."""


@dataclass
class MigrationFile:
    """A forward/backward SQL pair for one table."""
    name: str
    up_sql: str
    down_sql: str


@dataclass
class ColumnSpec:
    """One column of a generated table or model, with every type already mapped."""
    name: str
    attribute: str
    python_type: str
    column_type: str
    nullable: bool
    primary_key: bool = False
    auto_increment: bool = False
    uuid_default: bool = False
    foreign_key: str | None = None
    description: str | None = None
    synthesized: bool = False

    @property
    def annotation(self) -> str:
        if self.nullable:
            return f"{self.python_type} | None"
        return self.python_type

    @property
    def member(self) -> str:
        """Enum member name for this column."""
        return constant_case(self.name)


class ImportBlock:
    """Collects import statements for a generated module."""

    def __init__(self):
        self._from: dict[str, set[str]] = {}
        self._plain: set[str] = set()

    def add_from(self, module: str, name: str):
        self._from.setdefault(module, set()).add(name)

    def add_statement(self, statement: str | None):
        """Add "import x" or "from x import a, b"."""
        if not statement:
            return
        statement = statement.strip()
        if statement.startswith("from "):
            module, _, names = statement[len("from "):].partition(" import ")
            for name in names.split(","):
                self.add_from(module.strip(), name.strip())
        else:
            self._plain.add(statement)

    @property
    def absolute(self) -> list[str]:
        lines = sorted(self._plain)
        for module in sorted(m for m in self._from if not m.startswith(".")):
            lines.append(f"from {module} import {', '.join(sorted(self._from[module]))}")
        return lines

    @property
    def relative(self) -> list[str]:
        return [
            f"from {module} import {', '.join(sorted(self._from[module]))}"
            for module in sorted(m for m in self._from if m.startswith("."))
        ]


def is_primary_key_field(ir_field: IRField) -> bool:
    """True when a field maps to the id column, whatever its GraphQL casing."""
    return to_snake_case(ir_field.name) == PRIMARY_KEY_NAME


def has_primary_key_field(ir_type: IRObjectType) -> bool:
    return any(is_primary_key_field(ir_field) for ir_field in ir_type.fields)


def check_column_names(ir_type: IRObjectType):
    """Raise GenerationError when two fields of a type map to the same column."""
    seen: dict[str, str] = {}
    for ir_field in ir_type.fields:
        column = to_snake_case(ir_field.name)
        if column in seen:
            raise GenerationError(
                f"Fields '{seen[column]}' and '{ir_field.name}' of type {ir_type.name} "
                f"both map to column '{column}'"
            )
        seen[column] = ir_field.name


def is_identifier_field(ir_field: IRField) -> bool:
    """True for ID scalars and references, which use the engine's identifier type."""
    kind = ir_field.field_type.kind
    return kind is FieldKind.REFERENCE or (
        kind is FieldKind.SCALAR and ir_field.field_type.name == "ID"
    )


class Backend(ABC):
    """Common interface for backend emitters.

    Subclasses implement the three emit operations; each is a pure function
    of the IR and the configuration.
    """

    # Relative path the orchestrator reports for emit_schema's output
    schema_file: str = ""
    # Whether only OBJECT kinds reach entities/migrations when
    # config.object_types_only is None
    objects_only_by_default: bool = False

    def __init__(
        self,
        template_dir: str | Path | None = None,
        relationship_resolver: RelationshipResolver = detect_relationships,
    ):
        """Initialize the backend.

        Args:
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
            relationship_resolver: Callable returning type name -> relationships
                          for an IR. Defaults to foreign-key name inference.
        """
        self.template_dir = template_dir
        self.relationship_resolver = relationship_resolver
        self.env = self._build_environment(template_dir)

    @abstractmethod
    def emit_schema(self, ir: IRSchema, config: CodegenConfig) -> str:
        """Return the schema declaration text."""

    @abstractmethod
    def emit_entities(self, ir: IRSchema, config: CodegenConfig) -> dict[str, str]:
        """Return entity file name -> file text."""

    @abstractmethod
    def emit_migrations(self, ir: IRSchema, config: CodegenConfig) -> list[MigrationFile]:
        """Return migrations in application order."""

    def storage_types(self, ir: IRSchema, config: CodegenConfig) -> list[IRObjectType]:
        """Types that produce entities and migrations under this backend."""
        objects_only = config.object_types_only
        if objects_only is None:
            objects_only = self.objects_only_by_default
        if objects_only:
            return ir.object_types()
        return list(ir.objects.values())

    def relationships(self, ir: IRSchema) -> dict[str, list[Relationship]]:
        return self.relationship_resolver(ir)

    # -- templates -------------------------------------------------------

    @staticmethod
    def _build_environment(template_dir: str | Path | None) -> Environment:
        # Custom templates take precedence
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
            else:
                logger.warning("Template directory %s does not exist, using defaults", template_path)
        loaders.append(PackageLoader("gql_ormgen", "templates"))

        env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.filters["snake_case"] = to_snake_case
        env.filters["pascal_case"] = pascal_case
        env.filters["constant_case"] = constant_case
        env.filters["quote"] = quote
        env.filters["safe_docstring"] = safe_docstring
        env.filters["safe_comment"] = safe_comment
        env.filters["safe_identifier"] = safe_identifier
        return env

    def render(self, template_name: str, output_name: str, context: dict[str, Any]) -> str:
        """Render a template, validating Python syntax for .py outputs."""
        template = self.env.get_template(template_name)
        content = template.render(context)

        if output_name.endswith(".py"):
            try:
                ast.parse(content)
            except SyntaxError as e:
                raise GenerationError(
                    f"Generated invalid Python for {output_name}: {e}\n"
                    f"Template: {template_name}"
                ) from e
        return content

    # -- columns ---------------------------------------------------------

    @staticmethod
    def build_columns(
        ir_type: IRObjectType,
        config: CodegenConfig,
        scalars: ScalarRegistry,
        relationships: list[Relationship] | None = None,
        emitted_types: set[str] | None = None,
    ) -> list[ColumnSpec]:
        """Map a type's fields to columns, synthesizing an id when none exists.

        Foreign keys are attached for relationships whose target type is in
        emitted_types (all IR objects when None).
        """
        db = config.db
        targets = {
            r.field_name: r.related_type
            for r in relationships or []
            if emitted_types is None or r.related_type in emitted_types
        }

        check_column_names(ir_type)
        columns = []
        if not has_primary_key_field(ir_type):
            columns.append(
                ColumnSpec(
                    name=PRIMARY_KEY_NAME,
                    attribute=PRIMARY_KEY_NAME,
                    python_type=id_python_type(db),
                    column_type=id_column_type(db),
                    nullable=False,
                    primary_key=True,
                    auto_increment=id_auto_increments(db),
                    uuid_default=db is DatabaseType.POSTGRES,
                    synthesized=True,
                )
            )

        for ir_field in ir_type.fields:
            column_name = to_snake_case(ir_field.name)
            is_pk = is_primary_key_field(ir_field)
            is_identifier = is_identifier_field(ir_field)
            related = targets.get(ir_field.name)
            columns.append(
                ColumnSpec(
                    name=column_name,
                    attribute=safe_identifier(column_name),
                    python_type=python_type_for_field(ir_field, db, scalars),
                    column_type=column_type_for_field(ir_field, db, scalars),
                    nullable=ir_field.is_nullable and not is_pk,
                    primary_key=is_pk,
                    auto_increment=is_pk and is_identifier and id_auto_increments(db),
                    uuid_default=is_pk and is_identifier and db is DatabaseType.POSTGRES,
                    foreign_key=(
                        f"{table_name(related, config.table_naming)}.{PRIMARY_KEY_NAME}"
                        if related else None
                    ),
                    description=ir_field.description,
                )
            )
        return columns

    @staticmethod
    def python_imports(
        ir_type: IRObjectType,
        columns: list[ColumnSpec],
        config: CodegenConfig,
        scalars: ScalarRegistry,
        imports: ImportBlock,
    ):
        """Add imports for the Python types used by columns."""
        for ir_field in ir_type.fields:
            imports.add_statement(python_import_for_field(ir_field, config.db, scalars))
        for column in columns:
            if column.synthesized:
                imports.add_statement(python_import_for_type(column.python_type))

    @staticmethod
    def column_imports(columns: list[ColumnSpec], imports: ImportBlock):
        """Add imports for the SQLAlchemy column types used by columns."""
        for column in columns:
            module, name = column_type_import(column.column_type)
            imports.add_from(module, name)

    @staticmethod
    def enum_names(ir_type: IRObjectType) -> list[str]:
        """Enums referenced by a type's fields, in field order."""
        names = []
        for ir_field in ir_type.fields:
            if ir_field.field_type.kind is FieldKind.ENUM and ir_field.field_type.name not in names:
                names.append(ir_field.field_type.name)
        return names
