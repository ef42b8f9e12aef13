"""Type mapping from IR fields to Python, SQLAlchemy and SQL column types.

The three tables below are kept in lock-step: every (scalar, engine) pair
present in one must be present in the other two. The "ID" rows also define
each engine's identifier type, used for references (foreign-key columns).
"""

from .ir import FieldKind, IRField
from .options import DatabaseType
from .scalars import ScalarRegistry

ID_SCALAR = "ID"

PYTHON_TYPES: dict[tuple[str, DatabaseType], str] = {
    ("ID", DatabaseType.SQLITE): "int",
    ("ID", DatabaseType.POSTGRES): "UUID",
    ("ID", DatabaseType.MYSQL): "NonNegativeInt",
    ("String", DatabaseType.SQLITE): "str",
    ("String", DatabaseType.POSTGRES): "str",
    ("String", DatabaseType.MYSQL): "str",
    ("Int", DatabaseType.SQLITE): "int",
    ("Int", DatabaseType.POSTGRES): "int",
    ("Int", DatabaseType.MYSQL): "int",
    ("Float", DatabaseType.SQLITE): "float",
    ("Float", DatabaseType.POSTGRES): "float",
    ("Float", DatabaseType.MYSQL): "float",
    ("Boolean", DatabaseType.SQLITE): "bool",
    ("Boolean", DatabaseType.POSTGRES): "bool",
    ("Boolean", DatabaseType.MYSQL): "bool",
}

COLUMN_TYPES: dict[tuple[str, DatabaseType], str] = {
    ("ID", DatabaseType.SQLITE): "Integer",
    ("ID", DatabaseType.POSTGRES): "Uuid",
    ("ID", DatabaseType.MYSQL): "INTEGER(unsigned=True)",
    ("String", DatabaseType.SQLITE): "Text",
    ("String", DatabaseType.POSTGRES): "Text",
    ("String", DatabaseType.MYSQL): "Text",
    ("Int", DatabaseType.SQLITE): "Integer",
    ("Int", DatabaseType.POSTGRES): "Integer",
    ("Int", DatabaseType.MYSQL): "Integer",
    ("Float", DatabaseType.SQLITE): "Double",
    ("Float", DatabaseType.POSTGRES): "Double",
    ("Float", DatabaseType.MYSQL): "Double",
    ("Boolean", DatabaseType.SQLITE): "Boolean",
    ("Boolean", DatabaseType.POSTGRES): "Boolean",
    ("Boolean", DatabaseType.MYSQL): "Boolean",
}

SQL_TYPES: dict[tuple[str, DatabaseType], str] = {
    ("ID", DatabaseType.SQLITE): "INTEGER",
    ("ID", DatabaseType.POSTGRES): "UUID",
    ("ID", DatabaseType.MYSQL): "INT UNSIGNED",
    ("String", DatabaseType.SQLITE): "TEXT",
    ("String", DatabaseType.POSTGRES): "TEXT",
    ("String", DatabaseType.MYSQL): "TEXT",
    ("Int", DatabaseType.SQLITE): "INTEGER",
    ("Int", DatabaseType.POSTGRES): "INTEGER",
    ("Int", DatabaseType.MYSQL): "INTEGER",
    ("Float", DatabaseType.SQLITE): "REAL",
    ("Float", DatabaseType.POSTGRES): "REAL",
    ("Float", DatabaseType.MYSQL): "REAL",
    ("Boolean", DatabaseType.SQLITE): "INTEGER",
    ("Boolean", DatabaseType.POSTGRES): "BOOLEAN",
    ("Boolean", DatabaseType.MYSQL): "TINYINT(1)",
}

# Fallbacks for scalars with no table entry and no registered handler
TEXT_PYTHON_TYPE = "str"
TEXT_COLUMN_TYPE = "Text"
TEXT_SQL_TYPE = "TEXT"
ENUM_COLUMN_TYPE = "Text"
ENUM_SQL_TYPE = "TEXT"

# Imports for the Python types the tables above can produce
PYTHON_TYPE_IMPORTS = {
    "UUID": "from uuid import UUID",
    "NonNegativeInt": "from pydantic import NonNegativeInt",
}

# Column types that do not live in the top-level sqlalchemy namespace
DIALECT_COLUMN_TYPES = {
    "INTEGER": "sqlalchemy.dialects.mysql",
}


def python_type_for_field(
    field: IRField,
    db: DatabaseType,
    scalars: ScalarRegistry | None = None,
) -> str:
    """Python type annotation for a field, without Optional/list wrapping."""
    kind = field.field_type.kind
    if kind is FieldKind.ENUM:
        return field.field_type.name
    if kind is FieldKind.REFERENCE:
        return PYTHON_TYPES[(ID_SCALAR, db)]
    mapped = PYTHON_TYPES.get((field.field_type.name, db))
    if mapped is not None:
        return mapped
    handler = scalars.get(field.field_type.name) if scalars else None
    return handler.python_type if handler else TEXT_PYTHON_TYPE


def column_type_for_field(
    field: IRField,
    db: DatabaseType,
    scalars: ScalarRegistry | None = None,
) -> str:
    """SQLAlchemy column type expression for a field."""
    kind = field.field_type.kind
    if kind is FieldKind.ENUM:
        return ENUM_COLUMN_TYPE
    if kind is FieldKind.REFERENCE:
        return COLUMN_TYPES[(ID_SCALAR, db)]
    mapped = COLUMN_TYPES.get((field.field_type.name, db))
    if mapped is not None:
        return mapped
    handler = scalars.get(field.field_type.name) if scalars else None
    return handler.column_type if handler else TEXT_COLUMN_TYPE


def sql_type_for_field(
    field: IRField,
    db: DatabaseType,
    scalars: ScalarRegistry | None = None,
) -> str:
    """Raw DDL column type for a field."""
    kind = field.field_type.kind
    if kind is FieldKind.ENUM:
        return ENUM_SQL_TYPE
    if kind is FieldKind.REFERENCE:
        return SQL_TYPES[(ID_SCALAR, db)]
    mapped = SQL_TYPES.get((field.field_type.name, db))
    if mapped is not None:
        return mapped
    handler = scalars.get(field.field_type.name) if scalars else None
    return handler.sql_type(db) if handler else TEXT_SQL_TYPE


def id_python_type(db: DatabaseType) -> str:
    return PYTHON_TYPES[(ID_SCALAR, db)]


def id_column_type(db: DatabaseType) -> str:
    return COLUMN_TYPES[(ID_SCALAR, db)]


def id_auto_increments(db: DatabaseType) -> bool:
    """Integer identifiers auto-increment; UUID identifiers are generated instead."""
    return db is not DatabaseType.POSTGRES


def python_import_for_type(
    python_type: str,
    scalars: ScalarRegistry | None = None,
    scalar_name: str | None = None,
) -> str | None:
    """Import statement needed to use python_type in generated code, if any."""
    if python_type in PYTHON_TYPE_IMPORTS:
        return PYTHON_TYPE_IMPORTS[python_type]
    if scalars and scalar_name:
        handler = scalars.get(scalar_name)
        if handler and handler.python_type == python_type:
            return handler.import_statement
    return None


def python_import_for_field(
    field: IRField,
    db: DatabaseType,
    scalars: ScalarRegistry | None = None,
) -> str | None:
    """Import statement for the field's Python type (enums are imported by the caller)."""
    if field.field_type.kind is FieldKind.ENUM:
        return None
    python_type = python_type_for_field(field, db, scalars)
    return python_import_for_type(python_type, scalars, field.field_type.name)


def column_type_import(column_type: str) -> tuple[str, str]:
    """Return (module, name) to import for a SQLAlchemy column type expression.

    "Numeric(12, 2)" -> ("sqlalchemy", "Numeric"),
    "INTEGER(unsigned=True)" -> ("sqlalchemy.dialects.mysql", "INTEGER").
    """
    name = column_type.split("(", 1)[0].strip()
    return DIALECT_COLUMN_TYPES.get(name, "sqlalchemy"), name
