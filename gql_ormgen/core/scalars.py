"""Custom scalar handlers for ORM code generation.

Provides a protocol describing how a GraphQL custom scalar maps to a Python
type, a SQLAlchemy column type and a raw SQL column type. Scalars without a
handler fall back to text.

Example usage:
    from gql_ormgen.core.scalars import ScalarRegistry, MappedScalarHandler

    registry = ScalarRegistry()
    registry.register(
        "Money",
        MappedScalarHandler(
            python_type="Decimal",
            import_statement="from decimal import Decimal",
            column_type="Numeric(12, 2)",
            sql_type="NUMERIC(12, 2)",
        ),
    )
"""

from typing import Protocol, runtime_checkable

from .options import DatabaseType


@runtime_checkable
class ScalarHandler(Protocol):
    """Protocol for custom scalar handlers.

    Attributes:
        python_type: The Python type name (e.g., "datetime", "Decimal")
        import_statement: The import needed for python_type, or None
        column_type: A SQLAlchemy type expression (e.g., "DateTime")
    """

    python_type: str
    import_statement: str | None
    column_type: str

    def sql_type(self, db: DatabaseType) -> str:
        """Return the DDL type keyword for the given engine."""
        ...


class DateTimeHandler:
    """Handler for DateTime scalars."""

    python_type = "datetime"
    import_statement = "from datetime import datetime"
    column_type = "DateTime"

    def sql_type(self, db: DatabaseType) -> str:
        if db is DatabaseType.MYSQL:
            return "DATETIME"
        return "TIMESTAMP"


class DateHandler:
    """Handler for Date scalars."""

    python_type = "date"
    import_statement = "from datetime import date"
    column_type = "Date"

    def sql_type(self, db: DatabaseType) -> str:
        return "DATE"


class UUIDHandler:
    """Handler for UUID scalars."""

    python_type = "UUID"
    import_statement = "from uuid import UUID"
    column_type = "Uuid"

    def sql_type(self, db: DatabaseType) -> str:
        if db is DatabaseType.POSTGRES:
            return "UUID"
        if db is DatabaseType.MYSQL:
            return "CHAR(36)"
        return "TEXT"


class JSONHandler:
    """Handler for JSON scalars (stored as native JSON where available)."""

    python_type = "Any"
    import_statement = "from typing import Any"
    column_type = "JSON"

    def sql_type(self, db: DatabaseType) -> str:
        if db is DatabaseType.POSTGRES:
            return "JSONB"
        if db is DatabaseType.MYSQL:
            return "JSON"
        return "TEXT"


class MappedScalarHandler:
    """Handler built from user configuration.

    The same sql_type is used for every engine.
    """

    def __init__(
        self,
        python_type: str,
        import_statement: str | None = None,
        column_type: str = "Text",
        sql_type: str = "TEXT",
    ):
        self.python_type = python_type
        self.import_statement = import_statement
        self.column_type = column_type
        self._sql_type = sql_type

    def sql_type(self, db: DatabaseType) -> str:
        return self._sql_type


# Handlers every registry starts with unless include_defaults=False
DEFAULT_HANDLERS: dict[str, ScalarHandler] = {
    "DateTime": DateTimeHandler(),
    "Date": DateHandler(),
    "UUID": UUIDHandler(),
    "JSON": JSONHandler(),
    "JSONObject": JSONHandler(),
}


class ScalarRegistry:
    """Maps custom GraphQL scalar names to the handlers that type their columns.

    Builtin scalars (String, Int, ...) never reach the registry; the type
    tables in type_mapping cover them.

    Example:
        registry = ScalarRegistry()
        registry.register("Money", MappedScalarHandler("Decimal", sql_type="NUMERIC(12, 2)"))
        registry.get("Money").sql_type(DatabaseType.POSTGRES)  # "NUMERIC(12, 2)"
    """

    def __init__(self, include_defaults: bool = True):
        self._handlers: dict[str, ScalarHandler] = dict(DEFAULT_HANDLERS) if include_defaults else {}

    def register(self, scalar_name: str, handler: ScalarHandler):
        """Register a handler, replacing a default or earlier registration."""
        self._handlers[scalar_name] = handler

    def get(self, scalar_name: str) -> ScalarHandler | None:
        return self._handlers.get(scalar_name)

    def has(self, scalar_name: str) -> bool:
        return scalar_name in self._handlers

    def get_all_imports(self) -> set[str]:
        """Import statements of every registered handler's Python type."""
        return {
            handler.import_statement
            for handler in self._handlers.values()
            if handler.import_statement
        }
