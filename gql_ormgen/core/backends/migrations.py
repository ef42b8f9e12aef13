"""SQL migration emitter shared by both backends.

Each object type becomes one forward CREATE TABLE (plus indexes on its
foreign-key columns) and one backward DROP TABLE.
"""

from datetime import datetime, timedelta

from ..ir import FieldKind, IRObjectType
from ..naming import table_name, to_snake_case
from ..options import DatabaseType, TableNamingConvention
from ..relationships import Relationship
from ..scalars import ScalarRegistry
from ..type_mapping import sql_type_for_field
from .base import (
    PRIMARY_KEY_NAME,
    MigrationFile,
    check_column_names,
    has_primary_key_field,
    is_identifier_field,
    is_primary_key_field,
)

# Auto-generating primary key DDL per engine
PRIMARY_KEY_DDL = {
    DatabaseType.SQLITE: "INTEGER PRIMARY KEY AUTOINCREMENT",
    DatabaseType.POSTGRES: "UUID PRIMARY KEY DEFAULT gen_random_uuid()",
    DatabaseType.MYSQL: "INT UNSIGNED PRIMARY KEY AUTO_INCREMENT",
}

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def migration_name(type_name: str) -> str:
    """Stable name for a table-creation migration: create_<table>_table."""
    return f"create_{to_snake_case(type_name)}_table"


def timestamped_migration_name(type_name: str, generated_at: datetime, sequence: int) -> str:
    """m<YYYYMMDD>_<HHMMSS>_create_<table>_table.

    Each migration of a run is one second after the previous one, so names
    sort in application order within a run and across later runs.
    """
    stamp = (generated_at + timedelta(seconds=sequence)).strftime(TIMESTAMP_FORMAT)
    return f"m{stamp}_{migration_name(type_name)}"


class MigrationEmitter:
    """Emits CREATE/DROP TABLE SQL for object types."""

    def __init__(
        self,
        db: DatabaseType,
        scalars: ScalarRegistry | None = None,
        table_naming: TableNamingConvention = TableNamingConvention.SNAKE_CASE,
    ):
        self.db = db
        self.scalars = scalars
        self.table_naming = table_naming

    def emit(
        self,
        ir_type: IRObjectType,
        name: str,
        relationships: list[Relationship] | None = None,
    ) -> MigrationFile:
        """Build the migration for one type."""
        table = table_name(ir_type.name, self.table_naming)

        check_column_names(ir_type)
        columns = []
        if not has_primary_key_field(ir_type):
            columns.append(f"    {PRIMARY_KEY_NAME} {PRIMARY_KEY_DDL[self.db]}")

        for ir_field in ir_type.fields:
            column = to_snake_case(ir_field.name)
            if is_primary_key_field(ir_field):
                if is_identifier_field(ir_field):
                    columns.append(f"    {column} {PRIMARY_KEY_DDL[self.db]}")
                else:
                    sql_type = sql_type_for_field(ir_field, self.db, self.scalars)
                    columns.append(f"    {column} {sql_type} NOT NULL PRIMARY KEY")
                continue

            sql_type = sql_type_for_field(ir_field, self.db, self.scalars)
            not_null = "" if ir_field.is_nullable else " NOT NULL"
            columns.append(f"    {column} {sql_type}{not_null}")

        up_sql = f"CREATE TABLE {table} (\n" + ",\n".join(columns) + "\n);"
        for column in self.indexed_columns(ir_type, relationships):
            up_sql += f"\n\nCREATE INDEX idx_{to_snake_case(table)}_{column} ON {table} ({column});"

        return MigrationFile(
            name=name,
            up_sql=up_sql + "\n",
            down_sql=f"DROP TABLE {table};\n",
        )

    @staticmethod
    def indexed_columns(
        ir_type: IRObjectType,
        relationships: list[Relationship] | None = None,
    ) -> list[str]:
        """Columns holding foreign keys: inferred relationships and reference fields."""
        fk_fields = {r.field_name for r in relationships or [] if r.foreign_key}
        return [
            to_snake_case(f.name)
            for f in ir_type.fields
            if not is_primary_key_field(f)
            and (f.name in fk_fields or f.field_type.kind is FieldKind.REFERENCE)
        ]
