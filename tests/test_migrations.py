"""Tests for the SQL migration emitter."""

from datetime import datetime

import pytest

from gql_ormgen.core.backends import GenerationError
from gql_ormgen.core.backends.migrations import (
    MigrationEmitter,
    migration_name,
    timestamped_migration_name,
)
from gql_ormgen.core.ir import FieldType, IRField, IRObjectType
from gql_ormgen.core.options import DatabaseType, TableNamingConvention
from gql_ormgen.core.relationships import Relationship
from gql_ormgen.core.scalars import ScalarRegistry


@pytest.fixture
def user_type():
    return IRObjectType(
        name="User",
        fields=[
            IRField(name="name", field_type=FieldType.scalar("String"), is_nullable=False),
            IRField(name="email", field_type=FieldType.scalar("String")),
        ],
    )


@pytest.fixture
def post_type():
    return IRObjectType(
        name="BlogPost",
        fields=[
            IRField(name="id", field_type=FieldType.scalar("ID"), is_nullable=False),
            IRField(name="categoryId", field_type=FieldType.scalar("ID"), is_nullable=False),
            IRField(name="author", field_type=FieldType.reference("User")),
            IRField(name="publishedAt", field_type=FieldType.scalar("DateTime")),
            IRField(name="status", field_type=FieldType.enum("Status"), is_nullable=False),
        ],
    )


# =============================================================================
# Names
# =============================================================================


class TestMigrationNames:
    """Tests for migration naming."""

    def test_plain_name(self):
        assert migration_name("BlogPost") == "create_blog_post_table"

    def test_timestamped_name(self):
        generated_at = datetime(2024, 1, 15, 10, 30, 0)
        assert timestamped_migration_name("User", generated_at, 0) == "m20240115_103000_create_user_table"
        assert timestamped_migration_name("Post", generated_at, 1) == "m20240115_103001_create_post_table"

    def test_timestamped_names_sort_in_order(self):
        generated_at = datetime(2024, 12, 31, 23, 59, 58)
        names = [timestamped_migration_name(t, generated_at, i) for i, t in enumerate(["Zoo", "Apple", "Mid"])]
        assert sorted(names) == names
        assert len(set(names)) == 3


# =============================================================================
# DDL
# =============================================================================


class TestMigrationEmitter:
    """Tests for MigrationEmitter."""

    def test_sqlite_synthesized_id(self, user_type):
        migration = MigrationEmitter(DatabaseType.SQLITE).emit(user_type, "create_user_table")
        assert migration.name == "create_user_table"
        assert migration.up_sql == (
            "CREATE TABLE user (\n"
            "    id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "    name TEXT NOT NULL,\n"
            "    email TEXT\n"
            ");\n"
        )
        assert migration.down_sql == "DROP TABLE user;\n"

    @pytest.mark.parametrize(
        "db,ddl",
        [
            (DatabaseType.POSTGRES, "id UUID PRIMARY KEY DEFAULT gen_random_uuid()"),
            (DatabaseType.MYSQL, "id INT UNSIGNED PRIMARY KEY AUTO_INCREMENT"),
        ],
    )
    def test_engine_primary_keys(self, user_type, db, ddl):
        migration = MigrationEmitter(db).emit(user_type, "create_user_table")
        assert f"    {ddl},\n" in migration.up_sql

    def test_id_field_uses_engine_ddl(self, post_type):
        up_sql = MigrationEmitter(DatabaseType.SQLITE).emit(post_type, "m").up_sql
        assert "    id INTEGER PRIMARY KEY AUTOINCREMENT,\n" in up_sql
        assert up_sql.count("PRIMARY KEY") == 1

    def test_non_identifier_id_field(self):
        code = IRObjectType(
            name="Country",
            fields=[IRField(name="id", field_type=FieldType.scalar("String"), is_nullable=False)],
        )
        up_sql = MigrationEmitter(DatabaseType.POSTGRES).emit(code, "m").up_sql
        assert "    id TEXT NOT NULL PRIMARY KEY\n" in up_sql

    def test_capitalized_id_field_is_primary_key(self):
        doc = IRObjectType(
            name="Doc",
            fields=[
                IRField(name="Id", field_type=FieldType.scalar("ID"), is_nullable=False),
                IRField(name="title", field_type=FieldType.scalar("String")),
            ],
        )
        assert MigrationEmitter(DatabaseType.SQLITE).emit(doc, "m").up_sql == (
            "CREATE TABLE doc (\n"
            "    id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "    title TEXT\n"
            ");\n"
        )

    def test_colliding_column_names(self):
        doc = IRObjectType(
            name="Doc",
            fields=[
                IRField(name="id", field_type=FieldType.scalar("ID"), is_nullable=False),
                IRField(name="Id", field_type=FieldType.scalar("Int")),
            ],
        )
        with pytest.raises(GenerationError, match="both map to column 'id'"):
            MigrationEmitter(DatabaseType.SQLITE).emit(doc, "m")

    def test_column_types(self, post_type):
        up_sql = MigrationEmitter(DatabaseType.POSTGRES, ScalarRegistry()).emit(post_type, "m").up_sql
        assert "    category_id UUID NOT NULL,\n" in up_sql
        assert "    author UUID,\n" in up_sql
        assert "    published_at TIMESTAMP,\n" in up_sql
        assert "    status TEXT NOT NULL\n" in up_sql

    def test_unknown_scalar_without_registry(self, post_type):
        up_sql = MigrationEmitter(DatabaseType.SQLITE).emit(post_type, "m").up_sql
        assert "    published_at TEXT,\n" in up_sql

    def test_indexes_for_foreign_keys_and_references(self, post_type):
        relationships = [Relationship(field_name="categoryId", related_type="Category")]
        up_sql = MigrationEmitter(DatabaseType.SQLITE).emit(post_type, "m", relationships).up_sql
        assert up_sql.endswith(
            ");\n\n"
            "CREATE INDEX idx_blog_post_category_id ON blog_post (category_id);\n\n"
            "CREATE INDEX idx_blog_post_author ON blog_post (author);\n"
        )

    def test_reference_indexed_without_relationships(self, post_type):
        up_sql = MigrationEmitter(DatabaseType.SQLITE).emit(post_type, "m").up_sql
        assert "idx_blog_post_author" in up_sql
        assert "idx_blog_post_category_id" not in up_sql

    def test_pascal_case_tables(self, post_type):
        emitter = MigrationEmitter(DatabaseType.SQLITE, table_naming=TableNamingConvention.PASCAL_CASE)
        migration = emitter.emit(post_type, "m")
        assert migration.up_sql.startswith("CREATE TABLE BlogPost (\n")
        assert "CREATE INDEX idx_blog_post_author ON BlogPost (author);" in migration.up_sql
        assert migration.down_sql == "DROP TABLE BlogPost;\n"

    def test_type_without_fields(self):
        migration = MigrationEmitter(DatabaseType.MYSQL).emit(IRObjectType(name="SearchResult"), "m")
        assert migration.up_sql == (
            "CREATE TABLE search_result (\n"
            "    id INT UNSIGNED PRIMARY KEY AUTO_INCREMENT\n"
            ");\n"
        )

    def test_indexed_columns(self, post_type):
        relationships = [Relationship(field_name="categoryId", related_type="Category")]
        assert MigrationEmitter.indexed_columns(post_type, relationships) == ["category_id", "author"]
