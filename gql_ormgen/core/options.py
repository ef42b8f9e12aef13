"""Enumerations shared by the configuration and the code generators."""

from enum import Enum


class OrmType(str, Enum):
    """Backend style used to emit code.

    SQLALCHEMY_CORE emits table declarations plus read/insert models,
    SQLALCHEMY_ORM emits one declarative entity module per type.
    """

    SQLALCHEMY_CORE = "sqlalchemy-core"
    SQLALCHEMY_ORM = "sqlalchemy-orm"


class DatabaseType(str, Enum):
    """Target storage engine."""

    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MYSQL = "mysql"


class TableNamingConvention(str, Enum):
    """How GraphQL type names become table names."""

    SNAKE_CASE = "snake_case"
    PASCAL_CASE = "pascal_case"
