"""Backend emitters, one per ORM style."""

from datetime import datetime
from pathlib import Path

from ..options import OrmType
from ..relationships import detect_relationships
from .base import (
    Backend,
    ColumnSpec,
    GenerationError,
    ImportBlock,
    MigrationFile,
    RelationshipResolver,
)
from .migrations import MigrationEmitter, migration_name, timestamped_migration_name
from .sqlalchemy_core import SqlAlchemyCoreBackend
from .sqlalchemy_orm import SqlAlchemyOrmBackend


def create_backend(
    orm: OrmType,
    template_dir: str | Path | None = None,
    generated_at: datetime | None = None,
    relationship_resolver: RelationshipResolver = detect_relationships,
) -> Backend:
    """Return the backend for an ORM style.

    generated_at only affects the entity-model style, whose migration names
    carry a timestamp.
    """
    orm = OrmType(orm)
    if orm is OrmType.SQLALCHEMY_CORE:
        return SqlAlchemyCoreBackend(template_dir, relationship_resolver)
    return SqlAlchemyOrmBackend(template_dir, generated_at, relationship_resolver)


__all__ = [
    "Backend",
    "ColumnSpec",
    "GenerationError",
    "ImportBlock",
    "MigrationEmitter",
    "MigrationFile",
    "RelationshipResolver",
    "SqlAlchemyCoreBackend",
    "SqlAlchemyOrmBackend",
    "create_backend",
    "migration_name",
    "timestamped_migration_name",
]
