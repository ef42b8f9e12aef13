"""Orchestrates code generation from an IR.

Runs pre-generation hooks, hands the IR to the configured backend and runs
post-generation hooks over every artifact. Nothing here touches the
filesystem; see gql_ormgen.writer for that.

Usage:
    config = CodegenConfig(orm="sqlalchemy-orm", db="postgres")
    result = CodeGenerator(config).generate_from_raw(raw_schema)
    write_artifacts(result, config.output_dir)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from .backends import Backend, MigrationFile, RelationshipResolver, create_backend
from .config import CodegenConfig
from .hooks import HookRunner
from .introspection import RawSchema
from .ir import IRSchema
from .parser import normalize
from .relationships import detect_relationships

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Every artifact of one generation run, keyed by output-relative path."""
    schema_file: str | None = None
    schema: str | None = None
    entities: dict[str, str] = field(default_factory=dict)
    migrations: list[MigrationFile] = field(default_factory=list)

    def files(self) -> dict[str, str]:
        """Flatten the result to output-relative path -> content."""
        files = {}
        if self.schema_file and self.schema is not None:
            files[self.schema_file] = self.schema
        for name, content in self.entities.items():
            files[f"entities/{name}"] = content
        for migration in self.migrations:
            files[f"migrations/{migration.name}/up.sql"] = migration.up_sql
            files[f"migrations/{migration.name}/down.sql"] = migration.down_sql
        return files


class CodeGenerator:
    """Generates ORM code and migrations for one configuration.

    The generator holds no state between runs: generate() may be called
    from several threads at once.
    """

    def __init__(
        self,
        config: CodegenConfig,
        backend: Backend | None = None,
        hooks: HookRunner | None = None,
        generated_at: datetime | None = None,
        relationship_resolver: RelationshipResolver = detect_relationships,
    ):
        """
        Args:
            config: Generation settings.
            backend: Backend to use. Defaults to the one for config.orm, built
                     with config.template_dir, generated_at and
                     relationship_resolver.
            hooks: Optional pre/post generation hooks.
            generated_at: Timestamp for migration names (entity-model style).
            relationship_resolver: Source of relationships for the IR.
        """
        self.config = config
        self.backend = backend or create_backend(
            config.orm,
            template_dir=config.template_dir,
            generated_at=generated_at,
            relationship_resolver=relationship_resolver,
        )
        self.hooks = hooks or HookRunner()

    def generate(self, ir: IRSchema) -> GenerationResult:
        """Run the backend over an IR and return every artifact."""
        ir = self.hooks.run_pre_hooks(ir)
        result = GenerationResult()

        if self.config.generate_entities:
            result.schema_file = self.backend.schema_file
            result.schema = self._post(
                self.backend.schema_file, self.backend.emit_schema(ir, self.config)
            )
            result.entities = {
                name: self._post(f"entities/{name}", content)
                for name, content in self.backend.emit_entities(ir, self.config).items()
            }
            logger.info("Generated %d entity files", len(result.entities))

        if self.config.generate_migrations:
            result.migrations = [
                MigrationFile(
                    name=migration.name,
                    up_sql=self._post(f"migrations/{migration.name}/up.sql", migration.up_sql),
                    down_sql=self._post(f"migrations/{migration.name}/down.sql", migration.down_sql),
                )
                for migration in self.backend.emit_migrations(ir, self.config)
            ]
            logger.info("Generated %d migrations", len(result.migrations))

        return result

    def generate_from_raw(self, raw: RawSchema) -> GenerationResult:
        """Normalize a raw introspection schema, then generate."""
        ir = normalize(raw, exclude_root_types=self.config.exclude_root_types)
        logger.debug(
            "Normalized schema: %d types, %d enums, %d scalars",
            len(ir.objects), len(ir.enums), len(ir.scalars),
        )
        return self.generate(ir)

    def _post(self, filename: str, content: str) -> str:
        return self.hooks.run_post_hooks(filename, content)
