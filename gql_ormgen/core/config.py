"""Generation configuration and its TOML/YAML loaders.

Two file formats resolve to the same CodegenConfig:

TOML (gql-ormgen.toml), flat keys:

    url = "https://api.example.com/graphql"
    orm = "sqlalchemy-core"
    db = "sqlite"
    output_dir = "./generated"

    [headers]
    Authorization = "Bearer token123"

    [scalar_mappings]
    Money = { python_type = "Decimal", import_statement = "from decimal import Decimal", column_type = "Numeric(12, 2)", sql_type = "NUMERIC(12, 2)" }

YAML (codegen.yml), the GraphQL Code Generator layout with an orm_codegen
section:

    schema: https://api.example.com/graphql
    orm_codegen:
      orm: sqlalchemy-orm
      db: postgres
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .options import DatabaseType, OrmType, TableNamingConvention
from .scalars import MappedScalarHandler, ScalarRegistry

logger = logging.getLogger(__name__)

TOML_CONFIG_NAME = "gql-ormgen.toml"
YAML_CONFIG_NAME = "gql-ormgen.yml"
CODEGEN_CONFIG_NAMES = ("codegen.yml", "codegen.yaml")
YAML_SECTION = "orm_codegen"

# Searched in order by CodegenConfig.auto_detect
CONFIG_CANDIDATES = (TOML_CONFIG_NAME, YAML_CONFIG_NAME, *CODEGEN_CONFIG_NAMES)


class ConfigError(Exception):
    """Raised when a configuration file is missing or invalid."""


class ScalarMapping(BaseModel):
    """User override for a custom scalar."""

    model_config = ConfigDict(extra="forbid")

    python_type: str
    import_statement: str | None = None
    column_type: str = "Text"
    sql_type: str = "TEXT"

    def to_handler(self) -> MappedScalarHandler:
        return MappedScalarHandler(
            python_type=self.python_type,
            import_statement=self.import_statement,
            column_type=self.column_type,
            sql_type=self.sql_type,
        )


class CodegenConfig(BaseModel):
    """Resolved configuration; the generators never see raw TOML/YAML."""

    model_config = ConfigDict(extra="forbid")

    url: str
    orm: OrmType = OrmType.SQLALCHEMY_CORE
    db: DatabaseType = DatabaseType.SQLITE
    output_dir: Path = Path("./generated")
    headers: dict[str, str] = Field(default_factory=dict)
    scalar_mappings: dict[str, ScalarMapping] = Field(default_factory=dict)
    table_naming: TableNamingConvention = TableNamingConvention.SNAKE_CASE
    generate_migrations: bool = True
    generate_entities: bool = True
    # None keeps each backend's own behaviour: the table style emits every
    # object-like type, the entity style only OBJECT kinds.
    object_types_only: bool | None = None
    exclude_root_types: bool = True
    template_dir: Path | None = None

    @field_validator("scalar_mappings", mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        # "DateTime = 'datetime'" is shorthand for {python_type = "datetime"}
        if isinstance(value, dict):
            return {
                name: {"python_type": m} if isinstance(m, str) else m
                for name, m in value.items()
            }
        return value

    def scalar_registry(self) -> ScalarRegistry:
        """Default scalar handlers overlaid with the configured overrides."""
        registry = ScalarRegistry()
        for name, mapping in self.scalar_mappings.items():
            registry.register(name, mapping.to_handler())
        return registry

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<config>") -> "CodegenConfig":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {source}:\n{e}") from e

    @classmethod
    def from_toml_str(cls, content: str, source: str = "<toml>") -> "CodegenConfig":
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse TOML in {source}: {e}") from e
        return cls.from_dict(data, source)

    @classmethod
    def from_yaml_str(cls, content: str, source: str = "<yaml>") -> "CodegenConfig":
        try:
            document = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML in {source}: {e}") from e
        if not isinstance(document, dict):
            raise ConfigError(f"Expected a mapping at the top level of {source}")

        section = document.get(YAML_SECTION) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"'{YAML_SECTION}' in {source} must be a mapping")

        data = dict(section)
        url, headers = _parse_schema_entry(document.get("schema"), source)
        if url is not None:
            data.setdefault("url", url)
        section_headers = data.get("headers") or {}
        if not isinstance(section_headers, dict):
            raise ConfigError(f"'{YAML_SECTION}.headers' in {source} must be a mapping")
        data["headers"] = {**(headers or {}), **section_headers}
        if "url" not in data:
            raise ConfigError(f"No schema URL found in {source}")
        return cls.from_dict(data, source)

    @classmethod
    def from_file(cls, path: str | Path) -> "CodegenConfig":
        """Load a config file, choosing the loader from its suffix."""
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

        logger.debug("Loading config from %s", path)
        if path.suffix.lower() in (".yml", ".yaml"):
            return cls.from_yaml_str(content, str(path))
        return cls.from_toml_str(content, str(path))

    @staticmethod
    def auto_detect(directory: str | Path = ".") -> Path:
        """Find a config file in directory, in CONFIG_CANDIDATES order."""
        directory = Path(directory)
        for name in CONFIG_CANDIDATES:
            candidate = directory / name
            if candidate.is_file():
                logger.debug("Auto-detected config file %s", candidate)
                return candidate
        raise ConfigError(
            f"No config file found in {directory.resolve()}. "
            f"Expected one of: {', '.join(CONFIG_CANDIDATES)}.\n"
            "Run 'gql-ormgen init --url <endpoint>' to create one."
        )

    def to_yaml_document(self) -> dict[str, Any]:
        """Render as a codegen.yml-style document."""
        section = self.model_dump(mode="json", exclude={"url", "headers"}, exclude_none=True)
        schema: Any = self.url
        if self.headers:
            schema = {"url": self.url, "headers": dict(self.headers)}
        return {"schema": schema, YAML_SECTION: section}

    def save_to_file(self, path: str | Path):
        """Save as YAML (the writable format)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_yaml_document(), f, sort_keys=False)

    @staticmethod
    def config_path(output_dir: str | Path) -> Path:
        """Default location of the config file saved by 'init'."""
        return Path(output_dir) / YAML_CONFIG_NAME


def _parse_schema_entry(entry: Any, source: str) -> tuple[str | None, dict[str, str]]:
    """Extract (url, headers) from a GraphQL Code Generator 'schema' entry.

    Supported forms:
        schema: https://...
        schema: {url: https://..., headers: {...}}
        schema: {"https://...": {headers: {...}}}
        schema: [<any of the above>, ...]   (first entry wins)
    """
    if entry is None:
        return None, {}
    if isinstance(entry, list):
        if not entry:
            return None, {}
        return _parse_schema_entry(entry[0], source)
    if isinstance(entry, str):
        return entry, {}
    if isinstance(entry, dict):
        if "url" in entry:
            return str(entry["url"]), _string_headers(entry.get("headers"), source)
        if len(entry) == 1:
            url, options = next(iter(entry.items()))
            headers = options.get("headers") if isinstance(options, dict) else None
            return str(url), _string_headers(headers, source)
    raise ConfigError(f"Unsupported 'schema' entry in {source}: {entry!r}")


def _string_headers(headers: Any, source: str) -> dict[str, str]:
    if headers is None:
        return {}
    if not isinstance(headers, dict):
        raise ConfigError(f"'headers' in {source} must be a mapping")
    return {str(k): str(v) for k, v in headers.items()}
