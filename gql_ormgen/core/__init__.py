"""Core modules for GraphQL to ORM code generation."""

from .backends import (
    Backend,
    GenerationError,
    MigrationEmitter,
    MigrationFile,
    SqlAlchemyCoreBackend,
    SqlAlchemyOrmBackend,
    create_backend,
)
from .config import CodegenConfig, ConfigError, ScalarMapping
from .generator import CodeGenerator, GenerationResult
from .hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .introspection import RawSchema, load_raw_schema
from .introspector import IntrospectionError, SchemaIntrospector
from .ir import (
    FieldKind,
    FieldType,
    IREnum,
    IREnumValue,
    IRField,
    IRObjectType,
    IRScalar,
    IRSchema,
    TypeKind,
)
from .naming import table_name, to_snake_case
from .options import DatabaseType, OrmType, TableNamingConvention
from .parser import SchemaError, SchemaNormalizer, normalize, resolve_type_ref
from .relationships import Relationship, RelationshipType, detect_relationships
from .scalars import (
    DateHandler,
    DateTimeHandler,
    JSONHandler,
    MappedScalarHandler,
    ScalarHandler,
    ScalarRegistry,
    UUIDHandler,
)

__all__ = [
    # Options and config
    "OrmType",
    "DatabaseType",
    "TableNamingConvention",
    "CodegenConfig",
    "ConfigError",
    "ScalarMapping",
    # Scalars
    "ScalarHandler",
    "ScalarRegistry",
    "DateTimeHandler",
    "DateHandler",
    "UUIDHandler",
    "JSONHandler",
    "MappedScalarHandler",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "HookRunner",
    # IR types
    "TypeKind",
    "FieldKind",
    "FieldType",
    "IRField",
    "IRObjectType",
    "IREnum",
    "IREnumValue",
    "IRScalar",
    "IRSchema",
    # Introspection
    "RawSchema",
    "load_raw_schema",
    "SchemaIntrospector",
    "IntrospectionError",
    # Parser
    "SchemaError",
    "SchemaNormalizer",
    "normalize",
    "resolve_type_ref",
    # Naming and relationships
    "to_snake_case",
    "table_name",
    "Relationship",
    "RelationshipType",
    "detect_relationships",
    # Backends
    "Backend",
    "GenerationError",
    "MigrationEmitter",
    "MigrationFile",
    "SqlAlchemyCoreBackend",
    "SqlAlchemyOrmBackend",
    "create_backend",
    # Generator
    "CodeGenerator",
    "GenerationResult",
]
