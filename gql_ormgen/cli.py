"""Command-line interface for gql-ormgen."""

import asyncio
import logging
from pathlib import Path

import click
from graphql import GraphQLError

from . import __version__
from .core.backends import GenerationError
from .core.config import CodegenConfig, ConfigError
from .core.generator import CodeGenerator, GenerationResult
from .core.introspection import RawSchema, load_raw_schema
from .core.introspector import IntrospectionError, SchemaIntrospector
from .core.options import DatabaseType, OrmType
from .core.parser import SchemaError
from .integration import IntegrationError, integrate as integrate_project
from .writer import write_artifacts

logger = logging.getLogger(__name__)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def configure_logging(verbosity: int):
    """Map -v count to a logging level: WARNING, INFO, then DEBUG."""
    logging.basicConfig(
        level=LOG_LEVELS.get(verbosity, logging.DEBUG),
        format="%(levelname)s %(name)s: %(message)s",
    )


def parse_headers(ctx, param, values) -> dict[str, str]:
    """Click callback turning repeated 'key:value' options into a dict."""
    headers = {}
    for value in values:
        key, sep, header_value = value.partition(":")
        if not sep:
            raise click.BadParameter(
                f"Invalid header format '{value}'. Headers must be in 'key:value' format.\n"
                "Example: -H 'Authorization:Bearer token123'"
            )
        key, header_value = key.strip(), header_value.strip()
        if not key:
            raise click.BadParameter("Header key cannot be empty. Format: 'key:value'")
        if not header_value:
            raise click.BadParameter("Header value cannot be empty. Format: 'key:value'")
        headers[key] = header_value
    return headers


def fetch_schema(config: CodegenConfig) -> RawSchema:
    """Introspect the configured endpoint."""

    async def _fetch() -> RawSchema:
        async with SchemaIntrospector(config.url, headers=config.headers) as introspector:
            return await introspector.introspect()

    return asyncio.run(_fetch())


def run_generation(config: CodegenConfig, raw: RawSchema) -> GenerationResult:
    """Generate and write every artifact for config."""
    click.echo(f"Generating {config.orm.value} code for {config.db.value}...")
    result = CodeGenerator(config).generate_from_raw(raw)
    write_artifacts(result, config.output_dir)
    click.echo(
        f"Done! Generated {len(result.entities)} entity files and "
        f"{len(result.migrations)} migrations in {config.output_dir}"
    )
    return result


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="gql-ormgen")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v, -vv).",
)
@click.pass_context
def main(ctx: click.Context, verbose: int):
    """Generate SQLAlchemy code and SQL migrations from GraphQL schemas.

    Without a subcommand, runs 'generate' with an auto-detected config file.
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(generate)


@main.command()
@click.option("--url", "-u", required=True, help="GraphQL endpoint URL.")
@click.option(
    "--orm",
    "-o",
    type=click.Choice([o.value for o in OrmType]),
    default=OrmType.SQLALCHEMY_CORE.value,
    show_default=True,
    help="ORM style to generate.",
)
@click.option(
    "--db",
    "-d",
    type=click.Choice([d.value for d in DatabaseType]),
    default=DatabaseType.SQLITE.value,
    show_default=True,
    help="Database engine.",
)
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=Path("./generated"),
    show_default=True,
    help="Output directory for generated code.",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    callback=parse_headers,
    help="Request header as 'key:value'. May be repeated.",
)
def init(url: str, orm: str, db: str, output: Path, headers: dict[str, str]):
    """Introspect an endpoint, save a config file and generate code.

    Examples:

        gql-ormgen init --url https://api.example.com/graphql

        gql-ormgen init -u http://localhost:4000/graphql -o sqlalchemy-orm -d postgres -H 'Authorization:Bearer token'
    """
    try:
        config = CodegenConfig(url=url, orm=orm, db=db, output_dir=output, headers=headers)
        click.echo(f"Introspecting {url}...")
        raw = fetch_schema(config)

        config_path = CodegenConfig.config_path(output)
        config.save_to_file(config_path)
        click.echo(f"Saved configuration to {config_path}")

        run_generation(config, raw)
    except (ConfigError, IntrospectionError, SchemaError, GenerationError) as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: auto-detect gql-ormgen.toml, gql-ormgen.yml or codegen.yml).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output directory (overrides the config file).",
)
@click.option(
    "--schema-file",
    "-s",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Local introspection JSON or SDL file to use instead of the endpoint.",
)
def generate(config_file: Path | None, output: Path | None, schema_file: Path | None):
    """Generate code from an existing configuration.

    Examples:

        gql-ormgen generate

        gql-ormgen generate --config codegen.yml --output ./src/db

        gql-ormgen generate -s ./schema.graphql
    """
    try:
        if config_file is None:
            config_file = CodegenConfig.auto_detect(".")
        click.echo(f"Using configuration {config_file}")
        config = CodegenConfig.from_file(config_file)
        if output is not None:
            config = config.model_copy(update={"output_dir": output})

        if schema_file is not None:
            click.echo(f"Loading schema from {schema_file}...")
            try:
                raw = load_raw_schema(schema_file)
            except (OSError, ValueError, GraphQLError) as e:
                raise click.ClickException(f"Cannot load schema from {schema_file}: {e}") from e
        else:
            click.echo(f"Introspecting {config.url}...")
            raw = fetch_schema(config)

        run_generation(config, raw)
    except (ConfigError, IntrospectionError, SchemaError, GenerationError) as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("./src"),
    show_default=True,
    help="Base directory for generated code (files go to <output>/db).",
)
@click.option("--no-scripts", is_flag=True, help="Do not add npm scripts to package.json.")
@click.option("--force", is_flag=True, help="Replace an existing orm_codegen section.")
def integrate(output: Path, no_scripts: bool, force: bool):
    """Add ORM generation to an existing GraphQL Code Generator project.

    Run from the directory holding codegen.yml.
    """
    try:
        result = integrate_project(".", output_dir=output, add_scripts=not no_scripts, force=force)
    except IntegrationError as e:
        raise click.ClickException(str(e)) from e

    if result.section_added:
        click.echo(f"Updated {result.codegen_path.name} with the orm_codegen section")
    else:
        click.echo(
            f"orm_codegen section already exists in {result.codegen_path.name}; "
            "use --force to overwrite it"
        )
    for script in result.scripts_added:
        click.echo(f"Added '{script}' script to package.json")
    click.echo("Integration complete! Run 'gql-ormgen generate' to generate your database code.")


if __name__ == "__main__":
    main()
