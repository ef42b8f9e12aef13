"""Integration with an existing GraphQL Code Generator project.

Adds an orm_codegen section to codegen.yml (or codegen.yaml) and, optionally,
npm scripts to package.json so the ORM generator runs next to the
TypeScript one.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .core.config import CODEGEN_CONFIG_NAMES, YAML_SECTION
from .core.options import DatabaseType, OrmType

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"

# Scripts added to package.json; existing entries are never overwritten
SCRIPTS = {
    "codegen:orm": "gql-ormgen generate",
    "codegen:all": "npm run codegen && npm run codegen:orm",
}


class IntegrationError(Exception):
    """Raised when the project cannot be integrated."""


@dataclass
class IntegrationResult:
    codegen_path: Path
    section_added: bool = False
    scripts_added: list[str] = field(default_factory=list)


def find_codegen_config(project_dir: str | Path = ".") -> Path:
    """Locate codegen.yml or codegen.yaml in project_dir."""
    project_dir = Path(project_dir)
    for name in CODEGEN_CONFIG_NAMES:
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    raise IntegrationError(
        "No GraphQL Code Generator config found. Expected 'codegen.yml' or "
        f"'codegen.yaml' in {project_dir.resolve()}.\n"
        "Set up GraphQL Code Generator first, then run this command again."
    )


def orm_codegen_section(output_dir: str | Path) -> dict:
    """Default orm_codegen settings written by integrate()."""
    return {
        "orm": OrmType.SQLALCHEMY_CORE.value,
        "db": DatabaseType.SQLITE.value,
        "output_dir": (Path(output_dir) / "db").as_posix(),
        "generate_migrations": True,
        "generate_entities": True,
    }


def integrate(
    project_dir: str | Path = ".",
    output_dir: str | Path = "./src",
    add_scripts: bool = True,
    force: bool = False,
) -> IntegrationResult:
    """Add ORM generation to an existing GraphQL Code Generator setup.

    Args:
        project_dir: Directory holding codegen.yml and package.json
        output_dir: Base directory for generated code; files go to <output_dir>/db
        add_scripts: Whether to add npm scripts to package.json
        force: Replace an existing orm_codegen section

    Raises:
        IntegrationError: If codegen.yml is missing or either file is malformed.
    """
    project_dir = Path(project_dir)
    codegen_path = find_codegen_config(project_dir)
    logger.info("Found GraphQL Code Generator configuration at %s", codegen_path)
    result = IntegrationResult(codegen_path=codegen_path)

    try:
        document = yaml.safe_load(codegen_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise IntegrationError(f"Failed to parse {codegen_path.name}: {e}") from e
    if not isinstance(document, dict):
        raise IntegrationError(f"{codegen_path.name} must contain a mapping")

    if YAML_SECTION in document and not force:
        logger.info("%s section already exists in %s", YAML_SECTION, codegen_path.name)
    else:
        document[YAML_SECTION] = orm_codegen_section(output_dir)
        codegen_path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
        result.section_added = True
        logger.info("Added %s section to %s", YAML_SECTION, codegen_path.name)

    if add_scripts:
        result.scripts_added = add_package_scripts(project_dir)

    return result


def add_package_scripts(project_dir: str | Path = ".") -> list[str]:
    """Add the SCRIPTS entries missing from package.json; return the names added."""
    package_path = Path(project_dir) / PACKAGE_JSON
    if not package_path.is_file():
        logger.warning("%s not found, skipping script addition", PACKAGE_JSON)
        return []

    try:
        package = json.loads(package_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise IntegrationError(f"Failed to parse {PACKAGE_JSON}: {e}") from e

    scripts = package.get("scripts")
    if not isinstance(scripts, dict):
        scripts = package["scripts"] = {}

    added = []
    for name, command in SCRIPTS.items():
        if name not in scripts:
            scripts[name] = command
            added.append(name)
            logger.info("Added '%s' script to %s", name, PACKAGE_JSON)

    if added:
        package_path.write_text(json.dumps(package, indent=2) + "\n", encoding="utf-8")
    return added
