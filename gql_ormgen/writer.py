"""Writes a GenerationResult to disk.

Layout under the output directory:
    <schema_file>                      schema.py or entities/__init__.py
    entities/<name>                    entity modules
    migrations/<name>/up.sql
    migrations/<name>/down.sql

The output directory and entities/ are made packages so the relative
imports in generated modules resolve.
"""

import logging
from pathlib import Path

from .core.generator import GenerationResult

logger = logging.getLogger(__name__)

PACKAGE_INIT = '"""Generated by gql-ormgen."""\n'


def write_artifacts(result: GenerationResult, output_dir: str | Path) -> list[Path]:
    """Write every artifact and return the paths written, in write order."""
    output_dir = Path(output_dir)
    files = result.files()

    packages = [output_dir]
    if result.entities or (result.schema_file or "").startswith("entities/"):
        packages.append(output_dir / "entities")
    for package in packages:
        init = package / "__init__.py"
        relative = init.relative_to(output_dir).as_posix()
        if relative not in files and not init.exists():
            files[relative] = PACKAGE_INIT

    written = []
    for relative, content in files.items():
        path = output_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)
        written.append(path)

    logger.info("Wrote %d files to %s", len(written), output_dir)
    return written
