"""Generation hooks for customizing code generation.

Provides protocols for pre- and post-generation hooks that can replace the
IR before generation or transform each generated artifact afterwards.

Example usage:
    from gql_ormgen.core.hooks import HookRunner, FilterTypesHook, AddHeaderHook

    hooks = HookRunner()
    hooks.add_pre_hook(FilterTypesHook(exclude_suffix="Connection"))
    hooks.add_post_hook(AddHeaderHook("Auto-generated - do not edit"))
    CodeGenerator(config, hooks=hooks).generate(ir)
"""

import logging
from dataclasses import replace
from typing import Iterable, Protocol, runtime_checkable

from .ir import IRSchema

logger = logging.getLogger(__name__)

# Comment prefix per artifact suffix, used by AddHeaderHook
COMMENT_PREFIXES = {
    ".py": "# ",
    ".sql": "-- ",
}


@runtime_checkable
class PreGenerateHook(Protocol):
    """Protocol for pre-generation hooks.

    Pre-generation hooks receive the IR before code generation and return
    the IR to generate from. They should build a new IRSchema rather than
    mutate the one they receive, since the caller may share it.
    """

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        """Called before code generation.

        Args:
            ir: The intermediate representation of the schema

        Returns:
            The IR to use for generation
        """
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Protocol for post-generation hooks.

    Post-generation hooks receive every generated artifact (schema file,
    entity files, migration up/down SQL) and can transform it.
    """

    def post_generate(self, filename: str, content: str) -> str:
        """Called after code generation for each artifact.

        Args:
            filename: Relative artifact name (e.g., "entities/user.py",
                "migrations/create_user_table/up.sql")
            content: The generated text

        Returns:
            The (possibly transformed) text
        """
        ...


class AddHeaderHook:
    """Built-in hook to add a comment header to generated artifacts.

    The header is commented with "#" for Python files and "--" for SQL
    files; other files get it verbatim.

    Example:
        hook = AddHeaderHook("Auto-generated - do not edit")
    """

    def __init__(self, header: str):
        self.header = header.rstrip("\n")

    def post_generate(self, filename: str, content: str) -> str:
        """Add the header to the beginning of the artifact."""
        prefix = next(
            (p for suffix, p in COMMENT_PREFIXES.items() if filename.endswith(suffix)),
            "",
        )
        lines = []
        for line in self.header.splitlines():
            if prefix and not line.startswith(prefix.strip()):
                line = prefix + line
            lines.append(line)
        return "\n".join(lines) + "\n\n" + content


class FilterTypesHook:
    """Built-in hook that keeps object types and enums out of generation by name.

    Exclude filters win. When include filters are set, a name must match all
    of them.

    Example:
        # Keep Relay plumbing out of the database
        hook = FilterTypesHook(exclude_suffix="Connection")
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
    ):
        self.exclude = (exclude_prefix, exclude_suffix)
        self.include = (include_prefix, include_suffix)

    @staticmethod
    def _matches(name: str, prefix: str | None, suffix: str | None) -> tuple[bool, bool]:
        return (
            bool(prefix) and name.startswith(prefix),
            bool(suffix) and name.endswith(suffix),
        )

    def keeps(self, name: str) -> bool:
        """True when a type or enum named name survives the filters."""
        if any(self._matches(name, *self.exclude)):
            return False
        prefix, suffix = self.include
        starts, ends = self._matches(name, prefix, suffix)
        return (not prefix or starts) and (not suffix or ends)

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        """Return a new IR holding only the kept types and enums."""
        kept = replace(
            ir,
            objects={name: t for name, t in ir.objects.items() if self.keeps(name)},
            enums={name: e for name, e in ir.enums.items() if self.keeps(name)},
        )
        logger.debug(
            "FilterTypesHook kept %d of %d types",
            len(kept.objects), len(ir.objects),
        )
        return kept


class HookRunner:
    """Threads the IR through pre hooks and each artifact through post hooks.

    Hooks run in the order they were added.
    """

    def __init__(
        self,
        pre_hooks: Iterable[PreGenerateHook] = (),
        post_hooks: Iterable[PostGenerateHook] = (),
    ):
        self.pre_hooks: list[PreGenerateHook] = list(pre_hooks)
        self.post_hooks: list[PostGenerateHook] = list(post_hooks)

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, ir: IRSchema) -> IRSchema:
        for hook in self.pre_hooks:
            logger.debug("Running pre-generate hook %s", type(hook).__name__)
            ir = hook.pre_generate(ir)
        return ir

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
