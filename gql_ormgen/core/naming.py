"""Identifier conversions shared by every backend."""

import json
import keyword
import re

from .options import TableNamingConvention


def to_snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case.

    An underscore goes before an uppercase character that follows a
    lowercase one, or that ends an acronym run (uppercase before, lowercase
    after), so "XMLHttpRequest" becomes "xml_http_request" and "APIKey"
    becomes "api_key".
    """
    result = []
    for i, ch in enumerate(name):
        if ch.isupper():
            if i > 0:
                prev = name[i - 1]
                if prev.islower():
                    result.append("_")
                elif prev.isupper() and i + 1 < len(name) and name[i + 1].islower():
                    result.append("_")
            result.append(ch.lower())
        else:
            result.append(ch)
    return "".join(result)


def pascal_case(name: str) -> str:
    """Convert snake_case or camelCase to PascalCase."""
    return "".join(word.capitalize() for word in to_snake_case(name).split("_"))


def constant_case(name: str) -> str:
    """Convert to UPPER_CASE."""
    return to_snake_case(name).upper()


def table_name(type_name: str, convention: TableNamingConvention) -> str:
    """Table name for a GraphQL type under the configured convention."""
    if convention is TableNamingConvention.PASCAL_CASE:
        return type_name
    return to_snake_case(type_name)


def safe_identifier(name: str) -> str:
    """Make a name usable as a Python identifier by suffixing keywords with underscore."""
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def quote(text: str) -> str:
    """Double-quoted Python string literal for text."""
    return json.dumps(text)


def safe_docstring(text: str | None) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def safe_comment(text: str | None) -> str:
    """Make text safe for a single-line comment.

    Removes newlines, collapses whitespace and truncates long descriptions.
    """
    if not text:
        return ""
    text = text.replace("\n", " ").replace("\r", "")
    text = re.sub(r"\s+", " ", text)
    if len(text) > 120:
        text = text[:117] + "..."
    return text.strip()
