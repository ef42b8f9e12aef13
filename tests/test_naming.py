"""Tests for identifier conversions."""

import pytest

from gql_ormgen.core.naming import (
    constant_case,
    pascal_case,
    quote,
    safe_comment,
    safe_docstring,
    safe_identifier,
    table_name,
    to_snake_case,
)
from gql_ormgen.core.options import TableNamingConvention


def naive_snake_case(name: str) -> str:
    """Underscore before every uppercase letter; breaks acronyms apart."""
    return "".join(f"_{c.lower()}" if c.isupper() and i else c.lower() for i, c in enumerate(name))


SNAKE_CASES = [
    ("User", "user"),
    ("BlogPost", "blog_post"),
    ("createdAt", "created_at"),
    ("userId", "user_id"),
    ("XMLHttpRequest", "xml_http_request"),
    ("APIKey", "api_key"),
    ("getHTTPResponseCode", "get_http_response_code"),
    ("ID", "id"),
    ("ABC", "abc"),
    ("already_snake", "already_snake"),
    ("x", "x"),
    ("", ""),
]


class TestToSnakeCase:
    """Tests for to_snake_case."""

    @pytest.mark.parametrize("name,expected", SNAKE_CASES)
    def test_cases(self, name, expected):
        assert to_snake_case(name) == expected

    @pytest.mark.parametrize("name", [name for name, _ in SNAKE_CASES])
    def test_idempotent(self, name):
        once = to_snake_case(name)
        assert to_snake_case(once) == once

    def test_acronyms_not_split_per_letter(self):
        assert naive_snake_case("XMLHttpRequest") == "x_m_l_http_request"
        assert to_snake_case("XMLHttpRequest") != naive_snake_case("XMLHttpRequest")
        assert to_snake_case("APIKey") != naive_snake_case("APIKey")


class TestCaseHelpers:
    """Tests for pascal_case, constant_case and table_name."""

    def test_pascal_case(self):
        assert pascal_case("user_id") == "UserId"
        assert pascal_case("createdAt") == "CreatedAt"

    def test_constant_case(self):
        assert constant_case("createdAt") == "CREATED_AT"
        assert constant_case("id") == "ID"

    def test_table_name_snake(self):
        assert table_name("BlogPost", TableNamingConvention.SNAKE_CASE) == "blog_post"

    def test_table_name_pascal(self):
        assert table_name("BlogPost", TableNamingConvention.PASCAL_CASE) == "BlogPost"


class TestSafeText:
    """Tests for the escaping helpers used by the templates."""

    def test_keyword_suffixed(self):
        assert safe_identifier("class") == "class_"
        assert safe_identifier("from") == "from_"

    def test_soft_keywords_and_names_unchanged(self):
        assert safe_identifier("type") == "type"
        assert safe_identifier("name") == "name"

    def test_docstring_quotes(self):
        assert safe_docstring('Say "hi"') == 'Say "hi" '
        assert '"""' not in safe_docstring('a """ b')

    def test_docstring_backslash(self):
        assert safe_docstring("C:\\path") == "C:\\\\path"

    def test_docstring_empty(self):
        assert safe_docstring(None) == ""

    def test_comment_single_line(self):
        assert safe_comment("first\nsecond   third") == "first second third"

    def test_comment_truncated(self):
        text = safe_comment("x" * 200)
        assert len(text) == 120
        assert text.endswith("...")

    def test_quote(self):
        assert quote("user") == '"user"'
        assert quote('a"b') == '"a\\"b"'
