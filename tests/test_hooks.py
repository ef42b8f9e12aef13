"""Tests for generation hooks."""

import pytest

from gql_ormgen.core.hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from gql_ormgen.core.ir import IREnum, IRObjectType, IRSchema


@pytest.fixture
def sample_ir():
    """Create a sample IR schema for testing."""
    return IRSchema(
        enums={
            "Status": IREnum(name="Status"),
            "_Internal": IREnum(name="_Internal"),
        },
        objects={
            "User": IRObjectType(name="User"),
            "_Meta": IRObjectType(name="_Meta"),
            "Product": IRObjectType(name="Product"),
            "UserConnection": IRObjectType(name="UserConnection"),
        },
    )


class TestAddHeaderHook:
    """Tests for AddHeaderHook."""

    def test_adds_python_comment(self):
        hook = AddHeaderHook("Auto-generated")
        result = hook.post_generate("entities/user.py", "class User:\n    pass")
        assert result.startswith("# Auto-generated\n\n")

    def test_adds_sql_comment(self):
        hook = AddHeaderHook("Auto-generated")
        result = hook.post_generate("migrations/create_user_table/up.sql", "CREATE TABLE user ();")
        assert result == "-- Auto-generated\n\nCREATE TABLE user ();"

    def test_already_commented_header(self):
        hook = AddHeaderHook("# Header")
        result = hook.post_generate("schema.py", "code")
        assert result == "# Header\n\ncode"

    def test_multi_line_header(self):
        hook = AddHeaderHook("Line 1\nLine 2")
        result = hook.post_generate("up.sql", "SELECT 1;")
        assert result.startswith("-- Line 1\n-- Line 2\n\n")

    def test_other_files_verbatim(self):
        hook = AddHeaderHook("Header")
        assert hook.post_generate("README", "text") == "Header\n\ntext"

    def test_handles_header_with_newline(self):
        hook = AddHeaderHook("# Header\n")
        result = hook.post_generate("test.py", "code")
        # Should not double-up newlines
        assert result == "# Header\n\ncode"


class TestFilterTypesHook:
    """Tests for FilterTypesHook."""

    def test_exclude_prefix(self, sample_ir):
        hook = FilterTypesHook(exclude_prefix="_")
        result = hook.pre_generate(sample_ir)

        assert "User" in result.objects
        assert "Product" in result.objects
        assert "_Meta" not in result.objects

    def test_exclude_suffix(self, sample_ir):
        hook = FilterTypesHook(exclude_suffix="Connection")
        result = hook.pre_generate(sample_ir)
        assert list(result.objects) == ["User", "_Meta", "Product"]

    def test_include_prefix(self, sample_ir):
        hook = FilterTypesHook(include_prefix="User")
        result = hook.pre_generate(sample_ir)
        assert list(result.objects) == ["User", "UserConnection"]
        assert result.enums == {}

    def test_include_suffix(self, sample_ir):
        hook = FilterTypesHook(include_suffix="Connection")
        result = hook.pre_generate(sample_ir)
        assert list(result.objects) == ["UserConnection"]

    def test_filters_enums(self, sample_ir):
        hook = FilterTypesHook(exclude_prefix="_")
        result = hook.pre_generate(sample_ir)
        assert list(result.enums) == ["Status"]

    def test_returns_new_ir(self, sample_ir):
        result = FilterTypesHook(exclude_prefix="_").pre_generate(sample_ir)
        assert result is not sample_ir
        assert "_Meta" in sample_ir.objects

    def test_exclude_wins_over_include(self):
        hook = FilterTypesHook(include_prefix="User", exclude_suffix="Connection")
        assert hook.keeps("User")
        assert not hook.keeps("UserConnection")
        assert not hook.keeps("Product")

    def test_no_filters_keep_everything(self, sample_ir):
        result = FilterTypesHook().pre_generate(sample_ir)
        assert list(result.objects) == list(sample_ir.objects)


class TestHookRunner:
    """Tests for HookRunner."""

    def test_run_pre_hooks(self, sample_ir):
        runner = HookRunner()
        runner.add_pre_hook(FilterTypesHook(exclude_prefix="_"))

        result = runner.run_pre_hooks(sample_ir)
        assert "_Meta" not in result.objects

    def test_run_post_hooks(self):
        runner = HookRunner()
        runner.add_post_hook(AddHeaderHook("# Header"))

        result = runner.run_post_hooks("test.py", "code")
        assert result.startswith("# Header")

    def test_hooks_from_constructor(self, sample_ir):
        runner = HookRunner(
            pre_hooks=[FilterTypesHook(exclude_prefix="_")],
            post_hooks=[AddHeaderHook("# Header")],
        )
        assert "_Meta" not in runner.run_pre_hooks(sample_ir).objects
        assert runner.run_post_hooks("a.py", "code") == "# Header\n\ncode"

    def test_no_hooks_is_identity(self, sample_ir):
        runner = HookRunner()
        assert runner.run_pre_hooks(sample_ir) is sample_ir
        assert runner.run_post_hooks("a.py", "code") == "code"

    def test_multiple_pre_hooks_in_order(self, sample_ir):
        runner = HookRunner()
        runner.add_pre_hook(FilterTypesHook(exclude_prefix="_"))
        seen = []

        class RecordHook:
            def pre_generate(self, ir):
                seen.append(list(ir.objects))
                return ir

        runner.add_pre_hook(RecordHook())
        runner.run_pre_hooks(sample_ir)
        assert seen == [["User", "Product", "UserConnection"]]

    def test_multiple_post_hooks(self):
        runner = HookRunner()
        runner.add_post_hook(AddHeaderHook("# Line 1"))
        runner.add_post_hook(AddHeaderHook("# Line 0"))

        result = runner.run_post_hooks("test.py", "code")
        # Second hook wraps the first
        assert result == "# Line 0\n\n# Line 1\n\ncode"


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_add_header_is_post_hook(self):
        assert isinstance(AddHeaderHook("header"), PostGenerateHook)

    def test_filter_types_is_pre_hook(self):
        assert isinstance(FilterTypesHook(), PreGenerateHook)

    def test_custom_pre_hook(self):
        class CustomPreHook:
            def pre_generate(self, ir):
                return ir

        assert isinstance(CustomPreHook(), PreGenerateHook)

    def test_custom_post_hook(self):
        class CustomPostHook:
            def post_generate(self, filename, content):
                return content

        assert isinstance(CustomPostHook(), PostGenerateHook)
