"""Tests for the raw introspection models and local schema loading."""

import json

import pytest

from gql_ormgen.core.introspection import (
    RawSchema,
    RawTypeKind,
    RawTypeRef,
    load_raw_schema,
)


def type_ref(kind, name=None, of_type=None):
    return {"kind": kind, "name": name, "ofType": of_type}


SCHEMA_OBJECT = {
    "queryType": {"name": "Query"},
    "mutationType": None,
    "subscriptionType": None,
    "types": [
        {
            "kind": "OBJECT",
            "name": "Query",
            "fields": [
                {
                    "name": "users",
                    "args": [],
                    "type": type_ref("NON_NULL", of_type=type_ref(
                        "LIST", of_type=type_ref("NON_NULL", of_type=type_ref("OBJECT", "User"))
                    )),
                    "isDeprecated": False,
                    "deprecationReason": None,
                }
            ],
            "interfaces": [],
        },
        {
            "kind": "OBJECT",
            "name": "User",
            "description": "A user",
            "fields": [
                {"name": "id", "args": [], "type": type_ref("NON_NULL", of_type=type_ref("SCALAR", "ID"))},
                {"name": "name", "args": [], "type": type_ref("SCALAR", "String")},
            ],
            "interfaces": [],
        },
        {"kind": "SCALAR", "name": "ID"},
        {"kind": "SCALAR", "name": "String"},
    ],
    "directives": [],
}


# =============================================================================
# Payload envelopes
# =============================================================================


class TestFromIntrospection:
    """Tests for RawSchema.from_introspection."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"data": {"__schema": SCHEMA_OBJECT}},
            {"__schema": SCHEMA_OBJECT},
            SCHEMA_OBJECT,
        ],
        ids=["response", "data", "bare"],
    )
    def test_accepts_every_envelope(self, payload):
        raw = RawSchema.from_introspection(payload)
        assert [t.name for t in raw.types] == ["Query", "User", "ID", "String"]

    def test_camel_case_keys(self):
        raw = RawSchema.from_introspection(SCHEMA_OBJECT)
        assert raw.query_type.name == "Query"
        assert raw.mutation_type is None

    def test_nested_type_refs(self):
        raw = RawSchema.from_introspection(SCHEMA_OBJECT)
        users = raw.types[0].fields[0]
        assert users.type_ref.kind is RawTypeKind.NON_NULL
        assert users.type_ref.of_type.kind is RawTypeKind.LIST
        assert users.type_ref.of_type.of_type.of_type.name == "User"

    def test_root_type_names(self):
        raw = RawSchema.from_introspection(SCHEMA_OBJECT)
        assert raw.root_type_names == {"Query"}

    def test_unknown_keys_ignored(self):
        payload = {**SCHEMA_OBJECT, "description": "extra", "types": []}
        raw = RawSchema.from_introspection(payload)
        assert raw.types == []

    def test_from_json(self):
        raw = RawSchema.from_json(json.dumps({"data": {"__schema": SCHEMA_OBJECT}}))
        assert raw.types[1].description == "A user"


class TestRawTypeRef:
    """Tests for building type references directly."""

    def test_populate_by_field_name(self):
        ref = RawTypeRef(kind=RawTypeKind.LIST, of_type=RawTypeRef(kind=RawTypeKind.SCALAR, name="Int"))
        assert ref.of_type.name == "Int"

    def test_validate_by_alias(self):
        ref = RawTypeRef.model_validate(type_ref("NON_NULL", of_type=type_ref("SCALAR", "ID")))
        assert ref.of_type.kind is RawTypeKind.SCALAR


# =============================================================================
# SDL and files
# =============================================================================


class TestFromSdl:
    """Tests for building the introspection shape from SDL."""

    def test_builds_types(self, blog_sdl):
        raw = RawSchema.from_sdl(blog_sdl)
        names = {t.name for t in raw.types}
        assert {"User", "Post", "Category", "Role", "Node", "SearchResult", "DateTime"} <= names

    def test_includes_meta_types(self, blog_sdl):
        raw = RawSchema.from_sdl(blog_sdl)
        assert "__Schema" in {t.name for t in raw.types}

    def test_root_type(self, blog_sdl):
        raw = RawSchema.from_sdl(blog_sdl)
        assert raw.root_type_names == {"Query"}

    def test_descriptions_kept(self, blog_sdl):
        raw = RawSchema.from_sdl(blog_sdl)
        user = next(t for t in raw.types if t.name == "User")
        assert user.description == "A registered user"


class TestLoadRawSchema:
    """Tests for load_raw_schema."""

    def test_json_file(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"data": {"__schema": SCHEMA_OBJECT}}))
        raw = load_raw_schema(path)
        assert raw.root_type_names == {"Query"}

    @pytest.mark.parametrize("suffix", [".graphql", ".graphqls", ".gql"])
    def test_sdl_files(self, tmp_path, suffix, blog_sdl):
        path = tmp_path / f"schema{suffix}"
        path.write_text(blog_sdl)
        raw = load_raw_schema(path)
        assert any(t.name == "Post" for t in raw.types)

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "introspection.json"
        path.write_text(json.dumps({"__schema": SCHEMA_OBJECT}))
        raw = RawSchema.from_json_file(path)
        assert len(raw.types) == 4

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "schema.txt"
        path.write_text("")
        with pytest.raises(ValueError, match="Unsupported schema file"):
            load_raw_schema(path)
