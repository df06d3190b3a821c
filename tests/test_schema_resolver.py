from concurrent.futures import ThreadPoolExecutor

import pytest

from html_attribute_schema.models.constraints import Boolean, Enum, FreeString, Number
from html_attribute_schema.models.schema_loader import build_schema_table
from html_attribute_schema.resolvers.schema_resolver import SchemaResolver

SYNTHETIC_TABLE = {
    "html_attribute_schema_format": "0.1.0",
    "global_attributes": [
        {"name": "id", "type": "string"},
        {"name": "title", "type": "string"},
    ],
    "families": {
        "base": {
            "attributes": [
                {"name": "href", "type": "string"},
                {"name": "title", "type": "number"},
            ],
        },
        "child": {
            "extends": "base",
            "attributes": [
                {"name": "href", "type": "enum", "values": ["x"]},
                {"name": "target", "type": "string"},
            ],
        },
    },
    "elements": {
        "leaf": {"family": "child", "attributes": [{"name": "TITLE", "type": "boolean"}]},
        "middle": {"family": "base"},
        "plain": None,
    },
}


@pytest.fixture
def resolver():
    return SchemaResolver(build_schema_table(SYNTHETIC_TABLE))


def test_own_attributes_override_family_and_globals(resolver):
    resolved = resolver.resolve("leaf")
    assert resolved.known
    assert isinstance(resolved.lookup("title").constraint, Boolean)
    assert isinstance(resolved.lookup("id").constraint, FreeString)


def test_nearer_family_overrides_ancestor(resolver):
    resolved = resolver.resolve("leaf")
    assert resolved.lookup("href").constraint == Enum(frozenset({"x"}))
    assert resolved.lookup("target") is not None


def test_family_overrides_globals(resolver):
    resolved = resolver.resolve("middle")
    assert isinstance(resolved.lookup("title").constraint, Number)
    assert resolved.lookup("target") is None


def test_family_chain_is_furthest_ancestor_first(resolver):
    assert [f.name for f in resolver.family_chain("child")] == ["base", "child"]
    assert resolver.family_chain(None) == []


def test_element_without_family_gets_globals(resolver):
    resolved = resolver.resolve("plain")
    assert resolved.known
    assert set(resolved.attributes) == {"id", "title"}


def test_unknown_tag_resolves_to_globals_only(resolver):
    resolved = resolver.resolve("foo-bar")
    assert not resolved.known
    assert resolved.element is None
    assert set(resolved.attributes) == {"id", "title"}


def test_unknown_tags_are_not_memoized(resolver):
    first = resolver.resolve("x-el-1")
    second = resolver.resolve("X-EL-2")
    assert second.tag == "x-el-2"
    assert first.attributes is second.attributes
    resolver.resolve("leaf")
    assert set(resolver._cache) == {"leaf"}


def test_names_and_tags_compare_case_insensitively(resolver):
    resolved = resolver.resolve("LEAF")
    assert resolved.tag == "leaf"
    assert resolved.lookup("HREF") is resolved.lookup("href")


def test_resolution_is_memoized_per_tag(resolver):
    assert resolver.resolve("Leaf") is resolver.resolve("leaf")
    resolver.clear_cache()
    assert resolver.resolve("leaf").lookup("href") is not None


def test_resolved_attributes_are_read_only(resolver):
    resolved = resolver.resolve("leaf")
    with pytest.raises(TypeError):
        resolved.attributes["id"] = None


def test_concurrent_resolution_observes_one_result(resolver):
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(resolver.resolve, ["leaf"] * 64))
    assert all(r is results[0] for r in results)


def test_packaged_area_extends_anchor(table):
    resolver = SchemaResolver(table)
    area = resolver.resolve("area")
    anchor = resolver.resolve("a")
    assert area.lookup("href") is anchor.lookup("href")
    assert area.lookup("rel") is anchor.lookup("rel")
    assert area.lookup("type").deprecated
    assert not anchor.lookup("type").deprecated
    assert area.lookup("shape") is not None
    assert anchor.lookup("shape") is None
