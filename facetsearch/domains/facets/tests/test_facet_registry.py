"""Unit tests for FacetConfigRegistry.

Covers the bundled facets.yml, lookups, entity id resolution and the
build-time validation of custom YAML files.
"""

from dataclasses import dataclass
from pathlib import Path
from unittest.mock import patch

import pytest

from facetsearch.core.exceptions import FacetRegistryError, UnknownEntityIdError
from facetsearch.domains.facets.registry import FacetConfigRegistry
from facetsearch.domains.facets.types import EntityTypeEntry, FacetConfig, FacetType

_PATCH_LOGGER = "facetsearch.domains.facets.registry.registry_logger"


def _write_yaml(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "facets.yml"
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Bundled configuration
# ---------------------------------------------------------------------------


class TestBundledRegistry:
    def test_builds_entity_types(self, registry):
        names = [e.name for e in registry.list_entity_types()]
        assert names == ["works", "authors", "venues", "institutions", "concepts"]

    def test_get_known_facet(self, registry):
        config = registry.get("works", "publication_year")
        assert config.display_name == "Year"
        assert config.facet_type == FacetType.RANGE

    def test_lookup_is_case_insensitive(self, registry):
        assert registry.find("works", "IS_OA") is registry.find("works", "is_oa")

    def test_find_unknown_returns_none(self, registry):
        assert registry.find("works", "no_such_facet") is None
        assert registry.find("authors", "publication_year") is None

    def test_get_unknown_raises_key_error(self, registry):
        with pytest.raises(KeyError):
            registry.get("works", "no_such_facet")

    def test_find_without_entity_type_returns_first_by_key(self, registry):
        config = registry.find(None, "display_name.search")
        assert config is not None
        assert config.is_search

    def test_list_for_entity_type(self, registry):
        keys = [c.key for c in registry.list_for_entity_type("concepts")]
        assert "level" in keys
        assert "publication_year" not in keys

    def test_pid_patterns_have_one_group(self, registry):
        for config in registry.list_all():
            if config.regex is not None:
                assert config.regex.groups == 1


# ---------------------------------------------------------------------------
# entity_type_from_id (table-driven)
# ---------------------------------------------------------------------------


@dataclass
class EntityIdCase:
    desc: str
    identifier: str
    expected: str


ENTITY_ID_CASES = [
    EntityIdCase("bare work id", "W2741809807", "works"),
    EntityIdCase("author url", "https://openalex.org/A5023888391", "authors"),
    EntityIdCase("lowercase institution", "i136199984", "institutions"),
    EntityIdCase("venue with whitespace", "  V1983995261 ", "venues"),
    EntityIdCase("concept", "C41008148", "concepts"),
]


@pytest.mark.parametrize("case", ENTITY_ID_CASES, ids=lambda c: c.desc)
def test_entity_type_from_id(registry, case: EntityIdCase):
    assert registry.entity_type_from_id(case.identifier) == case.expected


@pytest.mark.parametrize("identifier", ["X123", "", "https://openalex.org/", "   "])
def test_entity_type_from_id_unknown(registry, identifier):
    with pytest.raises(UnknownEntityIdError):
        registry.entity_type_from_id(identifier)


# ---------------------------------------------------------------------------
# Building from custom files
# ---------------------------------------------------------------------------


class TestBuild:
    def test_register_duplicate_key_raises(self):
        registry = FacetConfigRegistry()
        config = FacetConfig(key="is_oa", entity_types=("works",), display_name="OA")
        registry.register(config)

        with pytest.raises(FacetRegistryError, match="Duplicate"):
            registry.register(config)

    def test_same_key_for_different_entity_types_is_allowed(self):
        registry = FacetConfigRegistry()
        registry.register(
            FacetConfig(key="type", entity_types=("works",), display_name="Work type"),
            FacetConfig(key="type", entity_types=("institutions",), display_name="Kind"),
        )

        assert registry.get("institutions", "type").display_name == "Kind"

    def test_duplicate_entity_prefix_raises(self):
        registry = FacetConfigRegistry()
        registry.register_entity_types(
            EntityTypeEntry(name="works", display_name="Works", id_prefix="W")
        )

        with pytest.raises(FacetRegistryError, match="share id prefix"):
            registry.register_entity_types(
                EntityTypeEntry(name="widgets", display_name="Widgets", id_prefix="w")
            )

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FacetRegistryError, match="Failed to load"):
            FacetConfigRegistry().build(tmp_path / "missing.yml")

    def test_non_mapping_root_raises(self, tmp_path):
        path = _write_yaml(tmp_path, "- just\n- a list\n")
        with pytest.raises(FacetRegistryError, match="mapping"):
            FacetConfigRegistry().build(path)

    def test_invalid_entry_raises(self, tmp_path):
        path = _write_yaml(tmp_path, "facets:\n  - key: is_oa\n")
        with pytest.raises(FacetRegistryError, match="Invalid facet config"):
            FacetConfigRegistry().build(path)

    def test_regex_with_two_groups_raises(self, tmp_path):
        path = _write_yaml(
            tmp_path,
            "facets:\n"
            "  - key: doi\n"
            "    entity_types: [works]\n"
            "    display_name: DOI\n"
            "    regex: '^(10)\\.(\\d+)$'\n",
        )
        with pytest.raises(FacetRegistryError, match="exactly one capture group"):
            FacetConfigRegistry().build(path)

    def test_identical_patterns_are_flagged(self, tmp_path):
        path = _write_yaml(
            tmp_path,
            "facets:\n"
            "  - key: first\n"
            "    entity_types: [works]\n"
            "    display_name: First\n"
            "    regex: '^(\\d+)$'\n"
            "  - key: second\n"
            "    entity_types: [works]\n"
            "    display_name: Second\n"
            "    regex: '^(\\d+)$'\n",
        )
        with patch(_PATCH_LOGGER) as mock_logger:
            FacetConfigRegistry().build(path)

        mock_logger.warning.assert_called_once()
        assert "'first' always wins" in mock_logger.warning.call_args[0][0]

    def test_declaration_order_is_kept(self, tmp_path):
        path = _write_yaml(
            tmp_path,
            "facets:\n"
            "  - {key: b, entity_types: [works], display_name: B}\n"
            "  - {key: a, entity_types: [works], display_name: A}\n",
        )
        registry = FacetConfigRegistry()
        registry.build(path)

        assert [c.key for c in registry.list_all()] == ["b", "a"]
