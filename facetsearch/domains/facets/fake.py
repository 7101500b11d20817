"""Fake facet registry for testing."""

from typing import Dict, List, Optional

from facetsearch.core.exceptions import UnknownEntityIdError
from facetsearch.domains.facets.types import EntityTypeEntry, FacetConfig


class FakeFacetConfigRegistry:
    """Test implementation of FacetConfigRegistryProtocol.

    Stores configs in a list for ordered lookups. Populate via seed().

    Usage:
        fake = FakeFacetConfigRegistry()
        fake.seed(FacetConfig(key="is_oa", entity_types=("works",), display_name="OA"))

        assert fake.get("works", "is_oa").display_name == "OA"
    """

    def __init__(self) -> None:
        """Initialize with empty configs."""
        self._configs: List[FacetConfig] = []
        self._entity_types: Dict[str, EntityTypeEntry] = {}

    def get(self, entity_type: Optional[str], key: str) -> FacetConfig:
        """Get config. Raises KeyError if missing."""
        config = self.find(entity_type, key)
        if config is None:
            raise KeyError((entity_type, key))
        return config

    def find(self, entity_type: Optional[str], key: str) -> Optional[FacetConfig]:
        """Get config, or None."""
        key = key.lower()
        for config in self._configs:
            if config.key == key and (entity_type is None or entity_type in config.entity_types):
                return config
        return None

    def list_all(self) -> List[FacetConfig]:
        """List all configs in seed order."""
        return list(self._configs)

    def list_for_entity_type(self, entity_type: Optional[str]) -> List[FacetConfig]:
        """List configs for an entity type."""
        return [c for c in self._configs if entity_type in c.entity_types]

    def list_entity_types(self) -> List[EntityTypeEntry]:
        """List seeded entity types."""
        return list(self._entity_types.values())

    def entity_type_from_id(self, identifier: str) -> str:
        """Resolve by first letter of the bare id."""
        bare = identifier.strip().rsplit("/", 1)[-1]
        for entry in self._entity_types.values():
            if bare[:1].upper() == entry.id_prefix:
                return entry.name
        raise UnknownEntityIdError(identifier)

    # Test helpers

    def seed(self, *configs: FacetConfig) -> None:
        """Append configs in priority order."""
        self._configs.extend(configs)

    def seed_entity_types(self, *entries: EntityTypeEntry) -> None:
        """Register entity types."""
        for entry in entries:
            self._entity_types[entry.name] = entry

    def clear(self) -> None:
        """Remove all configs and entity types."""
        self._configs.clear()
        self._entity_types.clear()
