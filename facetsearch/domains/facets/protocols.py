"""Protocols for the facet configuration registry."""

from typing import List, Optional, Protocol

from facetsearch.domains.facets.types import EntityTypeEntry, FacetConfig


class FacetConfigRegistryProtocol(Protocol):
    """Read-only facet metadata table.

    Built once at startup. All lookups are synchronous reads, and ordering
    of list_all() is the priority order used for PID matching.
    """

    def get(self, entity_type: Optional[str], key: str) -> FacetConfig:
        """Get the config for (entity_type, key). Raises KeyError if not found."""
        ...

    def find(self, entity_type: Optional[str], key: str) -> Optional[FacetConfig]:
        """Get the config for (entity_type, key), or None."""
        ...

    def list_all(self) -> List[FacetConfig]:
        """List all facet configs in priority order."""
        ...

    def list_for_entity_type(self, entity_type: Optional[str]) -> List[FacetConfig]:
        """List facet configs that apply to an entity type."""
        ...

    def list_entity_types(self) -> List[EntityTypeEntry]:
        """List the known entity types."""
        ...

    def entity_type_from_id(self, identifier: str) -> str:
        """Resolve an entity id to its entity type. Raises UnknownEntityIdError."""
        ...
