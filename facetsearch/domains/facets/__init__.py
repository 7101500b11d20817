"""Facet configuration domain."""

from facetsearch.domains.facets.registry import FacetConfigRegistry, default_registry
from facetsearch.domains.facets.types import EntityTypeEntry, FacetConfig, FacetType

__all__ = [
    "EntityTypeEntry",
    "FacetConfig",
    "FacetConfigRegistry",
    "FacetType",
    "default_registry",
]
