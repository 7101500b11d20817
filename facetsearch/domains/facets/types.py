"""Facet configuration types."""

from enum import Enum
from re import Pattern
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FacetType(str, Enum):
    """How a facet is filtered and displayed."""

    SELECT = "select"
    RANGE = "range"
    BOOLEAN = "boolean"
    SEARCH = "search"


class EntityTypeEntry(BaseModel):
    """A searchable collection and the one-letter prefix of its ids."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    id_prefix: str = Field(..., min_length=1, max_length=1)

    @field_validator("id_prefix")
    @classmethod
    def _upper_prefix(cls, v: str) -> str:
        return v.upper()


class FacetConfig(BaseModel):
    """Static metadata for one facet.

    A facet may apply to several entity types. When it carries a PID regex the
    regex must have exactly one capture group: the value used for the filter.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    entity_types: Tuple[str, ...]
    display_name: str
    facet_type: FacetType = FacetType.SELECT
    is_entity: bool = False
    regex: Optional[Pattern[str]] = None
    pid_prefix: Optional[str] = None
    sort_by_value: bool = False

    @field_validator("key")
    @classmethod
    def _lower_key(cls, v: str) -> str:
        return v.lower()

    @property
    def entity_type(self) -> str:
        """Primary entity type, used when a filter is built from a PID."""
        return self.entity_types[0]

    @property
    def is_search(self) -> bool:
        """Whether this facet is a free-text search facet."""
        return self.key.endswith(".search")
