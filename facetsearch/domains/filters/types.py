"""Filter record types."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from facetsearch.domains.facets.types import FacetConfig

FilterValue = Union[str, int, float, bool, None]

NULL_TOKEN = "null"
NEGATION_PREFIX = "!"


class Filter(BaseModel):
    """One facet key bound to a value, possibly negated.

    Built through facetsearch.domains.filters.model; `as_str` is the identity
    used for deduplication and removal. Facet metadata is held in `config`
    and is None for keys the registry does not know.
    """

    model_config = ConfigDict(frozen=True)

    entity_type: Optional[str] = None
    key: str
    value: FilterValue = Field(description="API-bound value, None for the null sentinel")
    display_value: FilterValue = Field(description="Human-facing value")
    is_negated: bool = False
    as_str: str
    kv: str

    count: Optional[int] = None
    count_percent: Optional[float] = None

    config: Optional[FacetConfig] = None

    @property
    def is_null_value(self) -> bool:
        """Whether the value is the null sentinel (unknown / null)."""
        return self.value is None

    @property
    def encoded_value(self) -> str:
        """Value as it appears in encoded filter strings (without negation)."""
        return self.kv.split(":", 1)[1]

    @property
    def display_name(self) -> Optional[str]:
        """Facet display name, None for degraded filters."""
        return self.config.display_name if self.config else None

    @property
    def is_entity(self) -> bool:
        """Whether the facet value identifies an entity."""
        return bool(self.config and self.config.is_entity)

    @property
    def pid_url(self) -> Optional[str]:
        """Resolvable URL of a persistent identifier value, None for other facets."""
        if self.config is None or not self.config.pid_prefix or self.value is None:
            return None
        return f"{self.config.pid_prefix}{self.value}"

    @property
    def is_degraded(self) -> bool:
        """Whether the registry had no metadata for this filter."""
        return self.config is None

    def __str__(self) -> str:
        return self.as_str
