"""Facet config registry: in-memory table built once from facets.yml."""

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from facetsearch.core.config import settings
from facetsearch.core.exceptions import FacetRegistryError, UnknownEntityIdError
from facetsearch.core.logging import logger
from facetsearch.domains.facets.protocols import FacetConfigRegistryProtocol
from facetsearch.domains.facets.types import EntityTypeEntry, FacetConfig

registry_logger = logger.with_prefix("FacetRegistry: ").with_context(component="facet_registry")

DEFAULT_CONFIG_PATH = Path(__file__).with_name("facets.yml")


class FacetConfigRegistry(FacetConfigRegistryProtocol):
    """In-memory facet registry.

    Entries keep the order in which they are declared. That order is the
    explicit priority used when several PID patterns match the same input.
    """

    def __init__(self, url_prefix: Optional[str] = None) -> None:
        """Initialize an empty registry.

        Args:
            url_prefix: Canonical entity URL prefix stripped from ids.
                Defaults to settings.ENTITY_URL_PREFIX.
        """
        self._url_prefix = url_prefix if url_prefix is not None else settings.ENTITY_URL_PREFIX
        self._configs: List[FacetConfig] = []
        self._index: Dict[Tuple[str, str], FacetConfig] = {}
        self._entity_types: Dict[str, EntityTypeEntry] = {}

    def get(self, entity_type: Optional[str], key: str) -> FacetConfig:
        """Get a facet config.

        Args:
            entity_type: Entity type, or None to match the first config with `key`.
            key: Facet key (case-insensitive).

        Returns:
            The facet config.

        Raises:
            KeyError: If no config matches.
        """
        config = self.find(entity_type, key)
        if config is None:
            raise KeyError((entity_type, key))
        return config

    def find(self, entity_type: Optional[str], key: str) -> Optional[FacetConfig]:
        """Get a facet config, or None when (entity_type, key) is unknown."""
        key = key.lower()
        if entity_type is not None:
            return self._index.get((entity_type, key))
        return next((c for c in self._configs if c.key == key), None)

    def list_all(self) -> List[FacetConfig]:
        """List all configs in declaration order."""
        return list(self._configs)

    def list_for_entity_type(self, entity_type: Optional[str]) -> List[FacetConfig]:
        """List configs that apply to `entity_type`, in declaration order."""
        return [c for c in self._configs if entity_type in c.entity_types]

    def list_entity_types(self) -> List[EntityTypeEntry]:
        """List the known entity types."""
        return list(self._entity_types.values())

    def entity_type_from_id(self, identifier: str) -> str:
        """Resolve an entity id such as ``W2741809807`` to its entity type.

        Accepts bare ids and ids carrying the canonical URL prefix.

        Raises:
            UnknownEntityIdError: If the id prefix is not registered.
        """
        bare = identifier.strip()
        if bare.startswith(self._url_prefix):
            bare = bare[len(self._url_prefix) :]
        if not bare:
            raise UnknownEntityIdError(identifier)
        letter = bare[0].upper()
        for entry in self._entity_types.values():
            if entry.id_prefix == letter:
                return entry.name
        raise UnknownEntityIdError(identifier)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def register(self, *configs: FacetConfig) -> None:
        """Append configs to the table.

        Raises:
            FacetRegistryError: If an (entity_type, key) pair is already registered.
        """
        for config in configs:
            for entity_type in config.entity_types:
                index_key = (entity_type, config.key)
                if index_key in self._index:
                    raise FacetRegistryError(
                        f"Duplicate facet config for entity type '{entity_type}' "
                        f"and key '{config.key}'"
                    )
                self._index[index_key] = config
            self._configs.append(config)

    def register_entity_types(self, *entries: EntityTypeEntry) -> None:
        """Register entity types. Prefixes must be unique."""
        for entry in entries:
            clash = next(
                (e for e in self._entity_types.values() if e.id_prefix == entry.id_prefix), None
            )
            if clash is not None and clash.name != entry.name:
                raise FacetRegistryError(
                    f"Entity types '{clash.name}' and '{entry.name}' "
                    f"share id prefix '{entry.id_prefix}'"
                )
            self._entity_types[entry.name] = entry

    def build(self, path: Optional[Path] = None) -> None:
        """Build the registry from a YAML file.

        The file has two top-level lists, ``entity_types`` and ``facets``.

        Args:
            path: YAML file to load. Defaults to settings.FACET_CONFIG_PATH,
                then to the bundled facets.yml.

        Raises:
            FacetRegistryError: If the file is unreadable or an entry is invalid.
        """
        if path is None:
            path = Path(settings.FACET_CONFIG_PATH) if settings.FACET_CONFIG_PATH else None
        path = path or DEFAULT_CONFIG_PATH

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise FacetRegistryError(f"Failed to load facet configs from {path}") from e

        if not isinstance(data, dict):
            raise FacetRegistryError("YAML root must be a mapping")

        try:
            self.register_entity_types(
                *[EntityTypeEntry(**entry) for entry in data.get("entity_types") or []]
            )
            self.register(*[FacetConfig(**entry) for entry in data.get("facets") or []])
        except (TypeError, ValidationError) as e:
            raise FacetRegistryError(f"Invalid facet config in {path}: {e}") from e

        self._check_pid_patterns()
        registry_logger.info(
            f"Built registry with {len(self._configs)} facets "
            f"across {len(self._entity_types)} entity types."
        )

    def _check_pid_patterns(self) -> None:
        """Validate PID patterns and flag ones that can shadow each other.

        Patterns must have exactly one capture group. Identical patterns are
        reported: only the first declared one can ever win.
        """
        seen: Dict[str, FacetConfig] = {}
        for config in self._configs:
            if config.regex is None:
                continue
            if config.regex.groups != 1:
                raise FacetRegistryError(
                    f"PID regex for '{config.key}' must have exactly one capture group, "
                    f"found {config.regex.groups}"
                )
            earlier = seen.get(config.regex.pattern)
            if earlier is not None:
                registry_logger.warning(
                    f"PID regex for '{config.key}' is identical to the one for "
                    f"'{earlier.key}'; '{earlier.key}' always wins"
                )
                continue
            seen[config.regex.pattern] = config


@lru_cache(maxsize=1)
def default_registry() -> FacetConfigRegistry:
    """Return the process-wide registry, built on first use."""
    registry = FacetConfigRegistry()
    registry.build()
    return registry
