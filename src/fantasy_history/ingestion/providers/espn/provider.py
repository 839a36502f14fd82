from __future__ import annotations

from fantasy_history.core.config import Settings
from fantasy_history.domain.enums import ApiVersionEnum
from fantasy_history.ingestion.providers.base.registry import AdapterRegistry
from fantasy_history.ingestion.providers.espn.adapters.legacy import LegacySeasonAdapter
from fantasy_history.ingestion.providers.espn.adapters.modern import ModernSeasonAdapter


def register_espn_adapters(registry: AdapterRegistry, *, config: Settings) -> None:
    registry.register(ApiVersionEnum.LEGACY, factory=lambda: LegacySeasonAdapter(config=config))
    registry.register(ApiVersionEnum.MODERN, factory=lambda: ModernSeasonAdapter(config=config))


def default_adapter_registry(config: Settings) -> AdapterRegistry:
    registry = AdapterRegistry()
    register_espn_adapters(registry, config=config)
    return registry
