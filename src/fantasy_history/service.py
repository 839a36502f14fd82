"""Outbound entry points: fetch a span of seasons, or a single season, and aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from fantasy_history.analytics.aggregator import SeasonAggregator
from fantasy_history.core.config import Settings
from fantasy_history.domain.history import AggregateOutcome
from fantasy_history.ingestion.batch import BatchOrchestrator, year_range
from fantasy_history.ingestion.providers.base.adapter import SeasonTransport
from fantasy_history.ingestion.providers.base.registry import AdapterRegistry
from fantasy_history.ingestion.providers.base.types import SeasonFetchResult
from fantasy_history.ingestion.providers.espn.client import EspnClient
from fantasy_history.ingestion.providers.espn.provider import default_adapter_registry
from fantasy_history.ingestion.season_fetcher import SeasonFetcher


@dataclass
class HistoricalDataService:
    transport: SeasonTransport
    config: Settings
    registry: AdapterRegistry | None = None
    current_year: int | None = None

    _fetcher: SeasonFetcher = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.registry is None:
            self.registry = default_adapter_registry(self.config)
        self._fetcher = SeasonFetcher(transport=self.transport, config=self.config)

    def orchestrator(self) -> BatchOrchestrator:
        return BatchOrchestrator(
            fetcher=self._fetcher,
            request_spacing_s=self.config.request_spacing_s,
            timeout_s=self.config.batch_timeout_s,
        )

    def aggregator(self) -> SeasonAggregator:
        assert self.registry is not None
        return SeasonAggregator(registry=self.registry, current_year=self.current_year)

    async def get_all_historical_seasons(self, start_year: int, end_year: int) -> AggregateOutcome:
        years = year_range(start_year, end_year)
        results = await self.orchestrator().fetch_range(years)
        return self.aggregator().aggregate(results)

    async def get_season_data(self, year: int) -> SeasonFetchResult:
        return await self._fetcher.fetch(year)


async def get_all_historical_seasons(
    start_year: int,
    end_year: int,
    *,
    config: Settings,
    current_year: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AggregateOutcome:
    """Fetch every season in `[start_year, end_year]` from ESPN and aggregate them."""

    async with EspnClient.from_settings(config, transport=transport) as client:
        service = HistoricalDataService(transport=client, config=config, current_year=current_year)
        return await service.get_all_historical_seasons(start_year, end_year)


async def get_season_data(
    year: int,
    *,
    config: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SeasonFetchResult:
    async with EspnClient.from_settings(config, transport=transport) as client:
        service = HistoricalDataService(transport=client, config=config)
        return await service.get_season_data(year)
