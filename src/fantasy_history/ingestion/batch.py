from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from fantasy_history.domain.enums import FailureKindEnum
from fantasy_history.ingestion.providers.base.errors import format_failure_reason
from fantasy_history.ingestion.providers.base.types import FetchFailure, SeasonFetchResult
from fantasy_history.ingestion.season_fetcher import SeasonFetcher

logger = logging.getLogger(__name__)


def year_range(start_year: int, end_year: int) -> list[int]:
    if end_year < start_year:
        raise ValueError(f"end_year ({end_year}) must be >= start_year ({start_year})")
    return list(range(start_year, end_year + 1))


@dataclass
class BatchOrchestrator:
    """
    Staggered fan-out / fan-in over season fetches.

    The i-th year starts after `i * request_spacing_s` so the provider never sees a
    burst; once started, fetches overlap freely. The call returns only when every
    year has settled, in input order, with failures as data.
    """

    fetcher: SeasonFetcher
    request_spacing_s: float = 0.5
    timeout_s: float | None = None

    _sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    async def _fetch_after(self, delay_s: float, year: int) -> SeasonFetchResult:
        if delay_s > 0:
            await self._sleep(delay_s)
        return await self.fetcher.fetch(year)

    async def fetch_range(self, years: Sequence[int]) -> list[SeasonFetchResult]:
        if not years:
            return []

        logger.info(
            "Fetching %d seasons (%s) spaced %.2fs apart",
            len(years),
            ", ".join(str(y) for y in years),
            self.request_spacing_s,
        )

        tasks = [
            asyncio.create_task(self._fetch_after(index * self.request_spacing_s, year))
            for index, year in enumerate(years)
        ]

        try:
            async with asyncio.timeout(self.timeout_s):
                settled = await asyncio.gather(*tasks, return_exceptions=True)
        except BaseException:
            # Caller abandoned the batch (cancel/timeout): drop in-flight fetches.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        results: list[SeasonFetchResult] = []
        for year, item in zip(years, settled, strict=True):
            if isinstance(item, BaseException):
                item = SeasonFetchResult(
                    year=year,
                    api_version=self.fetcher.api_version_for(year),
                    outcome=FetchFailure(
                        kind=FailureKindEnum.TRANSPORT_ERROR,
                        reason=format_failure_reason(item),
                    ),
                )
            results.append(item)

        ok = sum(1 for r in results if r.ok)
        logger.info("Batch settled: %d succeeded, %d failed", ok, len(results) - ok)
        return results
