from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest

from espn_payloads import FakeTransport, make_settings
from fantasy_history.domain.enums import ApiVersionEnum, FailureKindEnum
from fantasy_history.ingestion.batch import BatchOrchestrator, year_range
from fantasy_history.ingestion.providers.base.errors import ProviderNotFound
from fantasy_history.ingestion.providers.base.types import (
    FetchFailure,
    FetchSuccess,
    SeasonFetchResult,
)
from fantasy_history.ingestion.season_fetcher import SeasonFetcher


class SlowTransport:
    """Later years answer first, and tracks how many requests overlap."""

    def __init__(self, delays: Mapping[int, float]) -> None:
        self.delays = dict(delays)
        self.in_flight = 0
        self.max_in_flight = 0
        self.cancelled: list[int] = []

    async def get(
        self,
        year: int,
        api_version: ApiVersionEnum,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays[year])
        except asyncio.CancelledError:
            self.cancelled.append(year)
            raise
        finally:
            self.in_flight -= 1
        return {"seasonId": year}


def test_year_range_is_inclusive_and_validated() -> None:
    assert year_range(2015, 2018) == [2015, 2016, 2017, 2018]
    assert year_range(2020, 2020) == [2020]
    with pytest.raises(ValueError):
        year_range(2020, 2019)


def test_batch_orchestrator_staggers_request_starts() -> None:
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    transport = FakeTransport({y: {} for y in (2015, 2016, 2017, 2018)})
    orchestrator = BatchOrchestrator(
        fetcher=SeasonFetcher(transport, make_settings()),
        request_spacing_s=0.5,
        _sleep=fake_sleep,
    )

    asyncio.run(orchestrator.fetch_range([2015, 2016, 2017, 2018]))

    # The first request starts immediately; the i-th waits i * spacing.
    assert sorted(sleeps) == [0.5, 1.0, 1.5]


def test_batch_orchestrator_runs_fetches_concurrently_and_keeps_input_order() -> None:
    years = [2015, 2016, 2017, 2018]
    transport = SlowTransport({2015: 0.04, 2016: 0.03, 2017: 0.02, 2018: 0.01})
    orchestrator = BatchOrchestrator(
        fetcher=SeasonFetcher(transport, make_settings()), request_spacing_s=0.0
    )

    results = asyncio.run(orchestrator.fetch_range(years))

    assert [r.year for r in results] == years
    assert transport.max_in_flight == len(years)
    for result in results:
        assert isinstance(result.outcome, FetchSuccess)
        assert result.outcome.payload == {"seasonId": result.year}


def test_batch_orchestrator_settles_every_year_despite_failures() -> None:
    transport = FakeTransport(
        {
            2009: ProviderNotFound("HTTP 404", status_code=404),
            2015: [{}],
            2019: RuntimeError("socket closed"),
            2024: {},
        }
    )
    orchestrator = BatchOrchestrator(
        fetcher=SeasonFetcher(transport, make_settings()), request_spacing_s=0.0
    )

    results = asyncio.run(orchestrator.fetch_range([2009, 2015, 2019, 2024]))

    assert [r.year for r in results] == [2009, 2015, 2019, 2024]
    assert [r.ok for r in results] == [False, True, False, True]
    assert isinstance(results[0].outcome, FetchFailure)
    assert results[0].outcome.kind == FailureKindEnum.NOT_FOUND
    assert isinstance(results[2].outcome, FetchFailure)
    assert results[2].outcome.kind == FailureKindEnum.TRANSPORT_ERROR


def test_batch_orchestrator_turns_escaped_exceptions_into_failures() -> None:
    class ExplodingFetcher:
        def api_version_for(self, year: int) -> ApiVersionEnum:
            return ApiVersionEnum.MODERN

        async def fetch(self, year: int) -> SeasonFetchResult:
            if year == 2020:
                raise KeyError("teams")
            return SeasonFetchResult(
                year=year, api_version=ApiVersionEnum.MODERN, outcome=FetchSuccess({})
            )

    orchestrator = BatchOrchestrator(
        fetcher=ExplodingFetcher(),  # type: ignore[arg-type]
        request_spacing_s=0.0,
    )

    results = asyncio.run(orchestrator.fetch_range([2019, 2020, 2021]))

    assert [r.ok for r in results] == [True, False, True]
    failure = results[1].outcome
    assert isinstance(failure, FetchFailure)
    assert failure.kind == FailureKindEnum.TRANSPORT_ERROR
    assert failure.reason.startswith("KeyError")


def test_batch_orchestrator_cancels_in_flight_fetches_on_timeout() -> None:
    transport = SlowTransport({2018: 0.0, 2019: 10.0, 2020: 10.0})
    orchestrator = BatchOrchestrator(
        fetcher=SeasonFetcher(transport, make_settings()),
        request_spacing_s=0.0,
        timeout_s=0.05,
    )

    with pytest.raises(TimeoutError):
        asyncio.run(orchestrator.fetch_range([2018, 2019, 2020]))

    assert sorted(transport.cancelled) == [2019, 2020]
    assert transport.in_flight == 0


def test_batch_orchestrator_empty_input() -> None:
    orchestrator = BatchOrchestrator(fetcher=SeasonFetcher(FakeTransport({}), make_settings()))

    assert asyncio.run(orchestrator.fetch_range([])) == []
