"""
Fan-in of per-season fetch results into one cross-season outcome.

Every derived structure (all-time records, league evolution, team histories) is
rebuilt from the full set of adapted seasons on each call, so the outcome
depends only on which seasons are present, never on the order they arrived in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from fantasy_history.analytics.evolution import build_league_evolution
from fantasy_history.analytics.records import build_all_time_records
from fantasy_history.analytics.teams import build_team_histories
from fantasy_history.domain.enums import FailureKindEnum
from fantasy_history.domain.history import AggregateOutcome, SeasonFailure
from fantasy_history.domain.season import Season
from fantasy_history.ingestion.providers.base.errors import format_failure_reason
from fantasy_history.ingestion.providers.base.registry import AdapterRegistry
from fantasy_history.ingestion.providers.base.types import (
    FetchFailure,
    FetchSuccess,
    SeasonFetchResult,
)

logger = logging.getLogger(__name__)


def build_outcome(
    seasons: Iterable[Season], failures: Iterable[SeasonFailure]
) -> AggregateOutcome:
    ordered = tuple(sorted(seasons, key=lambda s: s.season_id, reverse=True))
    return AggregateOutcome(
        seasons=ordered,
        failures=tuple(sorted(failures, key=lambda f: f.year, reverse=True)),
        all_time_records=build_all_time_records(ordered),
        league_evolution=build_league_evolution(ordered),
        team_histories=build_team_histories(ordered),
    )


def merge_outcomes(outcomes: Sequence[AggregateOutcome]) -> AggregateOutcome:
    """
    Combine outcomes of separate batches as if their years had been fetched together.

    A year present in more than one batch takes its value from the later batch,
    whether that value is a season or a failure.
    """

    by_year: dict[int, Season | SeasonFailure] = {}
    for outcome in outcomes:
        for failure in outcome.failures:
            by_year[failure.year] = failure
        for season in outcome.seasons:
            by_year[season.season_id] = season

    return build_outcome(
        (v for v in by_year.values() if isinstance(v, Season)),
        (v for v in by_year.values() if isinstance(v, SeasonFailure)),
    )


@dataclass
class SeasonAggregator:
    """
    Adapts successful fetches through the registry and folds everything into an
    `AggregateOutcome`.

    A payload the adapter rejects becomes an `AdaptationError` failure for that
    year only; the rest of the batch is unaffected.
    """

    registry: AdapterRegistry
    current_year: int | None = None

    def adapt(self, result: SeasonFetchResult) -> Season | SeasonFailure:
        outcome = result.outcome
        if isinstance(outcome, FetchFailure):
            return SeasonFailure(year=result.year, kind=outcome.kind, reason=outcome.reason)

        assert isinstance(outcome, FetchSuccess)
        try:
            season = self.registry.get(result.api_version).adapt(outcome.payload, result.year)
        except Exception as exc:
            logger.exception("Failed to adapt %s season %s", result.api_version, result.year)
            return SeasonFailure(
                year=result.year,
                kind=FailureKindEnum.ADAPTATION_ERROR,
                reason=format_failure_reason(exc),
            )

        if season.season_id == self.current_year:
            season = replace(season, is_current_season=True, is_complete=False)
        return season

    def aggregate(self, results: Iterable[SeasonFetchResult]) -> AggregateOutcome:
        # One entry per year; a repeated year takes the later result.
        by_year: dict[int, Season | SeasonFailure] = {}
        for result in results:
            by_year[result.year] = self.adapt(result)

        seasons = [v for v in by_year.values() if isinstance(v, Season)]
        failures = [v for v in by_year.values() if isinstance(v, SeasonFailure)]
        logger.info("Aggregated %d seasons (%d unavailable)", len(seasons), len(failures))
        return build_outcome(seasons, failures)
