"""Cross-season model derived from a set of normalized seasons.

Nothing here is persisted: every aggregation run builds these from scratch.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from fantasy_history.domain.enums import (
    FailureKindEnum,
    RecordCategoryEnum,
    RuleChangeCategoryEnum,
    RuleChangeImpactEnum,
)
from fantasy_history.domain.season import Season, TeamStanding

SINGLE_GAME_RECORD_KEYS = ("highestScore", "lowestScore", "biggestBlowout", "closestGame")
SEASON_RECORD_KEYS = (
    "mostWins",
    "fewestWins",
    "mostPoints",
    "fewestPoints",
    "longestWinStreak",
    "longestLoseStreak",
)
CAREER_RECORD_KEYS = (
    "mostChampionships",
    "mostPlayoffAppearances",
    "highestCareerWinPercentage",
    "mostCareerPoints",
)


@dataclass(frozen=True)
class HistoricalRecord:
    team_id: int
    team_name: str
    value: float
    season_id: int
    week: int | None = None
    context: str | None = None
    is_current_record: bool = True

    @property
    def has_data(self) -> bool:
        return self != NO_DATA


# Sentinel for a record slot with no qualifying observations.
NO_DATA = HistoricalRecord(
    team_id=0,
    team_name="No Data",
    value=0.0,
    season_id=0,
    is_current_record=False,
)


@dataclass(frozen=True)
class AllTimeRecords:
    single_game_records: Mapping[str, HistoricalRecord]
    season_records: Mapping[str, HistoricalRecord]
    career_records: Mapping[str, HistoricalRecord]

    @classmethod
    def empty(cls) -> AllTimeRecords:
        return cls(
            single_game_records={k: NO_DATA for k in SINGLE_GAME_RECORD_KEYS},
            season_records={k: NO_DATA for k in SEASON_RECORD_KEYS},
            career_records={k: NO_DATA for k in CAREER_RECORD_KEYS},
        )

    def iter_records(self) -> Iterator[tuple[RecordCategoryEnum, str, HistoricalRecord]]:
        for key, record in self.single_game_records.items():
            yield RecordCategoryEnum.GAME, key, record
        for key, record in self.season_records.items():
            yield RecordCategoryEnum.SEASON, key, record
        for key, record in self.career_records.items():
            yield RecordCategoryEnum.CAREER, key, record


@dataclass(frozen=True)
class RuleChange:
    season_id: int
    category: RuleChangeCategoryEnum
    description: str
    impact: RuleChangeImpactEnum


@dataclass(frozen=True)
class LeagueEvolution:
    total_seasons: int
    founded_year: int | None
    team_count_history: Mapping[int, int]
    rule_changes: tuple[RuleChange, ...]
    scoring_evolution: Mapping[int, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TrendPoint:
    season_id: int
    value: float
    rank: int = 0


@dataclass(frozen=True)
class FinishStreak:
    type: str  # "championship" | "playoff" | "basement"
    length: int


@dataclass(frozen=True)
class CareerStats:
    total_seasons: int
    championship_count: int
    playoff_appearances: int
    regular_season_wins: int
    regular_season_losses: int
    regular_season_ties: int
    total_points_scored: float
    average_points_per_season: float
    best_finish: int
    worst_finish: int
    current_streak: FinishStreak

    @property
    def win_percentage(self) -> float:
        games = self.regular_season_wins + self.regular_season_losses + self.regular_season_ties
        if games == 0:
            return 0.0
        return (self.regular_season_wins + 0.5 * self.regular_season_ties) / games


@dataclass(frozen=True)
class TeamHistory:
    team_id: int
    current_name: str
    historical_names: Mapping[int, str]
    season_performance: Mapping[int, TeamStanding]
    career_stats: CareerStats
    win_percentage_trend: tuple[TrendPoint, ...]
    points_trend: tuple[TrendPoint, ...]
    finish_trend: tuple[TrendPoint, ...]


@dataclass(frozen=True)
class SeasonFailure:
    year: int
    kind: FailureKindEnum
    reason: str


@dataclass(frozen=True)
class AggregateOutcome:
    seasons: tuple[Season, ...]
    failures: tuple[SeasonFailure, ...]
    all_time_records: AllTimeRecords
    league_evolution: LeagueEvolution
    team_histories: Mapping[int, TeamHistory] = field(default_factory=dict)

    def season(self, season_id: int) -> Season | None:
        for season in self.seasons:
            if season.season_id == season_id:
                return season
        return None

    def team_history(self, team_id: int) -> TeamHistory | None:
        return self.team_histories.get(team_id)

    def team_comparison(self, team_ids: Sequence[int]) -> dict[int, TeamHistory]:
        return {t: self.team_histories[t] for t in team_ids if t in self.team_histories}

    def search_records(
        self,
        *,
        category: RecordCategoryEnum | None = None,
        team_id: int | None = None,
        season_id: int | None = None,
    ) -> list[HistoricalRecord]:
        """Records matching every given filter; "no data" slots are never returned."""

        matches: list[HistoricalRecord] = []
        for cat, _key, record in self.all_time_records.iter_records():
            if not record.has_data:
                continue
            if category is not None and cat != category:
                continue
            if team_id is not None and record.team_id != team_id:
                continue
            if season_id is not None and record.season_id != season_id:
                continue
            matches.append(record)
        return matches
