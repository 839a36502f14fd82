"""Canonical, provider-independent representation of one league season.

Every adapter produces these types; nothing downstream of the adapter layer
ever sees a raw upstream payload.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from fantasy_history.domain.enums import (
    ApiVersionEnum,
    BracketKindEnum,
    DraftTypeEnum,
    HighlightTypeEnum,
    ScoringFormatEnum,
    StreakTypeEnum,
)


@dataclass(frozen=True)
class PlayoffFormat:
    team_count: int
    week_count: int
    bracket_kind: BracketKindEnum = BracketKindEnum.SINGLE


@dataclass(frozen=True)
class LeagueSettings:
    team_count: int
    scoring_format: ScoringFormatEnum
    playoff_format: PlayoffFormat
    roster_slot_counts: Mapping[str, int]


@dataclass(frozen=True)
class Streak:
    type: StreakTypeEnum = StreakTypeEnum.WIN
    length: int = 0


@dataclass(frozen=True)
class TeamRecord:
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    percentage: float = 0.0
    games_back: float = 0.0
    streak: Streak = field(default_factory=Streak)

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties


@dataclass(frozen=True)
class TeamStanding:
    team_id: int
    team_name: str
    owner_names: tuple[str, ...]
    final_rank: int
    regular_season_record: TeamRecord
    playoff_record: TeamRecord
    total_points: float
    points_per_game: float
    # Absent when the upstream payload carried no per-game scores.
    highest_score: float | None = None
    lowest_score: float | None = None
    weekly_scores: Mapping[int, float] = field(default_factory=dict)
    strength_of_schedule: float | None = None
    longest_win_streak: int | None = None
    longest_loss_streak: int | None = None


@dataclass(frozen=True)
class SeasonRecord:
    team_id: int
    value: float
    week: int | None = None


@dataclass(frozen=True)
class LeagueAverages:
    points_per_game: float = 0.0
    winning_score: float | None = None
    blowout_margin: float | None = None


@dataclass(frozen=True)
class SeasonRecords:
    highest_score: SeasonRecord | None = None
    lowest_score: SeasonRecord | None = None
    most_points_for: SeasonRecord | None = None
    most_points_against: SeasonRecord | None = None
    best_record: SeasonRecord | None = None
    worst_record: SeasonRecord | None = None
    biggest_blowout: SeasonRecord | None = None
    closest_game: SeasonRecord | None = None


@dataclass(frozen=True)
class SeasonStatistics:
    league_averages: LeagueAverages
    season_records: SeasonRecords


@dataclass(frozen=True)
class PlayoffMatchup:
    home_team_id: int
    away_team_id: int | None
    home_points: float | None
    away_points: float | None
    winner_team_id: int | None


@dataclass(frozen=True)
class PlayoffRound:
    week: int
    matchups: tuple[PlayoffMatchup, ...]


@dataclass(frozen=True)
class PlayoffResults:
    champion: int
    runner_up: int | None
    third_place: int | None = None
    consolation_winner: int | None = None
    bracket: tuple[PlayoffRound, ...] = ()


@dataclass(frozen=True)
class DraftPick:
    overall_pick: int
    round: int
    round_pick: int
    team_id: int
    player_id: int | None = None
    bid_amount: float | None = None
    keeper: bool = False


@dataclass(frozen=True)
class DraftInfo:
    draft_type: DraftTypeEnum = DraftTypeEnum.SNAKE
    # Epoch millis; None when the upstream never reported a date.
    draft_date: int | None = None
    draft_order: tuple[int, ...] = ()
    draft_picks: tuple[DraftPick, ...] = ()


@dataclass(frozen=True)
class Highlight:
    id: str
    type: HighlightTypeEnum
    title: str
    description: str
    teams_involved: tuple[int, ...]
    significance: int
    week: int | None = None


@dataclass(frozen=True)
class Season:
    season_id: int
    league_settings: LeagueSettings
    final_standings: tuple[TeamStanding, ...]
    season_stats: SeasonStatistics
    highlights: tuple[Highlight, ...]
    playoff_results: PlayoffResults
    draft_info: DraftInfo
    api_version: ApiVersionEnum | None = None
    is_current_season: bool = False
    is_complete: bool = True

    def standing_for(self, team_id: int) -> TeamStanding | None:
        for standing in self.final_standings:
            if standing.team_id == team_id:
                return standing
        return None
