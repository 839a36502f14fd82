from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from fantasy_history.domain.history import (
    AggregateOutcome,
    CareerStats,
    FinishStreak,
    TeamHistory,
    TrendPoint,
)
from fantasy_history.domain.season import Season, TeamStanding

BASEMENT_SIZE = 3


@dataclass(frozen=True)
class _TeamSeason:
    season: Season
    standing: TeamStanding

    @property
    def is_champion(self) -> bool:
        return self.season.playoff_results.champion == self.standing.team_id

    @property
    def made_playoffs(self) -> bool:
        return self.standing.final_rank <= self.season.league_settings.playoff_format.team_count

    @property
    def in_basement(self) -> bool:
        team_count = len(self.season.final_standings)
        return self.standing.final_rank > team_count - BASEMENT_SIZE


def _leading_run(entries: Sequence[_TeamSeason], test: Callable[[_TeamSeason], bool]) -> int:
    run = 0
    for entry in entries:
        if not test(entry):
            break
        run += 1
    return run


def current_finish_streak(entries: Sequence[_TeamSeason]) -> FinishStreak:
    """
    Streak ending at the team's most recent completed season.

    Championship runs win over playoff runs, which win over basement runs.
    """

    recent_first = sorted(
        (e for e in entries if e.season.is_complete),
        key=lambda e: e.season.season_id,
        reverse=True,
    )
    for kind, test in (
        ("championship", lambda e: e.is_champion),
        ("playoff", lambda e: e.made_playoffs),
    ):
        run = _leading_run(recent_first, test)
        if run > 0:
            return FinishStreak(type=kind, length=run)
    basement = _leading_run(recent_first, lambda e: e.in_basement)
    return FinishStreak(type="basement", length=basement)


def _career_stats(entries: Sequence[_TeamSeason]) -> CareerStats:
    completed = [e for e in entries if e.season.is_complete]
    ranks = [e.standing.final_rank for e in entries]
    total_points = sum(e.standing.total_points for e in entries)

    return CareerStats(
        total_seasons=len(entries),
        championship_count=sum(1 for e in completed if e.is_champion),
        playoff_appearances=sum(1 for e in completed if e.made_playoffs),
        regular_season_wins=sum(e.standing.regular_season_record.wins for e in entries),
        regular_season_losses=sum(e.standing.regular_season_record.losses for e in entries),
        regular_season_ties=sum(e.standing.regular_season_record.ties for e in entries),
        total_points_scored=total_points,
        average_points_per_season=total_points / len(entries),
        best_finish=min(ranks),
        worst_finish=max(ranks),
        current_streak=current_finish_streak(entries),
    )


def build_team_histories(seasons: Sequence[Season]) -> dict[int, TeamHistory]:
    """Per-franchise history keyed by team id, built oldest season first."""

    by_team: dict[int, list[_TeamSeason]] = {}
    for season in sorted(seasons, key=lambda s: s.season_id):
        for standing in season.final_standings:
            by_team.setdefault(standing.team_id, []).append(_TeamSeason(season, standing))

    histories: dict[int, TeamHistory] = {}
    for team_id, entries in sorted(by_team.items()):
        histories[team_id] = TeamHistory(
            team_id=team_id,
            current_name=entries[-1].standing.team_name,
            historical_names={e.season.season_id: e.standing.team_name for e in entries},
            season_performance={e.season.season_id: e.standing for e in entries},
            career_stats=_career_stats(entries),
            win_percentage_trend=tuple(
                TrendPoint(
                    season_id=e.season.season_id,
                    value=e.standing.regular_season_record.percentage,
                    rank=e.standing.final_rank,
                )
                for e in entries
            ),
            points_trend=tuple(
                TrendPoint(
                    season_id=e.season.season_id,
                    value=e.standing.total_points,
                    rank=e.standing.final_rank,
                )
                for e in entries
            ),
            finish_trend=tuple(
                TrendPoint(
                    season_id=e.season.season_id,
                    value=e.standing.final_rank,
                    rank=e.standing.final_rank,
                )
                for e in entries
            ),
        )
    return histories


# -----------------------------
# League-wide trends
# -----------------------------


@dataclass(frozen=True)
class LeagueTrends:
    scoring_trends: tuple[TrendPoint, ...]
    competitive_balance: tuple[TrendPoint, ...]
    participation: tuple[TrendPoint, ...]


def competitive_balance(season: Season) -> float:
    """1 minus the variance of regular-season win percentage; 1.0 is perfect parity."""

    pcts = [s.regular_season_record.percentage for s in season.final_standings]
    if not pcts:
        return 0.0
    mean = sum(pcts) / len(pcts)
    variance = sum((p - mean) ** 2 for p in pcts) / len(pcts)
    return max(0.0, 1.0 - variance)


def league_trends(outcome: AggregateOutcome) -> LeagueTrends:
    ordered = sorted(outcome.seasons, key=lambda s: s.season_id)
    return LeagueTrends(
        scoring_trends=tuple(
            TrendPoint(s.season_id, s.season_stats.league_averages.points_per_game)
            for s in ordered
        ),
        competitive_balance=tuple(
            TrendPoint(s.season_id, competitive_balance(s)) for s in ordered
        ),
        participation=tuple(
            TrendPoint(s.season_id, float(s.league_settings.team_count)) for s in ordered
        ),
    )
