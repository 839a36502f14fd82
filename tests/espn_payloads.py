"""Builders for ESPN-shaped payloads used across the test modules."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fantasy_history.core.config import Settings
from fantasy_history.domain.enums import ApiVersionEnum

DEFAULT_LINEUP_SLOT_COUNTS = {
    "0": 1,
    "2": 2,
    "4": 2,
    "6": 1,
    "16": 1,
    "17": 1,
    "20": 6,
    "21": 1,
    "23": 1,
}


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"ESPN_LEAGUE_ID": "123", "request_spacing_s": 0.0}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def modern_team(
    team_id: int,
    *,
    name: str | None = None,
    wins: int = 0,
    losses: int = 0,
    points_for: float = 0.0,
    rank: int | None = None,
    owners: Sequence[str] | None = None,
) -> dict[str, Any]:
    team: dict[str, Any] = {
        "id": team_id,
        "name": name or f"Team {team_id}",
        "owners": list(owners) if owners is not None else [f"{{OWNER-{team_id}}}"],
        "record": {
            "overall": {
                "wins": wins,
                "losses": losses,
                "ties": 0,
                "pointsFor": points_for,
                "pointsAgainst": 0.0,
                "streakType": "WIN",
                "streakLength": 1,
            }
        },
    }
    if rank is not None:
        team["rankCalculatedFinal"] = rank
    return team


def modern_matchup(
    week: int,
    home_id: int,
    home_points: float,
    away_id: int,
    away_points: float,
    *,
    tier: str = "NONE",
) -> dict[str, Any]:
    if home_points > away_points:
        winner = "HOME"
    elif away_points > home_points:
        winner = "AWAY"
    else:
        winner = "TIE"
    return {
        "matchupPeriodId": week,
        "home": {"teamId": home_id, "totalPoints": home_points},
        "away": {"teamId": away_id, "totalPoints": away_points},
        "winner": winner,
        "playoffTierType": tier,
    }


def modern_league(
    year: int,
    teams: Sequence[Mapping[str, Any]],
    *,
    schedule: Sequence[Mapping[str, Any]] = (),
    members: Sequence[Mapping[str, Any]] = (),
    reception_points: float | None = 1.0,
    playoff_team_count: int = 4,
    matchup_period_count: int = 14,
    final_scoring_period: int = 17,
    lineup_slot_counts: Mapping[str, int] | None = None,
) -> dict[str, Any]:
    scoring_items = (
        [{"statId": 53, "points": reception_points}] if reception_points is not None else []
    )
    return {
        "id": 123,
        "seasonId": year,
        "teams": list(teams),
        "members": list(members),
        "schedule": list(schedule),
        "status": {
            "playoffTeamCount": playoff_team_count,
            "finalScoringPeriod": final_scoring_period,
        },
        "settings": {
            "name": "Test League",
            "size": len(teams),
            "scoringSettings": {"scoringItems": scoring_items},
            "scheduleSettings": {
                "matchupPeriodCount": matchup_period_count,
                "playoffTeamCount": playoff_team_count,
            },
            "rosterSettings": {
                "lineupSlotCounts": dict(lineup_slot_counts or DEFAULT_LINEUP_SLOT_COUNTS),
                "moveLimit": -1,
            },
        },
    }


def legacy_team(
    team_id: int,
    *,
    name: str | None = None,
    wins: int = 0,
    losses: int = 0,
    points_for: float = 0.0,
    standing: int | None = None,
) -> dict[str, Any]:
    return {
        "teamId": team_id,
        "teamName": name or f"Team {team_id}",
        "wins": wins,
        "losses": losses,
        "pointsFor": points_for,
        "pointsAgainst": 0.0,
        "overallStanding": standing,
    }


def legacy_matchup(
    week: int,
    home_id: int,
    home_score: float,
    away_id: int,
    away_score: float,
    *,
    playoff: bool = False,
    winners_bracket: bool = False,
) -> dict[str, Any]:
    return {
        "week": week,
        "homeTeamId": home_id,
        "homeScore": home_score,
        "awayTeamId": away_id,
        "awayScore": away_score,
        "isPlayoff": playoff,
        "isWinnersBracket": winners_bracket,
    }


def legacy_league(
    teams: Sequence[Mapping[str, Any]],
    *,
    schedule: Sequence[Mapping[str, Any]] = (),
) -> list[dict[str, Any]]:
    return [{"teams": list(teams), "schedule": list(schedule)}]


class FakeTransport:
    """Answers `get` from a year-keyed table; exceptions in the table are raised."""

    def __init__(self, responses: Mapping[int, Any]) -> None:
        self.responses = dict(responses)
        self.calls: list[tuple[int, ApiVersionEnum]] = []

    async def get(
        self,
        year: int,
        api_version: ApiVersionEnum,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        self.calls.append((year, api_version))
        response = self.responses[year]
        if isinstance(response, BaseException):
            raise response
        return response
