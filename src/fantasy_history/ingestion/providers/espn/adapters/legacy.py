from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from fantasy_history.core.config import Settings
from fantasy_history.domain.enums import ApiVersionEnum, BracketKindEnum, ScoringFormatEnum
from fantasy_history.domain.season import (
    DraftInfo,
    LeagueSettings,
    PlayoffFormat,
    Season,
    Streak,
    TeamRecord,
)
from fantasy_history.ingestion.providers.base.errors import ProviderMappingError
from fantasy_history.ingestion.providers.espn.adapters.common import (
    GameResult,
    TeamSeed,
    assemble_season,
    parse_streak_type,
    win_percentage,
)
from fantasy_history.ingestion.providers.espn.schemas import (
    LegacyLeaguePayload,
    LegacyMatchupPayload,
    LegacyTeamPayload,
    MemberPayload,
)


def _owner_name(owner: str | dict[str, Any], members: dict[str, MemberPayload]) -> str:
    if isinstance(owner, dict):
        full = " ".join(str(owner[k]) for k in ("firstName", "lastName") if owner.get(k))
        return full or str(owner.get("id", ""))
    member = members.get(owner)
    if member is None:
        return owner
    return member.display_name or " ".join(
        p for p in (member.first_name, member.last_name) if p
    ) or owner


def _team_name(team: LegacyTeamPayload, team_id: int) -> str:
    if team.team_name:
        return team.team_name
    joined = " ".join(p for p in (team.location, team.nickname) if p)
    return joined or team.team_abbrev or f"Team {team_id}"


def _positive(value: float | None) -> float | None:
    return value if value is not None and value > 0 else None


def _to_game(matchup: LegacyMatchupPayload) -> GameResult | None:
    if matchup.away_team_id is None:
        return None
    if matchup.home_score is None or matchup.away_score is None:
        return None
    return GameResult(
        week=matchup.week,
        home_team_id=matchup.home_team_id,
        home_points=matchup.home_score,
        away_team_id=matchup.away_team_id,
        away_points=matchup.away_score,
        is_playoff=matchup.is_playoff,
        is_winners_bracket=matchup.is_winners_bracket,
    )


@dataclass(frozen=True)
class LegacySeasonAdapter:
    """
    Adapter for seasons only available through `leagueHistory`.

    These payloads are flat (counters live directly on the team) and omit whole
    sections, so settings, playoff format and draft info fall back to configured
    defaults.
    """

    config: Settings
    api_version: ApiVersionEnum = ApiVersionEnum.LEGACY

    def adapt(self, payload: Any, year: int) -> Season:
        # leagueHistory answers with an array of league objects.
        if isinstance(payload, list):
            payload = payload[0] if payload else None
        if not isinstance(payload, dict):
            raise ProviderMappingError(
                "Legacy season payload must be a JSON object or a non-empty array of them",
                context={"year": year, "type": type(payload).__name__},
            )
        try:
            league = LegacyLeaguePayload.model_validate(payload)
        except ValidationError as e:
            raise ProviderMappingError(
                "Legacy season payload did not match the expected shape",
                context={"year": year, "errors": e.errors(include_url=False)[:5]},
            ) from e

        members = {m.id: m for m in league.members}
        seeds = [
            self._seed(team, index, members) for index, team in enumerate(league.teams, start=1)
        ]
        games = [g for m in league.schedule if (g := _to_game(m)) is not None]

        league_settings = LeagueSettings(
            team_count=len(seeds),
            scoring_format=ScoringFormatEnum.STANDARD,
            playoff_format=PlayoffFormat(
                team_count=self.config.legacy_playoff_team_count,
                week_count=self.config.legacy_playoff_week_count,
                bracket_kind=BracketKindEnum(self.config.legacy_bracket_kind),
            ),
            roster_slot_counts=dict(self.config.default_roster_slots),
        )

        return assemble_season(
            year=year,
            api_version=self.api_version,
            league_settings=league_settings,
            seeds=seeds,
            games=games,
            draft_info=DraftInfo(),
        )

    def _seed(
        self, team: LegacyTeamPayload, index: int, members: dict[str, MemberPayload]
    ) -> TeamSeed:
        team_id = team.team_id if team.team_id is not None else index

        if team.owner_name:
            owners: tuple[str, ...] = (team.owner_name,)
        else:
            owners = tuple(n for n in (_owner_name(o, members) for o in team.owners) if n)

        percentage = team.win_pct
        if percentage is None:
            percentage = win_percentage(team.wins, team.losses, team.ties)

        record = TeamRecord(
            wins=team.wins,
            losses=team.losses,
            ties=team.ties,
            points_for=team.points_for,
            points_against=team.points_against,
            percentage=percentage,
            streak=Streak(
                type=parse_streak_type(team.streak_type),
                length=max(0, team.streak_length or 0),
            ),
        )

        explicit = team.rank_calculated_final or team.playoff_seed or team.overall_standing
        return TeamSeed(
            team_id=team_id,
            team_name=_team_name(team, team_id),
            owner_names=owners,
            explicit_rank=explicit if explicit and explicit > 0 else None,
            regular_season_record=record,
            total_points=team.points_for,
            highest_score=_positive(team.high_score),
            lowest_score=_positive(team.low_score),
        )
