from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from fantasy_history.core.config import Settings
from fantasy_history.domain.enums import (
    ApiVersionEnum,
    BracketKindEnum,
    DraftTypeEnum,
    ScoringFormatEnum,
)
from fantasy_history.domain.season import (
    DraftInfo,
    DraftPick,
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
    MemberPayload,
    ModernLeaguePayload,
    ModernMatchupPayload,
    ModernTeamPayload,
)

_DRAFT_TYPES = {
    "SNAKE": DraftTypeEnum.SNAKE,
    "AUCTION": DraftTypeEnum.AUCTION,
    "LINEAR": DraftTypeEnum.LINEAR,
}


def detect_scoring_format(reception_points: float | None) -> ScoringFormatEnum:
    """Scoring format is inferred from the points awarded per reception."""

    if reception_points == 1:
        return ScoringFormatEnum.PPR
    if reception_points == 0.5:
        return ScoringFormatEnum.HALF_PPR
    if reception_points == 0:
        return ScoringFormatEnum.STANDARD
    return ScoringFormatEnum.CUSTOM


def _member_name(member: MemberPayload) -> str:
    if member.display_name:
        return member.display_name
    full = " ".join(p for p in (member.first_name, member.last_name) if p)
    return full or member.id


def _team_name(team: ModernTeamPayload) -> str:
    if team.name:
        return team.name
    joined = " ".join(p for p in (team.location, team.nickname) if p)
    return joined or team.abbrev or f"Team {team.id}"


def _positive(value: int | None) -> int | None:
    return value if value is not None and value > 0 else None


def _to_game(matchup: ModernMatchupPayload) -> GameResult | None:
    home, away = matchup.home, matchup.away
    if home is None or away is None or matchup.winner == "UNDECIDED":
        return None
    if home.total_points is None or away.total_points is None:
        return None
    return GameResult(
        week=matchup.matchup_period_id,
        home_team_id=home.team_id,
        home_points=home.total_points,
        away_team_id=away.team_id,
        away_points=away.total_points,
        is_playoff=matchup.playoff_tier_type != "NONE",
        is_winners_bracket=matchup.playoff_tier_type == "WINNERS_BRACKET",
    )


@dataclass(frozen=True)
class ModernSeasonAdapter:
    """Adapter for seasons served by the current `seasons/{year}` endpoint."""

    config: Settings
    api_version: ApiVersionEnum = ApiVersionEnum.MODERN

    def adapt(self, payload: Any, year: int) -> Season:
        if not isinstance(payload, dict):
            raise ProviderMappingError(
                "Modern season payload must be a JSON object",
                context={"year": year, "type": type(payload).__name__},
            )
        try:
            league = ModernLeaguePayload.model_validate(payload)
        except ValidationError as e:
            raise ProviderMappingError(
                "Modern season payload did not match the expected shape",
                context={"year": year, "errors": e.errors(include_url=False)[:5]},
            ) from e

        members = {m.id: m for m in league.members}
        seeds = [self._seed(team, members) for team in league.teams]
        games = [g for m in league.schedule if (g := _to_game(m)) is not None]

        return assemble_season(
            year=year,
            api_version=self.api_version,
            league_settings=self._league_settings(league, team_count=len(seeds)),
            seeds=seeds,
            games=games,
            draft_info=self._draft_info(league),
        )

    def _league_settings(self, league: ModernLeaguePayload, *, team_count: int) -> LeagueSettings:
        status = league.status
        schedule = league.settings.schedule_settings

        playoff_teams = (
            status.playoff_team_count
            or schedule.playoff_team_count
            or self.config.default_playoff_team_count
        )
        playoff_start = (
            schedule.matchup_period_count + 1
            if schedule.matchup_period_count
            else self.config.default_playoff_start_week
        )
        final_period = status.final_scoring_period or self.config.default_final_scoring_period

        roster = dict(self.config.default_roster_slots)
        roster.update(league.settings.roster_settings.slot_counts())

        return LeagueSettings(
            team_count=team_count,
            scoring_format=detect_scoring_format(
                league.settings.scoring_settings.reception_points()
            ),
            playoff_format=PlayoffFormat(
                team_count=playoff_teams,
                week_count=max(1, final_period - playoff_start + 1),
                bracket_kind=BracketKindEnum.SINGLE,
            ),
            roster_slot_counts=roster,
        )

    def _seed(self, team: ModernTeamPayload, members: dict[str, MemberPayload]) -> TeamSeed:
        overall = team.record.overall

        owner_ids = team.owners or ([team.primary_owner] if team.primary_owner else [])
        owners = tuple(_member_name(members[o]) if o in members else o for o in owner_ids)

        percentage = overall.percentage or win_percentage(
            overall.wins, overall.losses, overall.ties
        )
        points_for = overall.points_for or team.points or 0.0

        record = TeamRecord(
            wins=overall.wins,
            losses=overall.losses,
            ties=overall.ties,
            points_for=points_for,
            points_against=overall.points_against,
            percentage=percentage,
            games_back=overall.games_back,
            streak=Streak(
                type=parse_streak_type(overall.streak_type),
                length=max(0, overall.streak_length),
            ),
        )

        return TeamSeed(
            team_id=team.id,
            team_name=_team_name(team),
            owner_names=owners,
            explicit_rank=_positive(team.rank_calculated_final) or _positive(team.playoff_seed),
            regular_season_record=record,
            total_points=points_for,
        )

    def _draft_info(self, league: ModernLeaguePayload) -> DraftInfo:
        draft_settings = league.settings.draft_settings
        detail = league.draft_detail

        draft_type = _DRAFT_TYPES.get((draft_settings.type or "").upper(), DraftTypeEnum.SNAKE)
        picks = sorted(detail.picks, key=lambda p: p.overall_pick_number)

        return DraftInfo(
            draft_type=draft_type,
            draft_date=draft_settings.date or detail.complete_date,
            draft_order=tuple(draft_settings.pick_order),
            draft_picks=tuple(
                DraftPick(
                    overall_pick=p.overall_pick_number,
                    round=p.round_id,
                    round_pick=p.round_pick_number,
                    team_id=p.team_id,
                    player_id=p.player_id,
                    bid_amount=p.bid_amount,
                    keeper=p.keeper,
                )
                for p in picks
            ),
        )
