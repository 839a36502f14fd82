"""
Strict input shapes for the two ESPN payload generations.

Upstream JSON is loosely typed: optional fields are routinely missing or null and
nesting differs between API generations. Each shape is validated and defaulted
here so adapters only ever work with typed models.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

RECEPTION_STAT_ID = 53

# ESPN lineup slot ids -> canonical position keys.
LINEUP_SLOT_NAMES: dict[int, str] = {
    0: "QB",
    2: "RB",
    4: "WR",
    6: "TE",
    16: "D/ST",
    17: "K",
    20: "BENCH",
    21: "IR",
    23: "FLEX",
}


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Nulls mean "not reported"; let field defaults apply.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# -----------------------------
# Shared
# -----------------------------


class MemberPayload(_Payload):
    id: str
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None


# -----------------------------
# Modern (cutoff year and later)
# -----------------------------


class RecordDetailPayload(_Payload):
    wins: int = 0
    losses: int = 0
    ties: int = 0
    percentage: float = 0.0
    points_for: float = 0.0
    points_against: float = 0.0
    games_back: float = 0.0
    streak_length: int = 0
    streak_type: str | None = None


class TeamRecordPayload(_Payload):
    overall: RecordDetailPayload = Field(default_factory=RecordDetailPayload)


class ModernTeamPayload(_Payload):
    id: int
    name: str | None = None
    location: str | None = None
    nickname: str | None = None
    abbrev: str | None = None
    owners: list[str] = Field(default_factory=list)
    primary_owner: str | None = None
    rank_calculated_final: int | None = None
    playoff_seed: int | None = None
    points: float | None = None
    record: TeamRecordPayload = Field(default_factory=TeamRecordPayload)


class MatchupSidePayload(_Payload):
    team_id: int
    total_points: float | None = None


class ModernMatchupPayload(_Payload):
    matchup_period_id: int
    home: MatchupSidePayload | None = None
    away: MatchupSidePayload | None = None
    winner: str = "UNDECIDED"
    playoff_tier_type: str = "NONE"


class ModernStatusPayload(_Payload):
    playoff_team_count: int | None = None
    final_scoring_period: int | None = None


class ScoringItemPayload(_Payload):
    stat_id: int
    points: float = 0.0


class ScoringSettingsPayload(_Payload):
    # Older exports key rule weights by stat id directly, e.g. {"53": 1}.
    model_config = ConfigDict(extra="allow")

    scoring_items: list[ScoringItemPayload] = Field(default_factory=list)

    def reception_points(self) -> float | None:
        for item in self.scoring_items:
            if item.stat_id == RECEPTION_STAT_ID:
                return item.points
        extra = self.model_extra or {}
        value = extra.get(str(RECEPTION_STAT_ID))
        if isinstance(value, int | float):
            return float(value)
        return None


class RosterSettingsPayload(_Payload):
    # Older exports carry named counts, e.g. {"QB": 1, "RB": 2}.
    model_config = ConfigDict(extra="allow")

    lineup_slot_counts: dict[str, int] = Field(default_factory=dict)

    def slot_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for slot_id, count in self.lineup_slot_counts.items():
            try:
                name = LINEUP_SLOT_NAMES.get(int(slot_id))
            except ValueError:
                name = slot_id
            if name is not None:
                counts[name] = counts.get(name, 0) + int(count)
        known = set(LINEUP_SLOT_NAMES.values())
        for key, value in (self.model_extra or {}).items():
            if key in known and isinstance(value, int) and not isinstance(value, bool):
                counts.setdefault(key, value)
        return counts


class ScheduleSettingsPayload(_Payload):
    matchup_period_count: int | None = None
    playoff_team_count: int | None = None


class DraftSettingsPayload(_Payload):
    date: int | None = None
    type: str | None = None
    pick_order: list[int] = Field(default_factory=list)


class ModernSettingsPayload(_Payload):
    name: str | None = None
    size: int | None = None
    scoring_settings: ScoringSettingsPayload = Field(default_factory=ScoringSettingsPayload)
    roster_settings: RosterSettingsPayload = Field(default_factory=RosterSettingsPayload)
    schedule_settings: ScheduleSettingsPayload = Field(default_factory=ScheduleSettingsPayload)
    draft_settings: DraftSettingsPayload = Field(default_factory=DraftSettingsPayload)


class DraftPickPayload(_Payload):
    overall_pick_number: int
    round_id: int
    round_pick_number: int
    team_id: int
    player_id: int | None = None
    bid_amount: float | None = None
    keeper: bool = False


class DraftDetailPayload(_Payload):
    complete_date: int | None = None
    picks: list[DraftPickPayload] = Field(default_factory=list)


class ModernLeaguePayload(_Payload):
    id: int | None = None
    season_id: int | None = None
    teams: list[ModernTeamPayload] = Field(default_factory=list)
    members: list[MemberPayload] = Field(default_factory=list)
    schedule: list[ModernMatchupPayload] = Field(default_factory=list)
    status: ModernStatusPayload = Field(default_factory=ModernStatusPayload)
    settings: ModernSettingsPayload = Field(default_factory=ModernSettingsPayload)
    draft_detail: DraftDetailPayload = Field(default_factory=DraftDetailPayload)


# -----------------------------
# Legacy (before cutoff year)
# -----------------------------


class LegacyTeamPayload(_Payload):
    team_id: int | None = Field(default=None, validation_alias=AliasChoices("teamId", "id"))
    team_name: str | None = Field(default=None, validation_alias=AliasChoices("teamName", "name"))
    team_abbrev: str | None = Field(
        default=None, validation_alias=AliasChoices("teamAbbrev", "abbrev")
    )
    location: str | None = None
    nickname: str | None = None
    owner_name: str | None = None
    owners: list[str | dict[str, Any]] = Field(default_factory=list)
    wins: int = 0
    losses: int = 0
    ties: int = 0
    win_pct: float | None = None
    points_for: float = Field(default=0.0, validation_alias=AliasChoices("pointsFor", "points"))
    points_against: float = 0.0
    high_score: float | None = None
    low_score: float | None = None
    rank_calculated_final: int | None = None
    playoff_seed: int | None = None
    overall_standing: int | None = None
    streak_type: str | None = None
    streak_length: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_nested_record(cls, data: Any) -> Any:
        # Some history exports nest the flat counters under record.overall.
        if not isinstance(data, dict):
            return data
        record = data.get("record")
        overall = record.get("overall") if isinstance(record, dict) else None
        if not isinstance(overall, dict):
            return data
        lifted = dict(data)
        for src, dst in (
            ("wins", "wins"),
            ("losses", "losses"),
            ("ties", "ties"),
            ("percentage", "winPct"),
            ("pointsFor", "pointsFor"),
            ("pointsAgainst", "pointsAgainst"),
            ("streakType", "streakType"),
            ("streakLength", "streakLength"),
        ):
            if dst not in lifted and overall.get(src) is not None:
                lifted[dst] = overall[src]
        return lifted


class LegacyMatchupPayload(_Payload):
    week: int = Field(validation_alias=AliasChoices("week", "matchupPeriodId"))
    home_team_id: int
    home_score: float | None = None
    away_team_id: int | None = None
    away_score: float | None = None
    is_playoff: bool = False
    is_winners_bracket: bool = False

    @model_validator(mode="before")
    @classmethod
    def _flatten_sides(cls, data: Any) -> Any:
        # Accept the nested {"home": {"teamId", "totalPoints"}} form as well.
        if not isinstance(data, dict) or "homeTeamId" in data:
            return data
        flat = dict(data)
        for side in ("home", "away"):
            obj = data.get(side)
            if isinstance(obj, dict):
                flat[f"{side}TeamId"] = obj.get("teamId")
                flat[f"{side}Score"] = obj.get("totalPoints")
        tier = data.get("playoffTierType")
        if isinstance(tier, str) and tier != "NONE":
            flat.setdefault("isPlayoff", True)
            flat.setdefault("isWinnersBracket", tier == "WINNERS_BRACKET")
        return flat


class LegacyLeaguePayload(_Payload):
    teams: list[LegacyTeamPayload] = Field(
        default_factory=list, validation_alias=AliasChoices("teams", "leagueTeams")
    )
    schedule: list[LegacyMatchupPayload] = Field(
        default_factory=list, validation_alias=AliasChoices("schedule", "scoreboard")
    )
    members: list[MemberPayload] = Field(default_factory=list)
