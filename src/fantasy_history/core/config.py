from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ROSTER_SLOTS: dict[str, int] = {
    "QB": 1,
    "RB": 2,
    "WR": 2,
    "TE": 1,
    "FLEX": 1,
    "D/ST": 1,
    "K": 1,
    "BENCH": 6,
    "IR": 0,
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # espn
    espn_base_url: str = "https://lm-api-reads.fantasy.espn.com/apis/v3/games/ffl"
    league_id: str | None = Field(default=None, validation_alias="ESPN_LEAGUE_ID")
    espn_s2: str | None = Field(default=None, repr=False)
    espn_swid: str | None = Field(default=None, repr=False)

    modern_views: list[str] = [
        "mTeam",
        "mRoster",
        "mSchedule",
        "mSettings",
        "mStandings",
        "mDraftDetail",
    ]
    legacy_views: list[str] = [
        "mMatchup",
        "mTeam",
        "mStandings",
        "mRoster",
        "mSchedule",
        "mSettings",
        "mDraftDetail",
    ]

    http_timeout_s: float = 30.0
    http_connect_timeout_s: float = 10.0

    # Schema boundary: seasons before this year use the legacy endpoint/shape.
    api_cutoff_year: int = 2018

    # Batch pacing
    request_spacing_s: float = 0.5
    batch_timeout_s: float | None = None
    history_start_year: int = 2010

    # Adapter fallbacks
    legacy_playoff_team_count: int = 6
    legacy_playoff_week_count: int = 3
    legacy_bracket_kind: str = "single"
    default_roster_slots: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_ROSTER_SLOTS)
    )
    default_playoff_team_count: int = 6
    default_playoff_start_week: int = 15
    default_final_scoring_period: int = 17

    log_level: str = "INFO"

    # -----------------------------
    # Required-key helpers
    # -----------------------------

    def require_league_id(self) -> str:
        if not self.league_id:
            raise RuntimeError("ESPN_LEAGUE_ID is not set. Set it in the environment or .env file.")
        return self.league_id

    @property
    def has_credentials(self) -> bool:
        return bool(self.espn_s2 and self.espn_swid)


settings = Settings()
