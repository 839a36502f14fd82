from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from fantasy_history.domain.enums import StreakTypeEnum
from fantasy_history.domain.history import (
    CAREER_RECORD_KEYS,
    NO_DATA,
    SEASON_RECORD_KEYS,
    SINGLE_GAME_RECORD_KEYS,
    AllTimeRecords,
    HistoricalRecord,
)
from fantasy_history.domain.season import Season, SeasonRecord, TeamStanding


@dataclass
class _Holder:
    """Running best for one record slot; ties keep the earlier holder."""

    lowest: bool = False
    record: HistoricalRecord | None = None

    def offer(self, candidate: HistoricalRecord) -> None:
        if self.record is None:
            self.record = candidate
        elif self.lowest and candidate.value < self.record.value:
            self.record = candidate
        elif not self.lowest and candidate.value > self.record.value:
            self.record = candidate

    def resolve(self) -> HistoricalRecord:
        return self.record if self.record is not None else NO_DATA


@dataclass
class _Career:
    team_id: int
    team_name: str = ""
    last_season_id: int = 0
    seasons: int = 0
    championships: int = 0
    playoff_appearances: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points: float = 0.0

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    def record(self, value: float) -> HistoricalRecord:
        return HistoricalRecord(
            team_id=self.team_id,
            team_name=self.team_name,
            value=value,
            season_id=self.last_season_id,
            context=f"across {self.seasons} seasons",
        )


def _standing_record(
    season: Season, standing: TeamStanding, value: float, week: int | None = None
) -> HistoricalRecord:
    return HistoricalRecord(
        team_id=standing.team_id,
        team_name=standing.team_name,
        value=value,
        season_id=season.season_id,
        week=week,
    )


def _slot_record(season: Season, slot: SeasonRecord | None) -> HistoricalRecord | None:
    if slot is None:
        return None
    standing = season.standing_for(slot.team_id)
    name = standing.team_name if standing is not None else f"Team {slot.team_id}"
    return HistoricalRecord(
        team_id=slot.team_id,
        team_name=name,
        value=slot.value,
        season_id=season.season_id,
        week=slot.week,
    )


def _streak_length(standing: TeamStanding, streak_type: StreakTypeEnum) -> int | None:
    longest = (
        standing.longest_win_streak
        if streak_type == StreakTypeEnum.WIN
        else standing.longest_loss_streak
    )
    if longest is not None:
        return longest
    # Without a schedule only the end-of-season streak is known.
    streak = standing.regular_season_record.streak
    if streak.type == streak_type and streak.length > 0:
        return streak.length
    return None


def build_all_time_records(seasons: Sequence[Season]) -> AllTimeRecords:
    """
    Single pass over every season, oldest first.

    Game and season slots keep a running max/min holder. Career slots first fold
    each team's seasons into one running total keyed by team id.
    """

    game = {
        "highestScore": _Holder(),
        "lowestScore": _Holder(lowest=True),
        "biggestBlowout": _Holder(),
        "closestGame": _Holder(lowest=True),
    }
    season_slots = {
        "mostWins": _Holder(),
        "fewestWins": _Holder(lowest=True),
        "mostPoints": _Holder(),
        "fewestPoints": _Holder(lowest=True),
        "longestWinStreak": _Holder(),
        "longestLoseStreak": _Holder(),
    }
    careers: dict[int, _Career] = {}

    for season in sorted(seasons, key=lambda s: s.season_id):
        playoff_cutoff = season.league_settings.playoff_format.team_count
        slots = season.season_stats.season_records

        for key, slot in (
            ("biggestBlowout", slots.biggest_blowout),
            ("closestGame", slots.closest_game),
        ):
            record = _slot_record(season, slot)
            if record is not None:
                game[key].offer(record)

        for standing in season.final_standings:
            if standing.weekly_scores:
                for week, points in sorted(standing.weekly_scores.items()):
                    scored = _standing_record(season, standing, points, week)
                    game["highestScore"].offer(scored)
                    game["lowestScore"].offer(scored)
            else:
                if standing.highest_score is not None:
                    game["highestScore"].offer(
                        _standing_record(season, standing, standing.highest_score)
                    )
                if standing.lowest_score is not None:
                    game["lowestScore"].offer(
                        _standing_record(season, standing, standing.lowest_score)
                    )

            regular = standing.regular_season_record
            if regular.games_played > 0:
                wins = _standing_record(season, standing, regular.wins)
                season_slots["mostWins"].offer(wins)
                season_slots["fewestWins"].offer(wins)
            if standing.total_points > 0:
                points = _standing_record(season, standing, standing.total_points)
                season_slots["mostPoints"].offer(points)
                season_slots["fewestPoints"].offer(points)
            for key, streak_type in (
                ("longestWinStreak", StreakTypeEnum.WIN),
                ("longestLoseStreak", StreakTypeEnum.LOSS),
            ):
                length = _streak_length(standing, streak_type)
                if length is not None:
                    season_slots[key].offer(_standing_record(season, standing, length))

            career = careers.setdefault(standing.team_id, _Career(team_id=standing.team_id))
            career.team_name = standing.team_name
            career.last_season_id = season.season_id
            career.seasons += 1
            career.wins += regular.wins
            career.losses += regular.losses
            career.ties += regular.ties
            career.points += standing.total_points
            # An unfinished season has crowned nobody yet.
            if season.is_complete:
                if season.playoff_results.champion == standing.team_id:
                    career.championships += 1
                if standing.final_rank <= playoff_cutoff:
                    career.playoff_appearances += 1

    career_slots = {key: _Holder() for key in CAREER_RECORD_KEYS}
    for career in careers.values():
        if career.championships > 0:
            career_slots["mostChampionships"].offer(career.record(career.championships))
        if career.playoff_appearances > 0:
            career_slots["mostPlayoffAppearances"].offer(
                career.record(career.playoff_appearances)
            )
        if career.games > 0:
            pct = (career.wins + 0.5 * career.ties) / career.games
            career_slots["highestCareerWinPercentage"].offer(career.record(pct))
        if career.points > 0:
            career_slots["mostCareerPoints"].offer(career.record(career.points))

    return AllTimeRecords(
        single_game_records={k: game[k].resolve() for k in SINGLE_GAME_RECORD_KEYS},
        season_records={k: season_slots[k].resolve() for k in SEASON_RECORD_KEYS},
        career_records={k: career_slots[k].resolve() for k in CAREER_RECORD_KEYS},
    )
