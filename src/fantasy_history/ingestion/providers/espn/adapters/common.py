"""
Season derivations shared by both ESPN adapters.

Adapters reduce their payload to `TeamSeed`s and completed `GameResult`s; everything
else on a Season (standings, statistics, playoff results, highlights) is derived
here from those two lists. Values the payload cannot support are left absent
rather than estimated.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from fantasy_history.domain.enums import ApiVersionEnum, HighlightTypeEnum, StreakTypeEnum
from fantasy_history.domain.season import (
    DraftInfo,
    Highlight,
    LeagueAverages,
    LeagueSettings,
    PlayoffMatchup,
    PlayoffResults,
    PlayoffRound,
    Season,
    SeasonRecord,
    SeasonRecords,
    SeasonStatistics,
    Streak,
    TeamRecord,
    TeamStanding,
)
from fantasy_history.ingestion.providers.base.errors import ProviderMappingError

UPSET_WIN_PCT_GAP = 0.2
STREAK_HIGHLIGHT_MIN = 4


@dataclass(frozen=True)
class TeamSeed:
    """One team as reported by the payload, before schedule-derived fields."""

    team_id: int
    team_name: str
    owner_names: tuple[str, ...]
    explicit_rank: int | None
    regular_season_record: TeamRecord
    total_points: float
    highest_score: float | None = None
    lowest_score: float | None = None


@dataclass(frozen=True)
class GameResult:
    """A completed head-to-head game (byes and undecided games are never represented)."""

    week: int
    home_team_id: int
    home_points: float
    away_team_id: int
    away_points: float
    is_playoff: bool = False
    is_winners_bracket: bool = False

    @property
    def margin(self) -> float:
        return abs(self.home_points - self.away_points)

    @property
    def winner_team_id(self) -> int | None:
        if self.home_points > self.away_points:
            return self.home_team_id
        if self.away_points > self.home_points:
            return self.away_team_id
        return None

    @property
    def loser_team_id(self) -> int | None:
        winner = self.winner_team_id
        if winner is None:
            return None
        return self.away_team_id if winner == self.home_team_id else self.home_team_id

    @property
    def winning_points(self) -> float:
        return max(self.home_points, self.away_points)


@dataclass(frozen=True)
class _TeamGame:
    week: int
    points_for: float
    points_against: float
    opponent_id: int
    is_playoff: bool


# -----------------------------
# Records and streaks
# -----------------------------


def parse_streak_type(value: str | None) -> StreakTypeEnum:
    if value:
        try:
            return StreakTypeEnum(value.upper())
        except ValueError:
            pass
    return StreakTypeEnum.WIN


def win_percentage(wins: int, losses: int, ties: int) -> float:
    games = wins + losses + ties
    if games == 0:
        return 0.0
    return (wins + 0.5 * ties) / games


def _result_of(game: _TeamGame) -> StreakTypeEnum:
    if game.points_for > game.points_against:
        return StreakTypeEnum.WIN
    if game.points_for < game.points_against:
        return StreakTypeEnum.LOSS
    return StreakTypeEnum.TIE


def record_from_games(games: Sequence[_TeamGame]) -> TeamRecord:
    if not games:
        return TeamRecord()

    results = [_result_of(g) for g in games]
    wins = results.count(StreakTypeEnum.WIN)
    losses = results.count(StreakTypeEnum.LOSS)
    ties = results.count(StreakTypeEnum.TIE)

    streak_type = results[-1]
    length = 0
    for r in reversed(results):
        if r != streak_type:
            break
        length += 1

    return TeamRecord(
        wins=wins,
        losses=losses,
        ties=ties,
        points_for=sum(g.points_for for g in games),
        points_against=sum(g.points_against for g in games),
        percentage=win_percentage(wins, losses, ties),
        streak=Streak(type=streak_type, length=length),
    )


def longest_streaks(games: Sequence[_TeamGame]) -> tuple[int, int]:
    """(longest win streak, longest loss streak); ties break both."""

    best_win = best_loss = run_win = run_loss = 0
    for game in games:
        result = _result_of(game)
        run_win = run_win + 1 if result == StreakTypeEnum.WIN else 0
        run_loss = run_loss + 1 if result == StreakTypeEnum.LOSS else 0
        best_win = max(best_win, run_win)
        best_loss = max(best_loss, run_loss)
    return best_win, best_loss


# -----------------------------
# Standings
# -----------------------------


def ensure_unique_team_ids(seeds: Sequence[TeamSeed], *, year: int) -> None:
    seen: set[int] = set()
    for seed in seeds:
        if seed.team_id in seen:
            raise ProviderMappingError(
                "Duplicate team id in season payload",
                context={"year": year, "team_id": seed.team_id},
            )
        seen.add(seed.team_id)


def rank_order(seeds: Sequence[TeamSeed]) -> list[TeamSeed]:
    """
    Strict finishing order.

    Teams with an explicit upstream rank come first in rank order; teams without
    one follow by total points descending. Points are the only tiebreak: equal
    points keep input order.
    """

    return sorted(
        seeds,
        key=lambda s: (
            s.explicit_rank is None,
            s.explicit_rank if s.explicit_rank is not None else 0,
            -s.total_points,
        ),
    )


def _game_logs(games: Iterable[GameResult]) -> dict[int, list[_TeamGame]]:
    logs: dict[int, list[_TeamGame]] = defaultdict(list)
    for g in games:
        logs[g.home_team_id].append(
            _TeamGame(g.week, g.home_points, g.away_points, g.away_team_id, g.is_playoff)
        )
        logs[g.away_team_id].append(
            _TeamGame(g.week, g.away_points, g.home_points, g.home_team_id, g.is_playoff)
        )
    for log in logs.values():
        log.sort(key=lambda tg: tg.week)
    return logs


def _strength_of_schedule(
    regular: Sequence[_TeamGame], win_pct_by_team: dict[int, float]
) -> float | None:
    known = [win_pct_by_team[g.opponent_id] for g in regular if g.opponent_id in win_pct_by_team]
    if not known:
        return None
    return sum(known) / len(known)


def build_standings(
    seeds: Sequence[TeamSeed], games: Sequence[GameResult]
) -> tuple[TeamStanding, ...]:
    logs = _game_logs(games)

    regular_records: dict[int, TeamRecord] = {}
    for seed in seeds:
        record = seed.regular_season_record
        regular = [g for g in logs.get(seed.team_id, []) if not g.is_playoff]
        if record.games_played == 0 and regular:
            record = record_from_games(regular)
        regular_records[seed.team_id] = record

    win_pct = {team_id: r.percentage for team_id, r in regular_records.items()}

    standings: list[TeamStanding] = []
    for rank, seed in enumerate(rank_order(seeds), start=1):
        log = logs.get(seed.team_id, [])
        regular = [g for g in log if not g.is_playoff]
        playoff = [g for g in log if g.is_playoff]
        record = regular_records[seed.team_id]

        weekly_scores = {g.week: g.points_for for g in log}
        highest = max(weekly_scores.values()) if weekly_scores else seed.highest_score
        lowest = min(weekly_scores.values()) if weekly_scores else seed.lowest_score

        total_points = seed.total_points
        if total_points == 0.0 and regular:
            total_points = sum(g.points_for for g in regular)
        games_played = record.games_played
        ppg = total_points / games_played if games_played else 0.0

        longest_win: int | None = None
        longest_loss: int | None = None
        if regular:
            longest_win, longest_loss = longest_streaks(regular)

        standings.append(
            TeamStanding(
                team_id=seed.team_id,
                team_name=seed.team_name,
                owner_names=seed.owner_names,
                final_rank=rank,
                regular_season_record=record,
                playoff_record=record_from_games(playoff),
                total_points=total_points,
                points_per_game=ppg,
                highest_score=highest,
                lowest_score=lowest,
                weekly_scores=weekly_scores,
                strength_of_schedule=_strength_of_schedule(regular, win_pct),
                longest_win_streak=longest_win,
                longest_loss_streak=longest_loss,
            )
        )

    return tuple(standings)


# -----------------------------
# Season statistics
# -----------------------------


def _max_by(items: Iterable[SeasonRecord], *, lowest: bool = False) -> SeasonRecord | None:
    best: SeasonRecord | None = None
    for item in items:
        if best is None or (item.value < best.value if lowest else item.value > best.value):
            best = item
    return best


def season_statistics(
    standings: Sequence[TeamStanding], games: Sequence[GameResult]
) -> SeasonStatistics:
    team_scores = [
        SeasonRecord(team_id=team_id, value=points, week=g.week)
        for g in games
        for team_id, points in ((g.home_team_id, g.home_points), (g.away_team_id, g.away_points))
    ]
    decided = [g for g in games if g.winner_team_id is not None]

    if team_scores:
        ppg = sum(s.value for s in team_scores) / len(team_scores)
    else:
        total_games = sum(s.regular_season_record.games_played for s in standings)
        ppg = sum(s.total_points for s in standings) / total_games if total_games else 0.0

    averages = LeagueAverages(
        points_per_game=ppg,
        winning_score=(
            sum(g.winning_points for g in decided) / len(decided) if decided else None
        ),
        blowout_margin=sum(g.margin for g in decided) / len(decided) if decided else None,
    )

    if team_scores:
        highest = _max_by(team_scores)
        lowest = _max_by(team_scores, lowest=True)
    else:
        highest = _max_by(
            SeasonRecord(s.team_id, s.highest_score) for s in standings if s.highest_score
        )
        lowest = _max_by(
            (SeasonRecord(s.team_id, s.lowest_score) for s in standings if s.lowest_score),
            lowest=True,
        )

    def game_record(g: GameResult) -> SeasonRecord:
        team_id = g.winner_team_id if g.winner_team_id is not None else g.home_team_id
        return SeasonRecord(team_id=team_id, value=g.margin, week=g.week)

    records = SeasonRecords(
        highest_score=highest,
        lowest_score=lowest,
        most_points_for=_max_by(SeasonRecord(s.team_id, s.total_points) for s in standings),
        most_points_against=_max_by(
            SeasonRecord(s.team_id, s.regular_season_record.points_against) for s in standings
        ),
        best_record=_max_by(
            SeasonRecord(s.team_id, s.regular_season_record.wins) for s in standings
        ),
        worst_record=_max_by(
            (SeasonRecord(s.team_id, s.regular_season_record.wins) for s in standings),
            lowest=True,
        ),
        biggest_blowout=_max_by(game_record(g) for g in decided),
        closest_game=_max_by((game_record(g) for g in games), lowest=True),
    )

    return SeasonStatistics(league_averages=averages, season_records=records)


# -----------------------------
# Playoffs
# -----------------------------


def playoff_results(
    standings: Sequence[TeamStanding],
    games: Sequence[GameResult],
    *,
    playoff_team_count: int,
) -> PlayoffResults:
    by_rank = {s.final_rank: s.team_id for s in standings}

    rounds: dict[int, list[PlayoffMatchup]] = defaultdict(list)
    for g in games:
        if not g.is_winners_bracket:
            continue
        rounds[g.week].append(
            PlayoffMatchup(
                home_team_id=g.home_team_id,
                away_team_id=g.away_team_id,
                home_points=g.home_points,
                away_points=g.away_points,
                winner_team_id=g.winner_team_id,
            )
        )

    return PlayoffResults(
        champion=by_rank[1],
        runner_up=by_rank.get(2),
        third_place=by_rank.get(3),
        consolation_winner=by_rank.get(playoff_team_count + 1),
        bracket=tuple(PlayoffRound(week=w, matchups=tuple(rounds[w])) for w in sorted(rounds)),
    )


# -----------------------------
# Highlights
# -----------------------------


def season_highlights(
    year: int,
    standings: Sequence[TeamStanding],
    stats: SeasonStatistics,
    games: Sequence[GameResult],
    playoffs: PlayoffResults,
) -> tuple[Highlight, ...]:
    """Heuristic, descriptive highlights; not an authoritative record book."""

    names = {s.team_id: s.team_name for s in standings}
    pct = {s.team_id: s.regular_season_record.percentage for s in standings}
    highlights: list[Highlight] = []

    high = stats.season_records.highest_score
    if high is not None and high.week is not None:
        highlights.append(
            Highlight(
                id=f"{year}-season-high",
                type=HighlightTypeEnum.RECORD,
                week=high.week,
                title="Season High Score",
                description=f"{names[high.team_id]} scored {high.value:.2f} in week {high.week}.",
                teams_involved=(high.team_id,),
                significance=8,
            )
        )

    blowout = stats.season_records.biggest_blowout
    if blowout is not None:
        highlights.append(
            Highlight(
                id=f"{year}-biggest-blowout",
                type=HighlightTypeEnum.RECORD,
                week=blowout.week,
                title="Biggest Blowout",
                description=(
                    f"{names[blowout.team_id]} won by {blowout.value:.2f} in week {blowout.week}."
                ),
                teams_involved=(blowout.team_id,),
                significance=6,
            )
        )

    streaker = max(standings, key=lambda s: s.longest_win_streak or 0)
    if (streaker.longest_win_streak or 0) >= STREAK_HIGHLIGHT_MIN:
        highlights.append(
            Highlight(
                id=f"{year}-win-streak",
                type=HighlightTypeEnum.STREAK,
                title="Longest Win Streak",
                description=(
                    f"{streaker.team_name} won {streaker.longest_win_streak} straight games."
                ),
                teams_involved=(streaker.team_id,),
                significance=7,
            )
        )

    for g in games:
        winner, loser = g.winner_team_id, g.loser_team_id
        if not g.is_winners_bracket or winner is None or loser is None:
            continue
        if pct.get(loser, 0.0) - pct.get(winner, 0.0) >= UPSET_WIN_PCT_GAP:
            highlights.append(
                Highlight(
                    id=f"{year}-upset-w{g.week}-{winner}",
                    type=HighlightTypeEnum.UPSET,
                    week=g.week,
                    title="Playoff Upset",
                    description=(
                        f"{names.get(winner, winner)} knocked off {names.get(loser, loser)}."
                    ),
                    teams_involved=(winner, loser),
                    significance=6,
                )
            )

    highlights.append(
        Highlight(
            id=f"{year}-champion",
            type=HighlightTypeEnum.MILESTONE,
            title=f"{year} Champion",
            description=f"{names[playoffs.champion]} finished first in {year}.",
            teams_involved=(playoffs.champion,),
            significance=10,
        )
    )

    return tuple(highlights)


# -----------------------------
# Assembly
# -----------------------------


def assemble_season(
    *,
    year: int,
    api_version: ApiVersionEnum,
    league_settings: LeagueSettings,
    seeds: Sequence[TeamSeed],
    games: Sequence[GameResult],
    draft_info: DraftInfo,
) -> Season:
    if not seeds:
        raise ProviderMappingError("Season payload carries no teams", context={"year": year})
    ensure_unique_team_ids(seeds, year=year)

    known = {s.team_id for s in seeds}
    games = [g for g in games if g.home_team_id in known and g.away_team_id in known]

    standings = build_standings(seeds, games)
    stats = season_statistics(standings, games)
    playoffs = playoff_results(
        standings, games, playoff_team_count=league_settings.playoff_format.team_count
    )

    return Season(
        season_id=year,
        league_settings=league_settings,
        final_standings=standings,
        season_stats=stats,
        highlights=season_highlights(year, standings, stats, games, playoffs),
        playoff_results=playoffs,
        draft_info=draft_info,
        api_version=api_version,
    )
