from __future__ import annotations

import pytest

from espn_payloads import make_settings, modern_league, modern_matchup, modern_team
from fantasy_history.domain.enums import (
    ApiVersionEnum,
    DraftTypeEnum,
    ScoringFormatEnum,
    StreakTypeEnum,
)
from fantasy_history.ingestion.providers.base.errors import ProviderMappingError
from fantasy_history.ingestion.providers.espn.adapters.modern import (
    ModernSeasonAdapter,
    detect_scoring_format,
)


def _adapter() -> ModernSeasonAdapter:
    return ModernSeasonAdapter(config=make_settings())


def test_detect_scoring_format_from_reception_weight() -> None:
    assert detect_scoring_format(1) == ScoringFormatEnum.PPR
    assert detect_scoring_format(1.0) == ScoringFormatEnum.PPR
    assert detect_scoring_format(0.5) == ScoringFormatEnum.HALF_PPR
    assert detect_scoring_format(0) == ScoringFormatEnum.STANDARD
    assert detect_scoring_format(0.25) == ScoringFormatEnum.CUSTOM
    assert detect_scoring_format(None) == ScoringFormatEnum.CUSTOM


def test_modern_adapter_maps_league_settings() -> None:
    payload = modern_league(
        2021,
        [modern_team(1, points_for=1500.0), modern_team(2, points_for=1400.0)],
        reception_points=0.5,
        playoff_team_count=6,
        matchup_period_count=14,
        final_scoring_period=17,
    )

    season = _adapter().adapt(payload, 2021)

    settings = season.league_settings
    assert season.season_id == 2021
    assert season.api_version == ApiVersionEnum.MODERN
    assert settings.team_count == 2
    assert settings.scoring_format == ScoringFormatEnum.HALF_PPR
    assert settings.playoff_format.team_count == 6
    # Playoffs start the week after the regular season: weeks 15, 16 and 17.
    assert settings.playoff_format.week_count == 3
    assert settings.roster_slot_counts["QB"] == 1
    assert settings.roster_slot_counts["FLEX"] == 1
    assert settings.roster_slot_counts["IR"] == 1
    assert "moveLimit" not in settings.roster_slot_counts


def test_modern_adapter_floors_playoff_week_count_at_one() -> None:
    payload = modern_league(
        2022,
        [modern_team(1, points_for=100.0)],
        matchup_period_count=14,
        final_scoring_period=14,
    )

    season = _adapter().adapt(payload, 2022)

    assert season.league_settings.playoff_format.week_count == 1


def test_modern_adapter_reads_reception_weight_from_stat_id_key() -> None:
    payload = modern_league(2019, [modern_team(1, points_for=100.0)], reception_points=None)
    payload["settings"]["scoringSettings"]["53"] = 0

    season = _adapter().adapt(payload, 2019)

    assert season.league_settings.scoring_format == ScoringFormatEnum.STANDARD


def test_modern_adapter_uses_explicit_final_rank() -> None:
    payload = modern_league(
        2021,
        [
            modern_team(1, points_for=1500.0, rank=3),
            modern_team(2, points_for=1200.0, rank=1),
            modern_team(3, points_for=1400.0, rank=2),
        ],
    )

    season = _adapter().adapt(payload, 2021)

    assert [s.team_id for s in season.final_standings] == [2, 3, 1]
    assert [s.final_rank for s in season.final_standings] == [1, 2, 3]
    assert season.playoff_results.champion == 2
    assert season.playoff_results.runner_up == 3
    assert season.playoff_results.third_place == 1


def test_modern_adapter_breaks_duplicate_explicit_ranks_by_points() -> None:
    payload = modern_league(
        2021,
        [
            modern_team(1, points_for=1200.0, rank=1),
            modern_team(2, points_for=1500.0, rank=1),
            modern_team(3, points_for=1400.0, rank=3),
        ],
    )

    season = _adapter().adapt(payload, 2021)

    assert [s.team_id for s in season.final_standings] == [2, 1, 3]
    assert [s.final_rank for s in season.final_standings] == [1, 2, 3]


def test_modern_adapter_ranks_by_points_without_explicit_rank() -> None:
    payload = modern_league(
        2021,
        [
            modern_team(1, points_for=1300.0),
            modern_team(2, points_for=1500.0),
            modern_team(3, points_for=1300.0),
            modern_team(4, points_for=1450.0),
        ],
    )

    season = _adapter().adapt(payload, 2021)

    ranks = [s.final_rank for s in season.final_standings]
    assert sorted(ranks) == list(range(1, season.league_settings.team_count + 1))
    assert ranks == [1, 2, 3, 4]
    # Equal points keep payload order.
    assert [s.team_id for s in season.final_standings] == [2, 4, 1, 3]


def test_modern_adapter_resolves_owner_names_through_members() -> None:
    payload = modern_league(
        2021,
        [
            modern_team(1, points_for=10.0, owners=["{A}"]),
            modern_team(2, points_for=5.0, owners=["{B}", "{C}"]),
        ],
        members=[
            {"id": "{A}", "displayName": "commish"},
            {"id": "{B}", "firstName": "Pat", "lastName": "Jones"},
        ],
    )

    season = _adapter().adapt(payload, 2021)

    assert season.final_standings[0].owner_names == ("commish",)
    assert season.final_standings[1].owner_names == ("Pat Jones", "{C}")


def test_modern_adapter_derives_schedule_data() -> None:
    teams = [
        modern_team(1, wins=2, losses=0, points_for=250.0, rank=1),
        modern_team(2, wins=1, losses=1, points_for=230.0, rank=2),
        modern_team(3, wins=1, losses=1, points_for=200.0, rank=3),
        modern_team(4, wins=0, losses=2, points_for=180.0, rank=4),
    ]
    schedule = [
        modern_matchup(1, 1, 130.0, 2, 100.0),
        modern_matchup(1, 3, 110.0, 4, 90.0),
        modern_matchup(2, 1, 120.0, 3, 90.0),
        modern_matchup(2, 2, 130.0, 4, 90.0),
        modern_matchup(15, 1, 140.0, 2, 120.0, tier="WINNERS_BRACKET"),
        {"matchupPeriodId": 16, "home": {"teamId": 1}, "winner": "UNDECIDED"},
    ]
    payload = modern_league(2021, teams, schedule=schedule, playoff_team_count=2)

    season = _adapter().adapt(payload, 2021)

    champ = season.standing_for(1)
    assert champ is not None
    assert champ.weekly_scores == {1: 130.0, 2: 120.0, 15: 140.0}
    assert champ.highest_score == 140.0
    assert champ.lowest_score == 120.0
    assert champ.longest_win_streak == 2
    assert champ.longest_loss_streak == 0
    assert champ.playoff_record.wins == 1
    assert champ.points_per_game == 125.0

    records = season.season_stats.season_records
    assert records.highest_score is not None
    assert (records.highest_score.team_id, records.highest_score.week) == (1, 15)
    assert records.biggest_blowout is not None
    assert (records.biggest_blowout.team_id, records.biggest_blowout.value) == (2, 40.0)
    assert records.closest_game is not None
    assert records.closest_game.value == 20.0

    bracket = season.playoff_results.bracket
    assert [r.week for r in bracket] == [15]
    assert bracket[0].matchups[0].winner_team_id == 1
    assert season.playoff_results.consolation_winner == 3


def test_modern_adapter_leaves_schedule_fields_absent_without_schedule() -> None:
    payload = modern_league(2021, [modern_team(1, wins=8, losses=6, points_for=1500.0)])

    season = _adapter().adapt(payload, 2021)

    standing = season.final_standings[0]
    assert standing.weekly_scores == {}
    assert standing.highest_score is None
    assert standing.lowest_score is None
    assert standing.strength_of_schedule is None
    assert standing.longest_win_streak is None
    assert standing.regular_season_record.streak.type == StreakTypeEnum.WIN
    assert season.season_stats.season_records.biggest_blowout is None
    assert season.playoff_results.bracket == ()


def test_modern_adapter_maps_draft_info() -> None:
    payload = modern_league(2021, [modern_team(1, points_for=10.0), modern_team(2, points_for=5.0)])
    payload["settings"]["draftSettings"] = {
        "date": 1630000000000,
        "type": "AUCTION",
        "pickOrder": [2, 1],
    }
    payload["draftDetail"] = {
        "drafted": True,
        "picks": [
            {"overallPickNumber": 2, "roundId": 1, "roundPickNumber": 2, "teamId": 1},
            {
                "overallPickNumber": 1,
                "roundId": 1,
                "roundPickNumber": 1,
                "teamId": 2,
                "playerId": 3139477,
                "bidAmount": 61,
            },
        ],
    }

    draft = _adapter().adapt(payload, 2021).draft_info

    assert draft.draft_type == DraftTypeEnum.AUCTION
    assert draft.draft_date == 1630000000000
    assert draft.draft_order == (2, 1)
    assert [p.overall_pick for p in draft.draft_picks] == [1, 2]
    assert draft.draft_picks[0].bid_amount == 61


def test_modern_adapter_rejects_malformed_payloads() -> None:
    with pytest.raises(ProviderMappingError):
        _adapter().adapt([], 2021)
    with pytest.raises(ProviderMappingError):
        _adapter().adapt({"teams": "not-a-list"}, 2021)
    with pytest.raises(ProviderMappingError, match="no teams"):
        _adapter().adapt(modern_league(2021, []), 2021)
    with pytest.raises(ProviderMappingError, match="Duplicate team id"):
        _adapter().adapt(modern_league(2021, [modern_team(1), modern_team(1)]), 2021)
