from __future__ import annotations

import asyncio
from datetime import date

import typer
from pydantic import TypeAdapter

from fantasy_history.analytics.aggregator import SeasonAggregator
from fantasy_history.core.config import settings
from fantasy_history.domain.history import AggregateOutcome, SeasonFailure
from fantasy_history.domain.season import Season
from fantasy_history.ingestion.providers.espn.provider import default_adapter_registry
from fantasy_history.service import get_all_historical_seasons, get_season_data

app = typer.Typer(help="Fetch and aggregate league history from ESPN.")

_HEADLINE_RECORDS = (
    ("game", "highestScore"),
    ("game", "biggestBlowout"),
    ("season", "mostWins"),
    ("season", "mostPoints"),
    ("career", "mostChampionships"),
    ("career", "mostCareerPoints"),
)


def _echo_failure(failure: SeasonFailure) -> None:
    typer.echo(f"FAILED year={failure.year} kind={failure.kind} | {failure.reason}")


def _echo_summary(outcome: AggregateOutcome) -> None:
    years = ", ".join(str(s.season_id) for s in outcome.seasons) or "none"
    typer.echo(
        " ".join(
            [
                f"Loaded {len(outcome.seasons)} seasons ({years}):",
                f"failures={len(outcome.failures)}",
                f"teams={len(outcome.team_histories)}",
                f"rule_changes={len(outcome.league_evolution.rule_changes)}",
            ]
        )
    )
    for failure in outcome.failures:
        _echo_failure(failure)

    records = outcome.all_time_records
    groups = {
        "game": records.single_game_records,
        "season": records.season_records,
        "career": records.career_records,
    }
    for group, key in _HEADLINE_RECORDS:
        record = groups[group][key]
        if not record.has_data:
            typer.echo(f"{key}: no data")
            continue
        where = f"season={record.season_id}"
        if record.week is not None:
            where += f" week={record.week}"
        typer.echo(f"{key}: {record.team_name} ({record.value:.2f}) {where}")


@app.command("fetch")
def fetch_cmd(
    start_year: int = typer.Option(
        settings.history_start_year, "--start-year", help="First season to fetch (inclusive)."
    ),
    end_year: int | None = typer.Option(
        None, "--end-year", help="Last season to fetch (inclusive; default: current year)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full outcome as JSON."),
) -> None:
    """Fetch every season in a year span and print the aggregated history."""

    current_year = date.today().year
    outcome = asyncio.run(
        get_all_historical_seasons(
            start_year,
            end_year if end_year is not None else current_year,
            config=settings,
            current_year=current_year,
        )
    )

    if as_json:
        typer.echo(TypeAdapter(AggregateOutcome).dump_json(outcome, indent=2).decode())
        return
    _echo_summary(outcome)


@app.command("season")
def season_cmd(
    year: int = typer.Option(..., "--year", help="Season year (e.g. 2019)."),
) -> None:
    """Fetch and normalize a single season."""

    result = asyncio.run(get_season_data(year, config=settings))
    aggregator = SeasonAggregator(
        registry=default_adapter_registry(settings), current_year=date.today().year
    )
    adapted = aggregator.adapt(result)

    if isinstance(adapted, SeasonFailure):
        _echo_failure(adapted)
        raise typer.Exit(code=1)

    season: Season = adapted
    champion = season.standing_for(season.playoff_results.champion)
    typer.echo(
        " ".join(
            [
                f"Season {season.season_id} ({result.api_version}):",
                f"teams={season.league_settings.team_count}",
                f"scoring={season.league_settings.scoring_format}",
                f"playoff_teams={season.league_settings.playoff_format.team_count}",
                f"champion={champion.team_name if champion else season.playoff_results.champion}",
                f"complete={season.is_complete}",
            ]
        )
    )
    for standing in season.final_standings:
        r = standing.regular_season_record
        typer.echo(
            f"{standing.final_rank:>2}. {standing.team_name} "
            f"{r.wins}-{r.losses}-{r.ties} pf={standing.total_points:.2f}"
        )
