from __future__ import annotations

import logging

import typer

from fantasy_history.cli.history import app as history_app
from fantasy_history.core.config import settings

app = typer.Typer(no_args_is_help=True)
app.add_typer(history_app, name="history")


@app.callback()
def main(
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Logging level (e.g. DEBUG, INFO, WARNING)."
    ),
) -> None:
    """Fantasy league history: fetch, normalize and aggregate past seasons."""

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
