from __future__ import annotations

from collections.abc import Sequence

from fantasy_history.domain.enums import RuleChangeCategoryEnum, RuleChangeImpactEnum
from fantasy_history.domain.history import LeagueEvolution, RuleChange
from fantasy_history.domain.season import Season


def _format_slots(slots: dict[str, int]) -> str:
    return ", ".join(f"{k} {v}" for k, v in sorted(slots.items()))


def detect_rule_changes(previous: Season, current: Season) -> list[RuleChange]:
    """
    Structural differences between two consecutive available seasons.

    Team count is always reported by the payload. Scoring, playoff field and
    roster slots are filled from configured defaults for legacy seasons, so they
    are only compared between seasons served by the same API version.
    """

    before, after = previous.league_settings, current.league_settings
    year = current.season_id
    changes: list[RuleChange] = []

    if before.team_count != after.team_count:
        changes.append(
            RuleChange(
                season_id=year,
                category=RuleChangeCategoryEnum.ROSTER,
                description=f"Changed team count from {before.team_count} to {after.team_count}",
                impact=RuleChangeImpactEnum.MAJOR,
            )
        )

    if previous.api_version != current.api_version:
        return changes

    if before.scoring_format != after.scoring_format:
        changes.append(
            RuleChange(
                season_id=year,
                category=RuleChangeCategoryEnum.SCORING,
                description=(
                    f"Changed scoring format from {before.scoring_format} "
                    f"to {after.scoring_format}"
                ),
                impact=RuleChangeImpactEnum.MAJOR,
            )
        )

    if before.playoff_format.team_count != after.playoff_format.team_count:
        changes.append(
            RuleChange(
                season_id=year,
                category=RuleChangeCategoryEnum.PLAYOFFS,
                description=(
                    f"Changed playoff field from {before.playoff_format.team_count} "
                    f"to {after.playoff_format.team_count} teams"
                ),
                impact=RuleChangeImpactEnum.MINOR,
            )
        )

    before_slots = dict(before.roster_slot_counts)
    after_slots = dict(after.roster_slot_counts)
    if before_slots != after_slots:
        changes.append(
            RuleChange(
                season_id=year,
                category=RuleChangeCategoryEnum.ROSTER,
                description=(
                    f"Changed roster slots from ({_format_slots(before_slots)}) "
                    f"to ({_format_slots(after_slots)})"
                ),
                impact=RuleChangeImpactEnum.MINOR,
            )
        )

    return changes


def build_league_evolution(seasons: Sequence[Season]) -> LeagueEvolution:
    ordered = sorted(seasons, key=lambda s: s.season_id)

    rule_changes: list[RuleChange] = []
    for previous, current in zip(ordered, ordered[1:]):
        rule_changes.extend(detect_rule_changes(previous, current))

    return LeagueEvolution(
        total_seasons=len(ordered),
        founded_year=ordered[0].season_id if ordered else None,
        team_count_history={s.season_id: s.league_settings.team_count for s in ordered},
        rule_changes=tuple(rule_changes),
        scoring_evolution={s.season_id: str(s.league_settings.scoring_format) for s in ordered},
    )
