"""CSV export helpers for recommendation lists and the auction board."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from draftvalue.pool.budget import PricedTarget
from draftvalue.pool.scoring import ScoredPlayer


RECOMMENDATION_HEADERS: tuple[str, ...] = (
    "Key",
    "Name",
    "Team",
    "POS",
    "Base",
    "Price",
    "Adj",
    "Delta",
    "Edge",
    "Fit",
    "Need",
    "Score",
    "Hint",
)

TARGET_HEADERS: tuple[str, ...] = (
    "Key",
    "Name",
    "Type",
    "Tier",
    "Plan",
    "Max",
    "Base",
    "Delta",
    "Adj",
    "Notes",
)


def _dollars(value: float) -> str:
    return f"{value:.1f}"


def export_recommendations_to_csv(players: Sequence[ScoredPlayer]) -> str:
    """Render scored players in rank order as CSV text."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(RECOMMENDATION_HEADERS)
    for player in players:
        writer.writerow(
            [
                player.key,
                player.record.display_name,
                player.record.team,
                "/".join(sorted(player.record.positions)),
                _dollars(player.baseline_value),
                _dollars(player.price),
                _dollars(player.adjusted_price),
                _dollars(player.total_delta),
                _dollars(player.value_edge),
                _dollars(player.fit_norm),
                _dollars(player.need_boost),
                _dollars(player.score),
                player.eligible_slot_hint,
            ]
        )
    return buffer.getvalue()


def export_targets_to_csv(targets: Sequence[PricedTarget]) -> str:
    """Render priced auction targets as CSV text; adjusted prices honour hard max."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(TARGET_HEADERS)
    for item in targets:
        target = item.target
        writer.writerow(
            [
                target.key,
                target.name,
                "pit" if target.role == "pitcher" else "hit",
                target.tier,
                _dollars(target.plan),
                _dollars(target.hard_max),
                _dollars(item.pricing.baseline),
                _dollars(item.pricing.total_delta),
                _dollars(item.adjusted_price),
                target.notes,
            ]
        )
    return buffer.getvalue()


__all__ = [
    "RECOMMENDATION_HEADERS",
    "TARGET_HEADERS",
    "export_recommendations_to_csv",
    "export_targets_to_csv",
]
