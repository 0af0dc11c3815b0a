"""Collapse duplicate player rows that share a canonical key."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from draftvalue.identity.keys import has_diacritics
from draftvalue.models import Anchors, PlayerRecord


logger = logging.getLogger(__name__)


def _anchor_magnitude(record: PlayerRecord) -> float:
    anchors = record.anchors
    for value in (anchors.projection, anchors.prior_year):
        if value is not None and value > 0:
            return value
    return 0.0


def _fingerprint(record: PlayerRecord) -> Tuple[str, ...]:
    anchors = record.anchors
    return (
        record.display_name,
        record.role,
        record.team,
        ",".join(sorted(record.positions)),
        repr(sorted(record.category_stats.items())),
        repr((anchors.projection, anchors.market, anchors.prior_year, anchors.shadow)),
        "|".join(record.flags),
        repr(record.draftable),
        repr(record.tier),
        record.source,
    )


def _rank(record: PlayerRecord) -> Tuple[object, ...]:
    """Total order used to pick the surviving row; larger wins.

    The trailing fingerprint only breaks exact ties so the choice never
    depends on input order.
    """

    return (
        _anchor_magnitude(record),
        len(record.category_stats),
        1 if has_diacritics(record.display_name) else 0,
        1 if record.draftable is True else 0,
        _fingerprint(record),
    )


def _backfill(winner: PlayerRecord, donors: Sequence[PlayerRecord]) -> PlayerRecord:
    anchors = winner.anchors.model_dump()
    stats = dict(winner.category_stats)
    team = winner.team
    positions = winner.positions
    flags = winner.flags
    draftable = winner.draftable
    tier = winner.tier

    for donor in donors:
        for name, value in donor.anchors.model_dump().items():
            if anchors.get(name) is None and value is not None:
                anchors[name] = value
        for category, value in donor.category_stats.items():
            stats.setdefault(category, value)
        if not team and donor.team:
            team = donor.team
        if not positions and donor.positions:
            positions = donor.positions
        if not flags and donor.flags:
            flags = donor.flags
        if draftable is None and donor.draftable is not None:
            draftable = donor.draftable
        if tier is None and donor.tier is not None:
            tier = donor.tier

    return winner.model_copy(
        update={
            "anchors": Anchors(**anchors),
            "category_stats": stats,
            "team": team,
            "positions": positions,
            "flags": flags,
            "draftable": draftable,
            "tier": tier,
        }
    )


def merge_group(records: Sequence[PlayerRecord]) -> PlayerRecord:
    """Pick the winning row for one key and backfill its gaps from the rest."""

    if not records:
        raise ValueError("merge_group requires at least one record")
    ranked = sorted(records, key=_rank, reverse=True)
    winner, donors = ranked[0], ranked[1:]
    if not donors:
        return winner
    return _backfill(winner, donors)


@dataclass(frozen=True)
class MergeReport:
    total_rows: int
    unique_players: int
    duplicate_keys: List[str] = field(default_factory=list)


def merge_records(records: Sequence[PlayerRecord]) -> Tuple[List[PlayerRecord], MergeReport]:
    """Deduplicate a pool so exactly one record exists per key.

    Output keeps the order in which each key first appeared.
    """

    groups: Dict[str, List[PlayerRecord]] = {}
    for record in records:
        groups.setdefault(record.key, []).append(record)

    merged: List[PlayerRecord] = []
    duplicates: List[str] = []
    for key, group in groups.items():
        if len(group) > 1:
            duplicates.append(key)
            logger.debug("Merging %d rows for %s", len(group), key)
        merged.append(merge_group(group))

    report = MergeReport(
        total_rows=len(records),
        unique_players=len(merged),
        duplicate_keys=duplicates,
    )
    if duplicates:
        logger.info(
            "Collapsed %d rows into %d players (%d duplicate keys)",
            report.total_rows,
            report.unique_players,
            len(duplicates),
        )
    return merged, report
