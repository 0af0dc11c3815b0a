"""Build a deduplicated, indexed player pool from one or more sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Tuple

from draftvalue.config_loader import EngineSettings
from draftvalue.identity import MergeReport, PlayerIndex, merge_records
from draftvalue.models import PlayerRecord
from draftvalue.valuation import DEFAULT_MIN_SAMPLES, has_category_stats, percentile_components


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerPool:
    records: Tuple[PlayerRecord, ...]
    has_category_stats: bool
    report: MergeReport
    components: Mapping[str, Mapping[str, float]] = field(default_factory=dict)
    index: PlayerIndex = field(default_factory=lambda: PlayerIndex(()))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def get(self, key: str) -> PlayerRecord | None:
        return self.index.get(key)

    def lookup(self, text: str | None, *, role: str | None = None) -> PlayerRecord | None:
        return self.index.lookup(text, role=role)


def build_pool(
    *tables: Iterable[PlayerRecord],
    with_components: bool = True,
    min_samples: int = DEFAULT_MIN_SAMPLES,
    settings: EngineSettings | None = None,
) -> PlayerPool:
    """Merge every source table into one pool, rebuilding everything from scratch.

    When ``settings`` is given its ``min_percentile_samples`` replaces ``min_samples``.
    """

    if settings is not None:
        min_samples = settings.min_percentile_samples

    rows: List[PlayerRecord] = []
    for table in tables:
        rows.extend(table)

    records, report = merge_records(rows)
    stats_flag = has_category_stats(records)
    components: Dict[str, Dict[str, float]] = {}
    if with_components and stats_flag:
        components = percentile_components(records, min_samples=min_samples)
    logger.debug(
        "Built pool of %d players (category stats=%s, component players=%d)",
        len(records),
        stats_flag,
        len(components),
    )
    return PlayerPool(
        records=tuple(records),
        has_category_stats=stats_flag,
        report=report,
        components=components,
        index=PlayerIndex(records),
    )
