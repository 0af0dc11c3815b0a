"""Pool-level strategy components: percentile-normalized category values."""

from __future__ import annotations

import logging
import math
from bisect import bisect_left
from typing import Dict, Iterable, List, Mapping, Sequence

from draftvalue.config.categories import HIT_CATEGORIES, LOWER_IS_BETTER, PIT_CATEGORIES, categories_for
from draftvalue.models import PlayerRecord


logger = logging.getLogger(__name__)

DEFAULT_MIN_SAMPLES = 25
_MIN_CATEGORIES_FOR_STATS = 2


def has_category_stats(records: Iterable[PlayerRecord]) -> bool:
    """True when any record carries at least two populated categories.

    Computed once per pool and passed to valuation and scoring explicitly.
    """

    for record in records:
        populated = sum(1 for category in categories_for(record.role) if category in record.category_stats)
        if populated >= _MIN_CATEGORIES_FOR_STATS:
            return True
    return False


def _percentile_rank(value: float, sorted_values: Sequence[float], *, lower_is_better: bool) -> float:
    n = len(sorted_values)
    if n <= 1:
        return 0.5
    # Tied values share the lowest index.
    rank = bisect_left(sorted_values, value) / (n - 1)
    return 1.0 - rank if lower_is_better else rank


def percentile_components(
    records: Sequence[PlayerRecord],
    *,
    min_samples: int = DEFAULT_MIN_SAMPLES,
) -> Dict[str, Dict[str, float]]:
    """Map each player key to ``{category: 0..1}`` percentile components.

    Each role is ranked only against its own members. Categories with fewer
    than ``min_samples`` finite values in a role are skipped; non-finite
    values count as absent.
    """

    components: Dict[str, Dict[str, float]] = {}
    for role, categories in (("hitter", HIT_CATEGORIES), ("pitcher", PIT_CATEGORIES)):
        members = [record for record in records if record.role == role]
        for category in categories:
            holders = [
                record
                for record in members
                if category in record.category_stats and math.isfinite(record.category_stats[category])
            ]
            if len(holders) < min_samples:
                if holders:
                    logger.debug(
                        "Skipping %s %s components: %d samples < %d",
                        role,
                        category,
                        len(holders),
                        min_samples,
                    )
                continue
            sorted_values: List[float] = sorted(record.category_stats[category] for record in holders)
            lower_is_better = category in LOWER_IS_BETTER
            for record in holders:
                components.setdefault(record.key, {})[category] = _percentile_rank(
                    record.category_stats[category],
                    sorted_values,
                    lower_is_better=lower_is_better,
                )
    return components


def apply_components(
    records: Sequence[PlayerRecord],
    components: Mapping[str, Mapping[str, float]],
) -> List[PlayerRecord]:
    """Return records whose category stats are replaced by their components.

    Categories without a component keep their raw value.
    """

    updated: List[PlayerRecord] = []
    for record in records:
        overlay = components.get(record.key)
        if not overlay:
            updated.append(record)
            continue
        stats = dict(record.category_stats)
        stats.update(overlay)
        updated.append(record.model_copy(update={"category_stats": stats}))
    return updated
