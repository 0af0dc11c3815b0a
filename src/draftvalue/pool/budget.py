"""Budget helpers for the auction board: bid power, planned spend and target summaries."""

from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Literal, Mapping, Sequence, Tuple, Union

from draftvalue.config_loader import ValueMode
from draftvalue.identity import normalize_name
from draftvalue.ingest.sources import parse_number, parse_positions
from draftvalue.models import PlayerRecord, RosterEntry, Target, TargetTier
from draftvalue.pool.player_pool import PlayerPool
from draftvalue.valuation import (
    DEFAULT_DELTA_CAP,
    DEFAULT_STRATEGY_CAP,
    PricingBreakdown,
    baseline_value,
    price_target,
)


SortKey = Literal["tier_plan_name", "plan_desc", "max_desc", "name_asc"]

_TIERS = ("A", "B", "C")
_QUICK_ADD_HEADROOM = 5.0


def _money(value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, number) if math.isfinite(number) else 0.0


@dataclass(frozen=True)
class BidPower:
    remaining: float
    slots_left: int
    reserve_required: float
    max_bid: int
    avg_per_slot: float


def auto_max_bid(
    budget_remaining: float,
    total_slots: int,
    filled: int,
    *,
    reserve_per_slot: float = 1.0,
) -> BidPower:
    """Largest bid that still leaves ``reserve_per_slot`` for every other open slot.

    At least one slot is always treated as open.
    """

    remaining = _money(budget_remaining)
    reserve = _money(reserve_per_slot)
    slots_left = max(1, int(total_slots) - int(filled))
    max_bid = max(0, math.floor(remaining - reserve * (slots_left - 1)))
    return BidPower(
        remaining=remaining,
        slots_left=slots_left,
        reserve_required=reserve * slots_left,
        max_bid=max_bid,
        avg_per_slot=remaining / slots_left,
    )


@dataclass(frozen=True)
class SpendBuckets:
    hit: float = 0.0
    sp: float = 0.0
    rp: float = 0.0

    @property
    def total(self) -> float:
        return self.hit + self.sp + self.rp

    def share(self, bucket: str) -> float:
        total = self.total
        if total <= 0:
            return 0.0
        return getattr(self, bucket) / total


def _bucket(role: str, positions: Union[str, Iterable[str]]) -> str:
    if role != "pitcher":
        return "hit"
    parsed = parse_positions(positions) if isinstance(positions, str) else frozenset(positions)
    return "sp" if "SP" in parsed else "rp"


def planned_spend(
    roster: Iterable[RosterEntry],
    targets: Iterable[Target] = (),
    *,
    pool: PlayerPool | None = None,
) -> SpendBuckets:
    """Contracted roster prices plus target plans, split into hitters, starters and relievers.

    Targets without their own position text borrow it from the pool when given.
    """

    totals: Dict[str, float] = {"hit": 0.0, "sp": 0.0, "rp": 0.0}
    for entry in roster:
        if not entry.under_contract:
            continue
        totals[_bucket(entry.role, entry.positions)] += _money(entry.price)
    for target in targets:
        positions: Union[str, Iterable[str]] = target.positions
        if not positions and pool is not None:
            record = _resolve(target, pool)
            if record is not None:
                positions = record.positions
        totals[_bucket(target.role, positions)] += _money(target.plan)
    return SpendBuckets(**totals)


def _tier_rank(tier: str) -> int:
    return _TIERS.index(tier) if tier in _TIERS else len(_TIERS) - 1


_SORTERS: Dict[SortKey, Callable[[Target], Tuple[object, ...]]] = {
    "tier_plan_name": lambda t: (_tier_rank(t.tier), -_money(t.plan), normalize_name(t.name)),
    "plan_desc": lambda t: (-_money(t.plan), _tier_rank(t.tier), normalize_name(t.name)),
    "max_desc": lambda t: (-_money(t.hard_max), _tier_rank(t.tier), normalize_name(t.name)),
    "name_asc": lambda t: (normalize_name(t.name), _tier_rank(t.tier)),
}


def sort_targets(targets: Sequence[Target], sort_key: SortKey | str = "tier_plan_name") -> List[Target]:
    """Order targets for the board; unknown sort keys fall back to tier, plan, name."""

    key = _SORTERS.get(sort_key, _SORTERS["tier_plan_name"])  # type: ignore[call-overload]
    return sorted(targets, key=key)


def tier_from_number(value: object) -> TargetTier | None:
    """Map a numeric source tier (1 best) onto A/B/C; non-numbers give None."""

    number = parse_number(value)
    if number is None:
        return None
    if number <= 1.5:
        return "A"
    if number <= 3.5:
        return "B"
    return "C"


def _dollars(value: float) -> str:
    return f"${math.floor(value + 0.5)}"


def _source_notes(record: PlayerRecord) -> str:
    value = _money(record.anchors.projection)
    shadow = _money(record.anchors.shadow)
    bits: List[str] = []
    if value > 0:
        bits.append(f"Val {_dollars(value)}")
    if shadow > 0:
        bits.append(f"Shad {_dollars(shadow)}")
    if record.draftable is not None:
        bits.append(f"Draftable {'yes' if record.draftable else 'no'}")
    if record.flags:
        bits.append(f"Flags: {', '.join(record.flags)}")
    return " • ".join(bits)


def target_from_record(
    record: PlayerRecord,
    *,
    existing: Target | None = None,
    quick_add: bool = False,
    mode: ValueMode | str = "projection",
) -> Target:
    """Build a board target for a pool player.

    Quick-add plans the rounded baseline with a max five dollars above it.
    Otherwise the plan is the projection anchor, the max is the shadow value
    (else the projection), the tier comes from the source's numeric tier and
    the notes summarize the source columns. Fields already set on
    ``existing`` are kept and new notes are appended once.
    """

    current = existing or Target()
    data = current.model_dump()
    data.update(
        key=record.key,
        name=current.name or record.display_name,
        role=record.role,
        positions=current.positions or ",".join(sorted(record.positions)),
    )

    if quick_add:
        plan = float(math.floor(baseline_value(record, mode) + 0.5))
        data.update(plan=plan, hard_max=plan + _QUICK_ADD_HEADROOM if plan > 0 else 0.0)
        return Target.model_validate(data)

    value = _money(record.anchors.projection)
    shadow = _money(record.anchors.shadow)
    if not current.plan and value:
        data["plan"] = value
    if not current.hard_max and (shadow or value):
        data["hard_max"] = shadow or value
    tier = tier_from_number(record.tier)
    if tier is not None:
        data["tier"] = tier

    extra = _source_notes(record)
    notes = current.notes.strip()
    if extra and extra not in notes:
        data["notes"] = f"{notes} | {extra}" if notes else extra
    return Target.model_validate(data)


@dataclass(frozen=True)
class PricedTarget:
    target: Target
    record: PlayerRecord | None
    pricing: PricingBreakdown

    @property
    def adjusted_price(self) -> float:
        """Adjusted price limited by the target's hard max."""

        return self.pricing.capped(self.target.hard_max)


def _resolve(target: Target, pool: PlayerPool) -> PlayerRecord | None:
    if target.key:
        record = pool.get(target.key)
        if record is not None:
            return record
    return pool.lookup(target.name, role=target.role) if target.name else None


def price_targets(
    targets: Iterable[Target],
    pool: PlayerPool,
    weights: Mapping[str, float],
    *,
    mode: ValueMode | str = "projection",
    strategy_cap: float = DEFAULT_STRATEGY_CAP,
    delta_cap: float = DEFAULT_DELTA_CAP,
) -> List[PricedTarget]:
    """Join each target to the pool by key, then by name, and price it."""

    priced: List[PricedTarget] = []
    for target in targets:
        record = _resolve(target, pool)
        pricing = price_target(
            target,
            record,
            weights,
            mode=mode,
            has_category_stats=pool.has_category_stats,
            strategy_cap=strategy_cap,
            delta_cap=delta_cap,
        )
        priced.append(PricedTarget(target=target, record=record, pricing=pricing))
    return priced


@dataclass
class TierTotals:
    count: int = 0
    hit: int = 0
    pit: int = 0
    plan: float = 0.0
    max: float = 0.0
    adj: float = 0.0

    def add(self, other: "TierTotals") -> None:
        self.count += other.count
        self.hit += other.hit
        self.pit += other.pit
        self.plan += other.plan
        self.max += other.max
        self.adj += other.adj


def tier_summary(items: Iterable[Union[Target, PricedTarget]]) -> "OrderedDict[str, TierTotals]":
    """Per-tier counts and dollar totals, plus a ``total`` row.

    Adjusted dollars are only counted for priced targets.
    """

    summary: "OrderedDict[str, TierTotals]" = OrderedDict((tier, TierTotals()) for tier in _TIERS)
    for item in items:
        if isinstance(item, PricedTarget):
            target, adjusted = item.target, item.adjusted_price
        else:
            target, adjusted = item, 0.0
        row = summary.get(target.tier)
        if row is None:
            continue
        row.count += 1
        if target.role == "pitcher":
            row.pit += 1
        else:
            row.hit += 1
        row.plan += _money(target.plan)
        row.max += _money(target.hard_max)
        row.adj += _money(adjusted)

    total = TierTotals()
    for tier in _TIERS:
        total.add(summary[tier])
    summary["total"] = total
    return summary


__all__ = [
    "BidPower",
    "PricedTarget",
    "SortKey",
    "SpendBuckets",
    "TierTotals",
    "auto_max_bid",
    "planned_spend",
    "price_targets",
    "sort_targets",
    "target_from_record",
    "tier_from_number",
    "tier_summary",
]
