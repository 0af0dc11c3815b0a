"""Score and rank recommended auction targets for a player pool."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from draftvalue.config.categories import categories_for, normalize_weights, weight_for
from draftvalue.config.roster import DEFAULT_LEAGUE, LeagueSlots, SlotBoosts
from draftvalue.config_loader import EngineSettings, ValueMode
from draftvalue.ingest.sources import parse_number
from draftvalue.models import PlayerRecord
from draftvalue.pool.eligibility import eligible_slots, need_boost, slot_hint
from draftvalue.pool.player_pool import PlayerPool
from draftvalue.valuation import (
    baseline_value,
    clamp,
    compute_adjusted_price,
    has_category_stats as detect_category_stats,
    market_estimate,
    projection_baseline,
    weighted_value,
)


@dataclass(frozen=True)
class ScoreCriteria:
    """Scoring configuration for one recommendation pass."""

    mode: ValueMode = "projection"
    max_price: float | None = None
    edge_cap: float = 15.0
    edge_weight: float = 0.9
    strategy_cap: float = 6.0
    delta_cap: float = 15.0
    league: Union[str, LeagueSlots] = DEFAULT_LEAGUE
    boosts: SlotBoosts = field(default_factory=SlotBoosts)
    stable_key_tiebreak: bool = False

    @classmethod
    def from_settings(cls, settings: EngineSettings, *, max_price: float | None = None) -> "ScoreCriteria":
        return cls(
            mode=settings.value_mode,
            max_price=max_price,
            edge_cap=settings.edge_cap,
            edge_weight=settings.edge_weight,
            strategy_cap=settings.strategy_cap,
            delta_cap=settings.delta_cap,
            league=settings.league,
            boosts=settings.boosts,
            stable_key_tiebreak=settings.stable_key_tiebreak,
        )


@dataclass(frozen=True)
class ScoredPlayer:
    key: str
    record: PlayerRecord
    baseline_value: float
    price: float
    fit_raw: float
    fit_norm: float
    value_edge: float
    need_boost: float
    score: float
    adjusted_price: float
    total_delta: float
    eligible_slots: tuple[str, ...] = ()
    eligible_slot_hint: str = ""

    @property
    def price_edge(self) -> float:
        """Uncapped baseline minus reference price."""

        return self.baseline_value - self.price

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.record.display_name,
            "team": self.record.team,
            "positions": sorted(self.record.positions),
            "role": self.record.role,
            "baseline_value": self.baseline_value,
            "price": self.price,
            "adjusted_price": self.adjusted_price,
            "total_delta": self.total_delta,
            "value_edge": self.value_edge,
            "fit_norm": self.fit_norm,
            "need_boost": self.need_boost,
            "score": self.score,
            "eligible_slot_hint": self.eligible_slot_hint,
        }


@dataclass(frozen=True)
class ScoreResult:
    """Ranked candidates plus the three pre-sorted views."""

    ranked: List[ScoredPlayer]
    needs: List[ScoredPlayer]
    value: List[ScoredPlayer]
    fit: List[ScoredPlayer]
    empty_slots: tuple[str, ...]
    has_category_stats: bool

    def top(self, view: str = "ranked", limit: int = 10) -> List[ScoredPlayer]:
        rows: Sequence[ScoredPlayer] = getattr(self, view)
        return list(rows[: max(0, limit)])


def _category_value(
    record: PlayerRecord,
    category: str,
    components: Mapping[str, Mapping[str, float]],
) -> Optional[float]:
    component = components.get(record.key, {}).get(category)
    if component is not None:
        return component
    value = record.category_stats.get(category)
    if value is None or not math.isfinite(value):
        return None
    return value


def fit_raw(
    record: PlayerRecord,
    weights: Mapping[str, float],
    *,
    has_category_stats: bool = True,
    components: Mapping[str, Mapping[str, float]] | None = None,
) -> float:
    """Weighted category sum over the player's role categories; 0 when nothing counts."""

    if not has_category_stats:
        return 0.0
    components = components or {}
    total = 0.0
    for category in categories_for(record.role):
        weight = weight_for(weights, category)
        if weight == 0:
            continue
        value = _category_value(record, category, components)
        if value is None:
            continue
        total += value * weight
    return total if math.isfinite(total) else 0.0


def reference_price(
    record: PlayerRecord,
    live_prices: Mapping[str, object] | None = None,
) -> float:
    """Live price when the caller has one, else market estimate, else projection baseline."""

    if live_prices and record.key in live_prices:
        live = parse_number(live_prices[record.key])
        if live is not None:
            return max(0.0, live)
    market = market_estimate(record)
    if market is not None and market > 0:
        return market
    return projection_baseline(record)


def normalize_fit(values: Sequence[float]) -> List[float]:
    """Min-max scale to 0..100; a degenerate set maps to 0 everywhere."""

    if not values:
        return []
    low = min(values)
    high = max(values)
    spread = high - low
    if spread <= 0 or not math.isfinite(spread):
        return [0.0 for _ in values]
    return [100.0 * (value - low) / spread for value in values]


def score_candidates(
    pool: Union[PlayerPool, Iterable[PlayerRecord]],
    *,
    weights: Mapping[str, object] | None = None,
    empty_slots: Sequence[str] = (),
    rostered_keys: Iterable[str] = (),
    targeted_keys: Iterable[str] = (),
    live_prices: Mapping[str, object] | None = None,
    criteria: ScoreCriteria | None = None,
    has_category_stats: bool | None = None,
    components: Mapping[str, Mapping[str, float]] | None = None,
) -> ScoreResult:
    """Score every candidate not already rostered or targeted.

    Composite score = normalized fit + ``edge_weight`` * capped value edge +
    need boost. Ties keep input order unless ``stable_key_tiebreak`` is set,
    in which case the canonical key breaks them.
    """

    criteria = criteria or ScoreCriteria()
    weight_set = normalize_weights(weights)
    if isinstance(pool, PlayerPool):
        records: Sequence[PlayerRecord] = pool.records
        if has_category_stats is None:
            has_category_stats = pool.has_category_stats
        if components is None:
            components = pool.components
    else:
        records = list(pool)
        if has_category_stats is None:
            has_category_stats = detect_category_stats(records)
    components = components or {}
    excluded = {key for key in rostered_keys if key} | {key for key in targeted_keys if key}
    slots = tuple(empty_slots)

    survivors: List[Dict[str, Any]] = []
    for record in records:
        if record.key in excluded:
            continue
        price = reference_price(record, live_prices)
        if criteria.max_price is not None and price > criteria.max_price:
            continue
        base = baseline_value(record, criteria.mode)
        raw_fit = fit_raw(
            record,
            weight_set,
            has_category_stats=has_category_stats,
            components=components,
        )
        pricing = compute_adjusted_price(
            base,
            weighted_value(record, weight_set, has_category_stats=has_category_stats, baseline=base),
            price,
            strategy_cap=criteria.strategy_cap,
            delta_cap=criteria.delta_cap,
        )
        survivors.append(
            {
                "record": record,
                "base": base,
                "price": price,
                "fit_raw": raw_fit,
                "value_edge": clamp(base - price, -criteria.edge_cap, criteria.edge_cap),
                "need_boost": need_boost(record, slots, league=criteria.league, boosts=criteria.boosts),
                "eligible": tuple(eligible_slots(record, slots, league=criteria.league)),
                "hint": slot_hint(record, slots, league=criteria.league),
                "pricing": pricing,
            }
        )

    fit_norms = normalize_fit([row["fit_raw"] for row in survivors])
    scored: List[ScoredPlayer] = []
    for row, fit_norm in zip(survivors, fit_norms):
        record = row["record"]
        scored.append(
            ScoredPlayer(
                key=record.key,
                record=record,
                baseline_value=row["base"],
                price=row["price"],
                fit_raw=row["fit_raw"],
                fit_norm=fit_norm,
                value_edge=row["value_edge"],
                need_boost=row["need_boost"],
                score=fit_norm + criteria.edge_weight * row["value_edge"] + row["need_boost"],
                adjusted_price=row["pricing"].adjusted_price,
                total_delta=row["pricing"].total_delta,
                eligible_slots=row["eligible"],
                eligible_slot_hint=row["hint"],
            )
        )

    if criteria.stable_key_tiebreak:
        ranked = sorted(scored, key=lambda s: (-s.score, s.key))
    else:
        ranked = sorted(scored, key=lambda s: -s.score)

    return ScoreResult(
        ranked=ranked,
        needs=[s for s in ranked if s.need_boost > 0],
        value=sorted(ranked, key=lambda s: -s.price_edge),
        fit=sorted(ranked, key=lambda s: -s.fit_norm),
        empty_slots=slots,
        has_category_stats=bool(has_category_stats),
    )


__all__ = [
    "ScoreCriteria",
    "ScoreResult",
    "ScoredPlayer",
    "fit_raw",
    "normalize_fit",
    "reference_price",
    "score_candidates",
]
