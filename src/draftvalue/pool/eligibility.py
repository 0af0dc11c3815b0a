"""Match players to roster slots and derive need boosts."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Union

from draftvalue.config.roster import (
    DEFAULT_LEAGUE,
    HINT_PRIORITY,
    LeagueSlots,
    RosterSlot,
    SlotBoosts,
    get_slots_by_key,
)
from draftvalue.models import PlayerRecord


LeagueRef = Union[str, LeagueSlots]

_DEFAULT_BOOSTS = SlotBoosts()


def is_eligible(record: PlayerRecord, slot_id: str, *, league: LeagueRef = DEFAULT_LEAGUE) -> bool:
    slot = get_slots_by_key(league).get(slot_id)
    if slot is None:
        return False
    return slot.accepts(record.role, record.positions)


def _eligible(record: PlayerRecord, empty_slots: Iterable[str], league: LeagueRef) -> List[RosterSlot]:
    table = get_slots_by_key(league)
    matches: List[RosterSlot] = []
    for slot_id in empty_slots:
        slot = table.get(slot_id)
        if slot is not None and slot.accepts(record.role, record.positions):
            matches.append(slot)
    return matches


def eligible_slots(
    record: PlayerRecord,
    empty_slots: Iterable[str],
    *,
    league: LeagueRef = DEFAULT_LEAGUE,
) -> List[str]:
    """Every currently empty slot the player could fill, in the given order."""

    return [slot.slot_id for slot in _eligible(record, empty_slots, league)]


def need_boost(
    record: PlayerRecord,
    empty_slots: Iterable[str],
    *,
    league: LeagueRef = DEFAULT_LEAGUE,
    boosts: Optional[SlotBoosts] = None,
) -> float:
    """Largest tier boost among the empty slots the player can fill, else 0."""

    boosts = boosts or _DEFAULT_BOOSTS
    best = 0.0
    for slot in _eligible(record, empty_slots, league):
        best = max(best, boosts.for_kind(slot.kind))
    return best


def slot_hint(
    record: PlayerRecord,
    empty_slots: Iterable[str],
    *,
    league: LeagueRef = DEFAULT_LEAGUE,
) -> str:
    matches = _eligible(record, empty_slots, league)
    if not matches:
        return ""
    best = min(matches, key=lambda slot: HINT_PRIORITY[slot.kind])
    return f"Fills {best.label}"


def empty_slot_ids(
    filled: Union[Mapping[str, object], Iterable[str]],
    *,
    league: LeagueRef = DEFAULT_LEAGUE,
) -> List[str]:
    """Table slots that are not filled, in table order.

    ``filled`` is either a slot -> occupant mapping (falsy occupants count as
    empty) or an iterable of filled slot ids.
    """

    if isinstance(filled, Mapping):
        taken = {slot_id for slot_id, occupant in filled.items() if occupant}
    else:
        taken = set(filled)
    return [slot_id for slot_id in get_slots_by_key(league).slot_ids if slot_id not in taken]
