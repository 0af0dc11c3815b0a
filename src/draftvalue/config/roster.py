"""Roster slot tables for supported league formats."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Dict, Iterable, Mapping, Tuple, Union


OUTFIELD_POSITIONS = frozenset({"OF", "LF", "CF", "RF"})


class SlotKind(str, Enum):
    PITCHING = "pitching"
    UTILITY = "utility"
    OUTFIELD = "outfield"
    COMPOSITE = "composite"
    STANDARD = "standard"


@dataclass(frozen=True)
class SlotBoosts:
    """Recommendation boost per slot kind; scarcer kinds get more."""

    composite: float = 10.0
    outfield: float = 8.0
    standard: float = 7.0
    utility: float = 4.0
    pitching: float = 3.0

    def for_kind(self, kind: SlotKind) -> float:
        return float(getattr(self, kind.value))


# Lower sorts first when picking a single "fills" hint.
HINT_PRIORITY: Mapping[SlotKind, int] = {
    SlotKind.COMPOSITE: 1,
    SlotKind.STANDARD: 2,
    SlotKind.OUTFIELD: 3,
    SlotKind.UTILITY: 4,
    SlotKind.PITCHING: 5,
}


@dataclass(frozen=True)
class RosterSlot:
    slot_id: str
    kind: SlotKind
    positions: AbstractSet[str] = field(default_factory=frozenset)

    @property
    def role(self) -> str:
        return "pitcher" if self.kind is SlotKind.PITCHING else "hitter"

    def accepts(self, role: str, positions: AbstractSet[str]) -> bool:
        if role != self.role:
            return False
        if self.kind in (SlotKind.PITCHING, SlotKind.UTILITY):
            return True
        return bool(self.positions & positions)

    @property
    def label(self) -> str:
        if self.kind is SlotKind.OUTFIELD:
            return "OF"
        if self.kind is SlotKind.PITCHING:
            return "P"
        return self.slot_id


@dataclass(frozen=True)
class LeagueSlots:
    league: str
    budget: int
    roster_order: Tuple[RosterSlot, ...]

    @property
    def slot_ids(self) -> Tuple[str, ...]:
        return tuple(slot.slot_id for slot in self.roster_order)

    def slot(self, slot_id: str) -> RosterSlot:
        for slot in self.roster_order:
            if slot.slot_id == slot_id:
                return slot
        raise KeyError(f"No slot {slot_id!r} in league {self.league!r}")

    def get(self, slot_id: str) -> RosterSlot | None:
        for slot in self.roster_order:
            if slot.slot_id == slot_id:
                return slot
        return None

    @property
    def hitter_slots(self) -> int:
        return sum(1 for slot in self.roster_order if slot.kind is not SlotKind.PITCHING)

    @property
    def pitcher_slots(self) -> int:
        return sum(1 for slot in self.roster_order if slot.kind is SlotKind.PITCHING)


def _standard(slot_id: str, position: str | None = None) -> RosterSlot:
    return RosterSlot(slot_id, SlotKind.STANDARD, frozenset({position or slot_id}))


def _outfield(slot_id: str) -> RosterSlot:
    return RosterSlot(slot_id, SlotKind.OUTFIELD, OUTFIELD_POSITIONS)


def _pitching(count: int) -> Tuple[RosterSlot, ...]:
    return tuple(RosterSlot(f"P{index}", SlotKind.PITCHING) for index in range(1, count + 1))


_LEAGUE_SLOTS: Dict[str, LeagueSlots] = {
    "HAG": LeagueSlots(
        league="HAG",
        budget=300,
        roster_order=(
            _standard("C"),
            _standard("1B"),
            _standard("2B"),
            _standard("3B"),
            _standard("SS"),
            RosterSlot("CI", SlotKind.COMPOSITE, frozenset({"1B", "3B"})),
            RosterSlot("MI", SlotKind.COMPOSITE, frozenset({"2B", "SS"})),
            _standard("LF"),
            _standard("CF"),
            _standard("RF"),
            _outfield("OF1"),
            _outfield("OF2"),
            RosterSlot("UT", SlotKind.UTILITY),
            *_pitching(9),
        ),
    ),
    "ROTO": LeagueSlots(
        league="ROTO",
        budget=260,
        roster_order=(
            _standard("C1", "C"),
            _standard("C2", "C"),
            _standard("1B"),
            _standard("3B"),
            RosterSlot("CI", SlotKind.COMPOSITE, frozenset({"1B", "3B"})),
            _standard("2B"),
            _standard("SS"),
            RosterSlot("MI", SlotKind.COMPOSITE, frozenset({"2B", "SS"})),
            *(_outfield(f"OF{index}") for index in range(1, 6)),
            RosterSlot("UT", SlotKind.UTILITY),
            *_pitching(9),
        ),
    ),
}

DEFAULT_LEAGUE = "HAG"


def iter_leagues() -> Iterable[LeagueSlots]:
    """Return an iterator of all configured slot tables."""

    return _LEAGUE_SLOTS.values()


def get_slots(league: str = DEFAULT_LEAGUE) -> LeagueSlots:
    """Fetch the slot table for a league, raising KeyError if missing."""

    key = league.upper()
    if key not in _LEAGUE_SLOTS:
        raise KeyError(f"No roster slots configured for league={league!r}")
    return _LEAGUE_SLOTS[key]


def get_slots_by_key(league_key: Union[str, LeagueSlots]) -> LeagueSlots:
    """Resolve a slot table from a league name or pass one through."""

    if isinstance(league_key, LeagueSlots):
        return league_key
    if not isinstance(league_key, str):
        raise TypeError("league_key must be a str or LeagueSlots")
    if not league_key.strip():
        raise ValueError("league_key must not be blank")
    return get_slots(league_key.strip())
