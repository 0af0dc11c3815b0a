"""Persistence layer for caller-owned draft state (settings, roster, targets, live prices)."""

from __future__ import annotations

import json
import logging
import math
import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
from uuid import uuid4

from draftvalue.config.categories import normalize_weights
from draftvalue.config.roster import get_slots
from draftvalue.identity import player_key, role_from_token
from draftvalue.models import PlayerRecord, RosterEntry, Target


logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
ROSTER_KEY = "roster_v1"
TARGETS_KEY = "auction_targets_v1"
LIVE_PRICES_KEY = "live_prices_v1"
SLOTS_KEY = "planner_slots_v1"

_DEFAULT_BUDGET = get_slots().budget

DEFAULT_SETTINGS: Dict[str, Any] = {
    "budget_total": _DEFAULT_BUDGET,
    "budget_remaining": _DEFAULT_BUDGET,
    "hitter_slots_total": 14,
    "pitcher_slots_total": 9,
    "value_mode": "projection",
    "category_weights_updated_at": None,
}

_MAX_CONTRACT_YEARS = 10


@dataclass(frozen=True)
class BudgetStatus:
    spent: int
    remaining: int
    budget_total: int


def _to_int(value: object, default: int = 0) -> int:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return int(number) if math.isfinite(number) else default


def _clamp_int(value: object, low: int, high: int) -> int:
    return max(low, min(high, _to_int(value, low)))


def _entry_role(raw: Mapping[str, Any]) -> str:
    return role_from_token(raw.get("role") or raw.get("type")) or "hitter"


def _normalize_roster_entry(raw: Mapping[str, Any]) -> RosterEntry:
    """Coerce a stored roster row into the current shape and key format."""

    role = _entry_role(raw)
    name = str(raw.get("name") or "").strip()
    key = str(raw.get("key") or raw.get("id") or "")
    if not key.startswith("id:"):
        key = player_key(name, role)
    contract_total = _clamp_int(raw.get("contract_total", 1), 1, _MAX_CONTRACT_YEARS)
    return RosterEntry(
        key=key,
        name=name,
        role=role,
        team=str(raw.get("team") or ""),
        positions=str(raw.get("positions") or raw.get("pos") or ""),
        under_contract=bool(raw.get("under_contract")),
        contract_year=_clamp_int(raw.get("contract_year", 1), 1, contract_total),
        contract_total=contract_total,
        price=max(0, _to_int(raw.get("price", 0))),
    )


def migrate_roster(rows: List[Mapping[str, Any]]) -> List[RosterEntry]:
    """Re-key stored roster rows and fold duplicates together.

    The first row seen for a key keeps its contract terms; the contract flag
    is kept if either row had it.
    """

    by_key: Dict[str, RosterEntry] = {}
    for raw in rows:
        entry = _normalize_roster_entry(raw)
        previous = by_key.get(entry.key)
        if previous is None:
            by_key[entry.key] = entry
            continue
        by_key[entry.key] = entry.model_copy(
            update={
                "under_contract": previous.under_contract or entry.under_contract,
                "contract_year": previous.contract_year,
                "contract_total": previous.contract_total,
                "price": previous.price,
            }
        )
    return list(by_key.values())


class StateStore:
    """Simple SQLite-backed key-value store for one caller's draft state."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv("DRAFTVALUE_DB_PATH")
        if env_db:
            if env_db.startswith("file:"):
                self.db_path: Union[Path, str] = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        else:
            self.db_path = Path(db_path) if not str(db_path).startswith("file:") else str(db_path)
            self._use_uri = isinstance(self.db_path, str)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / "draftvalue-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "draftvalue.sqlite"
            logger.warning("Could not open %s, falling back to %s", self.db_path, fallback)
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._use_uri = False
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS state (
                key TEXT PRIMARY KEY,
                value_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def _load(self, key: str, fallback: Any) -> Any:
        with self._connect() as conn:
            row = conn.execute("SELECT value_json FROM state WHERE key = ?", (key,)).fetchone()
        if row is None:
            return fallback
        try:
            return json.loads(row["value_json"])
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable state entry %s", key)
            return fallback

    def _save(self, key: str, value: Any) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO state (key, value_json, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value_json = excluded.value_json,
                                               updated_at = excluded.updated_at
                """,
                (key, json.dumps(value), now),
            )
            conn.commit()

    # Settings -----------------------------------------------------------

    def get_settings(self) -> Dict[str, Any]:
        stored = self._load(SETTINGS_KEY, {})
        settings = {**DEFAULT_SETTINGS, **(stored if isinstance(stored, dict) else {})}
        settings["category_weights"] = normalize_weights(settings.get("category_weights"))
        return settings

    def set_settings(self, patch: Mapping[str, Any]) -> Dict[str, Any]:
        merged = {**self.get_settings(), **dict(patch)}
        merged["category_weights"] = normalize_weights(merged.get("category_weights"))
        self._save(SETTINGS_KEY, merged)
        return merged

    def get_weights(self) -> Dict[str, float]:
        return self.get_settings()["category_weights"]

    def set_weights(self, patch: Mapping[str, object]) -> Dict[str, float]:
        """Merge a partial weight update over the stored weights."""

        current = self.get_weights()
        weights = normalize_weights({**current, **dict(patch)})
        self.set_settings(
            {
                "category_weights": weights,
                "category_weights_updated_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        return weights

    # Roster -------------------------------------------------------------

    def get_roster(self) -> List[RosterEntry]:
        rows = self._load(ROSTER_KEY, [])
        if not isinstance(rows, list) or not rows:
            return []
        roster = migrate_roster([row for row in rows if isinstance(row, dict)])
        changed = len(roster) != len(rows) or any(
            entry.key != rows[idx].get("key") for idx, entry in enumerate(roster)
        )
        if changed:
            logger.info("Migrated roster: %d stored rows -> %d entries", len(rows), len(roster))
            self._set_roster(roster)
        return roster

    def _set_roster(self, roster: List[RosterEntry]) -> None:
        self._save(ROSTER_KEY, [entry.model_dump() for entry in roster])

    def add_to_roster(self, player: Union[PlayerRecord, RosterEntry]) -> RosterEntry:
        """Add a player with default contract terms, or fill blanks on an existing entry."""

        if isinstance(player, PlayerRecord):
            incoming = RosterEntry(
                key=player.key,
                name=player.display_name,
                role=player.role,
                team=player.team,
                positions=",".join(sorted(player.positions)),
            )
        else:
            incoming = player
        roster = self.get_roster()
        for idx, existing in enumerate(roster):
            if existing.key != incoming.key:
                continue
            merged = existing.model_copy(
                update={
                    "name": existing.name or incoming.name,
                    "team": existing.team or incoming.team,
                    "positions": existing.positions or incoming.positions,
                }
            )
            roster[idx] = merged
            self._set_roster(roster)
            return merged
        self._set_roster([incoming, *roster])
        return incoming

    def update_roster_entry(self, key: str, **patch: Any) -> Optional[RosterEntry]:
        roster = self.get_roster()
        for idx, existing in enumerate(roster):
            if existing.key == key:
                updated = _normalize_roster_entry({**existing.model_dump(), **patch, "key": key})
                roster[idx] = updated
                self._set_roster(roster)
                return updated
        return None

    def remove_roster_entry(self, key: str) -> bool:
        roster = self.get_roster()
        remaining = [entry for entry in roster if entry.key != key]
        self._set_roster(remaining)
        return len(remaining) != len(roster)

    def recalc_budget(self) -> BudgetStatus:
        """Set the remaining budget to total minus contracted roster prices."""

        settings = self.get_settings()
        spent = sum(entry.price for entry in self.get_roster() if entry.under_contract)
        budget_total = max(0, _to_int(settings.get("budget_total", 0)))
        remaining = max(0, budget_total - spent)
        self.set_settings({"budget_remaining": remaining})
        return BudgetStatus(spent=spent, remaining=remaining, budget_total=budget_total)

    # Auction targets ----------------------------------------------------

    def get_targets(self) -> List[Target]:
        rows = self._load(TARGETS_KEY, [])
        return [Target.model_validate(row) for row in rows if isinstance(row, dict)]

    def _set_targets(self, targets: List[Target]) -> None:
        self._save(TARGETS_KEY, [target.model_dump() for target in targets])

    def add_target(self, target: Union[Target, Mapping[str, Any]]) -> Target:
        """Store a new target at the top of the board and return it with its id."""

        data = target.model_dump() if isinstance(target, Target) else dict(target)
        data["name"] = str(data.get("name") or "").strip()
        data["id"] = data.get("id") or uuid4().hex
        if not data.get("key"):
            data["key"] = player_key(data["name"], data.get("role", "hitter"))
        created = Target.model_validate(data)
        self._set_targets([created, *self.get_targets()])
        return created

    def update_target(self, target_id: str, **patch: Any) -> Optional[Target]:
        targets = self.get_targets()
        for idx, current in enumerate(targets):
            if current.id == target_id:
                updated = Target.model_validate({**current.model_dump(), **patch, "id": target_id})
                targets[idx] = updated
                self._set_targets(targets)
                return updated
        return None

    def remove_target(self, target_id: str) -> bool:
        targets = self.get_targets()
        remaining = [target for target in targets if target.id != target_id]
        self._set_targets(remaining)
        return len(remaining) != len(targets)

    def clear_targets(self) -> None:
        self._set_targets([])

    # Live prices --------------------------------------------------------

    def get_live_prices(self) -> Dict[str, int]:
        stored = self._load(LIVE_PRICES_KEY, {})
        return dict(stored) if isinstance(stored, dict) else {}

    def set_live_price(self, key: str, price: object) -> None:
        """Record a live auction price; non-positive or non-numeric prices clear it."""

        key = str(key or "").strip()
        if not key:
            return
        prices = self.get_live_prices()
        try:
            number = float(price)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            number = math.nan
        if not math.isfinite(number) or number <= 0:
            prices.pop(key, None)
        else:
            prices[key] = round(number)
        self._save(LIVE_PRICES_KEY, prices)

    def clear_live_prices(self) -> None:
        self._save(LIVE_PRICES_KEY, {})

    # Planner slots ------------------------------------------------------

    def get_slot_assignments(self) -> Dict[str, str]:
        stored = self._load(SLOTS_KEY, {})
        if not isinstance(stored, dict):
            return {}
        return {str(slot): str(key) for slot, key in stored.items() if key}

    def assign_slot(self, slot_id: str, key: str | None) -> Dict[str, str]:
        """Place a player key in a planner slot; ``None`` empties the slot."""

        slots = self.get_slot_assignments()
        if key:
            slots[slot_id] = key
        else:
            slots.pop(slot_id, None)
        self._save(SLOTS_KEY, slots)
        return slots


__all__ = [
    "BudgetStatus",
    "DEFAULT_SETTINGS",
    "StateStore",
    "migrate_roster",
]
