"""Persist and load engine tuning and column alias profiles."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Literal

from draftvalue.config.roster import DEFAULT_LEAGUE, SlotBoosts


ValueMode = Literal["projection", "market"]

_MODE_ALIASES = {"proj": "projection", "projection": "projection", "market": "market"}


def parse_value_mode(value: str | None) -> ValueMode:
    """Map a user-facing mode string onto a value mode, raising ValueError if unknown."""

    if value is None:
        return "projection"
    key = value.strip().lower()
    if key not in _MODE_ALIASES:
        raise ValueError(f"value mode must be 'projection' or 'market', got {value!r}")
    return _MODE_ALIASES[key]  # type: ignore[return-value]


@dataclass(frozen=True)
class EngineSettings:
    strategy_cap: float = 6.0
    delta_cap: float = 15.0
    edge_cap: float = 15.0
    edge_weight: float = 0.9
    min_percentile_samples: int = 25
    value_mode: ValueMode = "projection"
    league: str = DEFAULT_LEAGUE
    boosts: SlotBoosts = field(default_factory=SlotBoosts)
    stable_key_tiebreak: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "EngineSettings":
        defaults = cls()
        boosts_data = data.get("boosts") or {}
        return cls(
            strategy_cap=float(data.get("strategy_cap", defaults.strategy_cap)),
            delta_cap=float(data.get("delta_cap", defaults.delta_cap)),
            edge_cap=float(data.get("edge_cap", defaults.edge_cap)),
            edge_weight=float(data.get("edge_weight", defaults.edge_weight)),
            min_percentile_samples=int(data.get("min_percentile_samples", defaults.min_percentile_samples)),
            value_mode=parse_value_mode(data.get("value_mode", defaults.value_mode)),
            league=str(data.get("league", defaults.league)),
            boosts=SlotBoosts(**{k: float(v) for k, v in boosts_data.items()}),
            stable_key_tiebreak=bool(data.get("stable_key_tiebreak", defaults.stable_key_tiebreak)),
        )

    @classmethod
    def load(cls, path: Path) -> "EngineSettings":
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))

    def save(self, path: Path) -> None:
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")


@dataclass
class ColumnProfile:
    """Per-field column alias overrides for one source table.

    Aliases listed here are tried before the built-in ones.
    """

    aliases: Dict[str, List[str]] = field(default_factory=dict)
    source: str = ""

    @classmethod
    def load(cls, path: Path) -> "ColumnProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        aliases = {
            str(name): [columns] if isinstance(columns, str) else list(columns)
            for name, columns in (data.get("aliases") or {}).items()
        }
        return cls(aliases=aliases, source=data.get("source", ""))

    def save(self, path: Path) -> None:
        payload = {
            "aliases": self.aliases,
            "source": self.source,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
