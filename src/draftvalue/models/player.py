"""Canonical player and caller-state models shared across the engine."""

from __future__ import annotations

from typing import Dict, FrozenSet, Literal, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


Role = Literal["hitter", "pitcher"]
TargetTier = Literal["A", "B", "C"]


class Anchors(BaseModel):
    """Candidate baseline dollar values; any of them may be missing."""

    projection: Optional[float] = None
    market: Optional[float] = None
    prior_year: Optional[float] = None
    shadow: Optional[float] = None

    model_config = ConfigDict(frozen=True)

    def populated(self) -> int:
        return sum(1 for value in (self.projection, self.market, self.prior_year) if value is not None)


class PlayerRecord(BaseModel):
    """One real-world player after ingest and identity resolution."""

    key: str = Field(..., min_length=1)
    display_name: str
    team: str = ""
    positions: FrozenSet[str] = Field(default_factory=frozenset)
    role: Role
    category_stats: Dict[str, float] = Field(default_factory=dict)
    anchors: Anchors = Field(default_factory=Anchors)
    flags: Tuple[str, ...] = ()
    draftable: Optional[bool] = None
    tier: Optional[float] = None
    source: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def is_pitcher(self) -> bool:
        return self.role == "pitcher"


class Target(BaseModel):
    """A planned bid owned by the caller; the engine only reads it."""

    id: str = ""
    key: str = ""
    name: str = ""
    role: Role = "hitter"
    positions: str = ""
    plan: float = Field(default=0.0, ge=0.0)
    hard_max: float = Field(default=0.0, ge=0.0)
    tier: TargetTier = "B"
    notes: str = ""


class RosterEntry(BaseModel):
    """A player already on the caller's roster, with contract fields."""

    key: str = Field(..., min_length=1)
    name: str = ""
    role: Role = "hitter"
    team: str = ""
    positions: str = ""
    under_contract: bool = False
    contract_year: int = Field(default=1, ge=1)
    contract_total: int = Field(default=1, ge=1, le=10)
    price: int = Field(default=0, ge=0)
