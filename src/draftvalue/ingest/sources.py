"""Helpers to load source tables and emit canonical player records."""

from __future__ import annotations

import csv
import logging
import math
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from draftvalue.config.categories import ALL_CATEGORIES
from draftvalue.config_loader import ColumnProfile
from draftvalue.identity import UNKNOWN_ROLE, player_key, role_from_token
from draftvalue.models import Anchors, PlayerRecord


logger = logging.getLogger(__name__)

_CATEGORY_EXTRA_ALIASES: Dict[str, Tuple[str, ...]] = {
    "TB": ("total_bases", "TotalBases"),
    "R": ("runs", "Runs"),
    "SB": ("SBN", "sbn", "stolen_bases", "StolenBases"),
    "IP": ("innings_pitched", "InningsPitched"),
    "QS": ("quality_starts", "QualityStarts"),
    "K": ("SO", "so", "strikeouts", "Strikeouts"),
    "SV": ("saves", "Saves"),
    "HLD": ("holds", "Holds"),
}


def _category_aliases(category: str) -> Tuple[str, ...]:
    lower = category.lower()
    return (category, lower, f"{category}_26", f"{lower}_26", *_CATEGORY_EXTRA_ALIASES.get(category, ()))


# Accepted column spellings per logical field, tried in order.
COLUMN_ALIASES: Mapping[str, Tuple[str, ...]] = {
    "external_id": ("mlbam_id", "MLBAM_ID", "player_id", "PlayerID", "id"),
    "name": ("Name", "name", "Player", "player"),
    "role": ("Type", "type", "Role", "role"),
    "position": ("POS", "Pos", "pos", "Position", "position", "Display Role", "DisplayRole", "display_role"),
    "team": ("Team", "team", "Tm", "tm"),
    "projection": ("Proj Anchor", "ProjAnchor", "proj_anchor", "auction_value_26"),
    "market": ("Market Estimate", "MarketEstimate", "market_estimate"),
    "prior_year": (
        "Auction 25 Anchor",
        "Auction25 Anchor",
        "Auction25Anchor",
        "auction_price_25_imputed",
        "Actual 25 Draft$",
        "Actual25 Draft$",
        "Actual25Draft$",
        "auction_price_25",
    ),
    "shadow": ("auction_value_26_shadow",),
    "flags": ("Flags", "flags"),
    "draftable": ("draftable", "Draftable"),
    "tier": ("tier", "Tier"),
    **{f"stat:{category}": _category_aliases(category) for category in ALL_CATEGORIES},
}

_NUMERIC_DECORATION = re.compile(r"[$,]")
_POSITION_SPLIT = re.compile(r"[,/\s]+")
_FLAG_SPLIT = re.compile(r"[,;|]")


def parse_number(raw: object) -> Optional[float]:
    """Parse a stat or price cell; anything non-numeric is absent, not zero."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = _NUMERIC_DECORATION.sub("", str(raw)).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def parse_positions(raw: Optional[str]) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(token.strip().upper() for token in _POSITION_SPLIT.split(raw) if token.strip())


def parse_flags(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in _FLAG_SPLIT.split(raw) if part.strip())


def _parse_flag(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    text = value.strip().lower()
    if not text:
        return None
    if text in {"1", "true", "t", "yes", "y"}:
        return True
    if text in {"0", "false", "f", "no", "n"}:
        return False
    return None


class SourceRow(BaseModel):
    """One source row with its columns resolved to logical fields."""

    raw_id: Optional[str] = None
    raw_name: str
    raw_role: Optional[str] = None
    raw_position: Optional[str] = None
    raw_team: Optional[str] = None
    raw_projection: Optional[str] = None
    raw_market: Optional[str] = None
    raw_prior_year: Optional[str] = None
    raw_shadow: Optional[str] = None
    raw_flags: Optional[str] = None
    raw_draftable: Optional[str] = None
    raw_tier: Optional[str] = None
    raw_stats: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, object],
        profile: ColumnProfile | None = None,
    ) -> "SourceRow":
        overrides = profile.aliases if profile else {}

        def cell(column: str) -> Optional[str]:
            if "|" in column:
                parts = [cell(part.strip()) for part in column.split("|")]
                joined = " ".join(part for part in parts if part)
                return joined or None
            value = row.get(column)
            if value is None:
                return None
            text = str(value).strip()
            return text or None

        def extract(field_name: str) -> Optional[str]:
            for column in (*overrides.get(field_name, ()), *COLUMN_ALIASES.get(field_name, ())):
                value = cell(column)
                if value is not None:
                    return value
            return None

        stats: Dict[str, str] = {}
        for category in ALL_CATEGORIES:
            value = extract(f"stat:{category}")
            if value is not None:
                stats[category] = value

        return cls(
            raw_id=extract("external_id"),
            raw_name=extract("name") or "",
            raw_role=extract("role"),
            raw_position=extract("position"),
            raw_team=extract("team"),
            raw_projection=extract("projection"),
            raw_market=extract("market"),
            raw_prior_year=extract("prior_year"),
            raw_shadow=extract("shadow"),
            raw_flags=extract("flags"),
            raw_draftable=extract("draftable"),
            raw_tier=extract("tier"),
            raw_stats=stats,
        )


def _infer_role(raw_role: Optional[str], positions: frozenset[str]) -> str:
    role = role_from_token(raw_role)
    if role is not None:
        return role
    if positions & {"P", "SP", "RP"}:
        return "pitcher"
    return "hitter"


def _anchors(row: SourceRow) -> Anchors:
    projection = parse_number(row.raw_projection)
    shadow = parse_number(row.raw_shadow)
    # Legacy tables kept the projection value in a shadow column.
    if (projection is None or projection == 0) and shadow is not None and shadow > 0:
        projection = shadow
    return Anchors(
        projection=projection,
        market=parse_number(row.raw_market),
        prior_year=parse_number(row.raw_prior_year),
        shadow=shadow,
    )


def row_to_record(row: SourceRow, *, source: str = "") -> Optional[PlayerRecord]:
    """Convert one resolved row; rows without a name yield None."""

    name = row.raw_name.strip()
    if not name:
        return None
    positions = parse_positions(row.raw_position)
    stats: Dict[str, float] = {}
    for category, raw in row.raw_stats.items():
        value = parse_number(raw)
        if value is None:
            logger.debug("Ignoring non-numeric %s=%r for %s", category, raw, name)
            continue
        stats[category] = value
    role = _infer_role(row.raw_role, positions)
    key = player_key(name, row.raw_role, row.raw_id)
    if key.startswith(f"{UNKNOWN_ROLE}:"):
        # The key keeps the unknown token; only the role is inferred.
        logger.debug("No role column for %s; keyed %s, inferred %s from positions", name, key, role)
    return PlayerRecord(
        key=key,
        display_name=name,
        team=(row.raw_team or "").strip(),
        positions=positions,
        role=role,
        category_stats=stats,
        anchors=_anchors(row),
        flags=parse_flags(row.raw_flags),
        draftable=_parse_flag(row.raw_draftable),
        tier=parse_number(row.raw_tier),
        source=source,
    )


def rows_to_records(
    rows: Sequence[Mapping[str, object]],
    *,
    profile: ColumnProfile | None = None,
    source: str = "",
) -> List[PlayerRecord]:
    source = source or (profile.source if profile else "")
    records: List[PlayerRecord] = []
    skipped = 0
    for raw in rows:
        record = row_to_record(SourceRow.from_mapping(raw, profile), source=source)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    if skipped:
        logger.debug("Skipped %d rows without a player name from %s", skipped, source or "source")
    return records


def load_source_csv(path: Path) -> List[Dict[str, str]]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        return [
            {(key or "").strip(): value for key, value in row.items() if key is not None}
            for row in reader
        ]


def load_records_from_csv(
    path: Path,
    *,
    profile: ColumnProfile | None = None,
    source: str | None = None,
) -> List[PlayerRecord]:
    return rows_to_records(load_source_csv(path), profile=profile, source=source or path.stem)
