"""Name normalization and stable player keys for cross-source joins."""

from __future__ import annotations

import re
import unicodedata
from typing import Optional


_WHITESPACE = re.compile(r"\s+")
_LOOSE_PUNCTUATION = re.compile(r"['’`]")
_DASHES = re.compile(r"[-–—]")

_HIT_TOKENS = {"hit", "hitter", "h", "bat", "batter"}
_PIT_TOKENS = {"pit", "pitch", "pitcher", "p", "sp", "rp"}

UNKNOWN_ROLE = "unk"


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def has_diacritics(text: str | None) -> bool:
    if not text:
        return False
    return any(unicodedata.combining(ch) for ch in unicodedata.normalize("NFD", text))


def normalize_name(name: object) -> str:
    """Normalize a display name into a join-safe string.

    Accents and periods are removed, whitespace runs collapse to one space,
    and the result is lowercased and trimmed. Applying it twice is a no-op.
    """

    if name is None:
        return ""
    # Lowercase before decomposing so case folding cannot reintroduce marks.
    text = strip_diacritics(str(name).lower())
    text = text.replace(".", "")
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def loose_name(name: object) -> str:
    """A looser form of :func:`normalize_name` that also drops apostrophes and dashes."""

    text = normalize_name(name)
    text = _LOOSE_PUNCTUATION.sub("", text)
    text = _DASHES.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def invert_name(name: str) -> Optional[str]:
    """Turn ``"Last, First[, Suffix]"`` into ``"First Last[ Suffix]"``.

    Returns None when the text carries no comma.
    """

    if "," not in name:
        return None
    parts = [part.strip() for part in name.split(",") if part.strip()]
    if len(parts) < 2:
        return None
    last, first, *suffix = parts
    return " ".join([first, last, *suffix])


def role_token(role: object) -> str:
    """Resolve free-text role input to ``hit``, ``pit`` or the ``unk`` sentinel."""

    if role is None:
        return UNKNOWN_ROLE
    text = str(role).strip().lower()
    if text in _HIT_TOKENS:
        return "hit"
    if text in _PIT_TOKENS:
        return "pit"
    return UNKNOWN_ROLE


def role_from_token(role: object) -> Optional[str]:
    token = role_token(role)
    if token == "hit":
        return "hitter"
    if token == "pit":
        return "pitcher"
    return None


def player_key(name: object, role: object = None, external_id: object = None) -> str:
    """Build the canonical key for a player.

    An explicit external identifier wins; otherwise the key is the role token
    joined to the normalized name.
    """

    if external_id is not None:
        ident = str(external_id).strip()
        if ident:
            return f"id:{ident}"
    return f"{role_token(role)}:{normalize_name(name)}"
