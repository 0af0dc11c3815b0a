"""Free-text player lookup against a resolved pool."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from draftvalue.identity.keys import invert_name, loose_name, normalize_name, role_from_token
from draftvalue.models import PlayerRecord


class PlayerIndex:
    """Name index over a pool, built once per pool load.

    Lookups try the direct normalized name, then the inverted
    ``"Last, First"`` form, then a looser diacritic and punctuation stripped
    form of the inverted and direct text. A miss returns None.
    """

    def __init__(self, records: Iterable[PlayerRecord]):
        self._records: List[PlayerRecord] = list(records)
        self._by_key: Dict[str, PlayerRecord] = {}
        self._by_name: Dict[str, List[PlayerRecord]] = {}
        self._by_loose: Dict[str, List[PlayerRecord]] = {}
        for record in self._records:
            self._by_key.setdefault(record.key, record)
            self._by_name.setdefault(normalize_name(record.display_name), []).append(record)
            self._by_loose.setdefault(loose_name(record.display_name), []).append(record)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def get(self, key: str) -> Optional[PlayerRecord]:
        return self._by_key.get(key)

    @property
    def records(self) -> Sequence[PlayerRecord]:
        return tuple(self._records)

    def lookup(self, text: str | None, *, role: str | None = None) -> Optional[PlayerRecord]:
        if not text or not text.strip():
            return None
        raw = text.strip()
        if raw in self._by_key:
            return self._by_key[raw]

        wanted_role = role_from_token(role) if role is not None else None
        inverted = invert_name(raw)

        attempts: List[tuple[Dict[str, List[PlayerRecord]], Callable[[str], str], str]] = [
            (self._by_name, normalize_name, raw),
        ]
        if inverted:
            attempts.append((self._by_name, normalize_name, inverted))
            attempts.append((self._by_loose, loose_name, inverted))
        attempts.append((self._by_loose, loose_name, raw))

        for table, normalizer, candidate in attempts:
            found = _first_match(table.get(normalizer(candidate), ()), wanted_role)
            if found is not None:
                return found
        return None


def _first_match(records: Sequence[PlayerRecord], role: str | None) -> Optional[PlayerRecord]:
    for record in records:
        if role is None or record.role == role:
            return record
    return None
