"""
Search infrastructure for the Divina Commedia.
Provides deterministic regex search over the whole poem or a single cantica.
"""

import re
from typing import List, Optional

from .utils.types import CANTICA_NAMES, Canto, Commedia, SearchHit

CANTICA_ALIASES = {
    "inferno": "Inferno",
    "inf": "Inferno",
    "purgatorio": "Purgatorio",
    "purg": "Purgatorio",
    "paradiso": "Paradiso",
    "par": "Paradiso",
}


def normalize_cantica(name: Optional[str]) -> Optional[str]:
    """Resolve a user-supplied cantica name; anything unrecognized means no filter."""
    if name is None:
        return None
    return CANTICA_ALIASES.get(name.strip().lower())


def compile_pattern(pattern: str) -> "re.Pattern[str]":
    """
    Compile a user pattern as a case-insensitive regex.

    Any string is accepted: if it is not a valid regular expression it is
    escaped and matched literally instead.
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error:
        return re.compile(re.escape(pattern), re.IGNORECASE)


class CommediaSearch:
    """Search engine for the Divina Commedia."""

    def __init__(self, commedia: Commedia):
        self.commedia = commedia

    def search(self, pattern: str, cantica: Optional[str] = None) -> List[SearchHit]:
        """
        Find every verse whose text matches the pattern.

        Args:
            pattern: Regex or literal text, matched anywhere in the verse
            cantica: Exact cantica name to restrict to, or None for all three

        Returns:
            Hits sorted by (cantica order, canto number, line number)
        """
        regex = compile_pattern(pattern)
        names = [cantica] if cantica in CANTICA_NAMES else list(CANTICA_NAMES)

        results: List[SearchHit] = []
        for name in names:
            source = self.commedia.cantica(name)
            # Canto storage has no order; always walk the sorted keys.
            for number in source.canto_numbers():
                canto = source.cantos[number]
                for verse in canto.verses:
                    if regex.search(verse.text):
                        results.append(SearchHit(
                            cantica=name,
                            canto=canto.number,
                            line=verse.line_number,
                            text=verse.text,
                        ))

        results.sort(key=SearchHit.sort_key)
        return results

    def get_canto(self, cantica: str, number: int) -> Optional[Canto]:
        """
        Get a canto by cantica name (aliases allowed) and number.

        Returns:
            The Canto, or None if the cantica or canto does not exist
        """
        name = normalize_cantica(cantica)
        if name is None:
            return None
        return self.commedia.canto(name, number)

