from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .roman import to_roman

INFERNO = "Inferno"
PURGATORIO = "Purgatorio"
PARADISO = "Paradiso"

# Declared order of the three canticas; search results are ranked by it.
CANTICA_NAMES: Tuple[str, str, str] = (INFERNO, PURGATORIO, PARADISO)
CANTICA_RANK: Dict[str, int] = {name: rank for rank, name in enumerate(CANTICA_NAMES)}


class CorpusError(ValueError):
    """Raised when a Commedia cannot be built from the given canticas."""


@dataclass(frozen=True)
class Verse:
    """A single numbered line of a canto."""
    line_number: int
    text: str


@dataclass(frozen=True)
class Canto:
    """A numbered canto holding its verses in line order."""
    number: int
    verses: Tuple[Verse, ...] = ()

    def __post_init__(self):
        ordered = tuple(sorted(self.verses, key=lambda v: v.line_number))
        object.__setattr__(self, "verses", ordered)

    @property
    def roman_numeral(self) -> str:
        return to_roman(self.number)

    def verse(self, line_number: int) -> Optional[Verse]:
        for v in self.verses:
            if v.line_number == line_number:
                return v
        return None


@dataclass(frozen=True)
class Cantica:
    """One of the three canticas; cantos are keyed by number with no order."""
    name: str
    cantos: Mapping[int, Canto] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "cantos", MappingProxyType(dict(self.cantos)))

    def canto_numbers(self) -> List[int]:
        return sorted(self.cantos.keys())


@dataclass(frozen=True)
class Commedia:
    """
    The complete, immutable corpus.

    Holds exactly three canticas in declared order (Inferno, Purgatorio,
    Paradiso). Construction fails with CorpusError if a cantica is missing,
    out of order, empty, or stores a canto under the wrong key.
    """
    canticas: Tuple[Cantica, ...]

    def __post_init__(self):
        canticas = tuple(self.canticas)
        names = tuple(c.name for c in canticas)
        if names != CANTICA_NAMES:
            raise CorpusError(
                f"Expected canticas {', '.join(CANTICA_NAMES)} in order, got {', '.join(names) or 'none'}"
            )
        for cantica in canticas:
            if not cantica.cantos:
                raise CorpusError(f"Cantica {cantica.name} has no cantos")
            for number, canto in cantica.cantos.items():
                if number != canto.number:
                    raise CorpusError(
                        f"{cantica.name}: canto {canto.number} stored under key {number}"
                    )
        object.__setattr__(self, "canticas", canticas)

    @property
    def inferno(self) -> Cantica:
        return self.canticas[0]

    @property
    def purgatorio(self) -> Cantica:
        return self.canticas[1]

    @property
    def paradiso(self) -> Cantica:
        return self.canticas[2]

    def cantica(self, name: str) -> Cantica:
        """Look up a cantica by its exact name. Raises KeyError otherwise."""
        if name not in CANTICA_RANK:
            raise KeyError(name)
        return self.canticas[CANTICA_RANK[name]]

    def canto(self, cantica: str, number: int) -> Optional[Canto]:
        """Return a canto, or None if either the cantica or the canto is unknown."""
        if cantica not in CANTICA_RANK:
            return None
        return self.cantica(cantica).cantos.get(number)

    def canto_numbers(self, cantica: str) -> List[int]:
        if cantica not in CANTICA_RANK:
            return []
        return self.cantica(cantica).canto_numbers()


@dataclass(frozen=True)
class SearchHit:
    """A verse matched by a deterministic search."""
    cantica: str
    canto: int
    line: int
    text: str

    def sort_key(self) -> Tuple[int, int, int]:
        return (CANTICA_RANK[self.cantica], self.canto, self.line)


@dataclass(frozen=True)
class RankedHit:
    """A search hit scored against a live fuzzy query."""
    cantica: str
    canto: int
    line: int
    text: str
    score: int

    @classmethod
    def from_hit(cls, hit: SearchHit, score: int) -> "RankedHit":
        return cls(cantica=hit.cantica, canto=hit.canto, line=hit.line, text=hit.text, score=score)


JsonDict = Dict[str, Any]
