"""
Browse-mode cursor: which cantica and canto are selected and how far the
verse pane is scrolled. Pure index arithmetic, independent of search.
"""

from dataclasses import dataclass
from typing import Optional

from .utils.types import CANTICA_NAMES, Canto, Commedia


@dataclass
class Cursor:
    """Selection state for browsing. Indices wrap around at both ends."""
    cantica_index: Optional[int] = 0
    canto_index: Optional[int] = None  # index into the sorted canto numbers
    scroll: int = 0

    def _select_cantica(self, index: int):
        self.cantica_index = index
        self.canto_index = None
        self.scroll = 0

    def next_cantica(self):
        if self.cantica_index is None:
            self._select_cantica(0)
        else:
            self._select_cantica((self.cantica_index + 1) % len(CANTICA_NAMES))

    def previous_cantica(self):
        if self.cantica_index is None:
            self._select_cantica(0)
        else:
            self._select_cantica((self.cantica_index - 1) % len(CANTICA_NAMES))

    def next_canto(self, commedia: Commedia):
        count = len(commedia.canto_numbers(self.current_cantica)) if self.current_cantica else 0
        if count == 0:
            self.canto_index = None
        elif self.canto_index is None:
            self.canto_index = 0
        else:
            self.canto_index = (self.canto_index + 1) % count
        self.scroll = 0

    def previous_canto(self, commedia: Commedia):
        count = len(commedia.canto_numbers(self.current_cantica)) if self.current_cantica else 0
        if count == 0:
            self.canto_index = None
        elif self.canto_index is None:
            self.canto_index = 0
        else:
            self.canto_index = (self.canto_index - 1) % count
        self.scroll = 0

    def scroll_down(self):
        self.scroll += 1

    def scroll_up(self):
        self.scroll = max(0, self.scroll - 1)

    @property
    def current_cantica(self) -> Optional[str]:
        if self.cantica_index is None or not 0 <= self.cantica_index < len(CANTICA_NAMES):
            return None
        return CANTICA_NAMES[self.cantica_index]

    def current_canto_number(self, commedia: Commedia) -> Optional[int]:
        """Resolve the canto index against the current cantica; out of range means none."""
        if self.canto_index is None or self.current_cantica is None:
            return None
        numbers = commedia.canto_numbers(self.current_cantica)
        if not 0 <= self.canto_index < len(numbers):
            return None
        return numbers[self.canto_index]

    def current_canto(self, commedia: Commedia) -> Optional[Canto]:
        number = self.current_canto_number(commedia)
        if number is None:
            return None
        return commedia.canto(self.current_cantica, number)
