"""
Interactive session for browsing and searching the Commedia.

A Session owns the browse cursor and the current mode and turns abstract
commands into state changes. After every command it returns a ViewState
snapshot; drawing it is left to the caller (see duca.tui).

Modes:
    Browse       - initial; moves the cursor through canticas and cantos
    LiveSearch   - fuzzy-ranked results recomputed on every query edit
    ContextView  - one result shown inside its canto; always returns to
                   the LiveSearch it came from, never straight to Browse
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .fuzzy import DEFAULT_LIMIT, FuzzyMatcher, live_search
from .navigation import Cursor
from .search import CommediaSearch
from .utils.types import Canto, Commedia, RankedHit, Verse

# Lines kept above a highlighted verse when opening it in context.
CONTEXT_LEAD = 10


class Action(Enum):
    ENTER_SEARCH = "enter_search"
    NEXT_CANTICA = "next_cantica"
    PREVIOUS_CANTICA = "previous_cantica"
    NEXT_CANTO = "next_canto"
    PREVIOUS_CANTO = "previous_canto"
    SCROLL_DOWN = "scroll_down"
    SCROLL_UP = "scroll_up"
    APPEND_CHAR = "append_char"
    BACKSPACE = "backspace"
    SELECT_NEXT = "select_next"
    SELECT_PREVIOUS = "select_previous"
    CONFIRM = "confirm"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Command:
    action: Action
    char: Optional[str] = None  # only used by APPEND_CHAR


@dataclass
class BrowseMode:
    pass


@dataclass
class LiveSearchMode:
    query: str = ""
    results: List[RankedHit] = field(default_factory=list)
    selected: Optional[int] = None

    @property
    def selected_result(self) -> Optional[RankedHit]:
        if self.selected is None or not 0 <= self.selected < len(self.results):
            return None
        return self.results[self.selected]


@dataclass
class ContextViewMode:
    cantica: str
    canto: int
    highlight_line: int
    scroll: int
    search: LiveSearchMode  # restored unchanged on cancel


Mode = Union[BrowseMode, LiveSearchMode, ContextViewMode]

MODE_NAMES = {
    BrowseMode: "browse",
    LiveSearchMode: "search",
    ContextViewMode: "context",
}


@dataclass(frozen=True)
class ViewState:
    """Everything a renderer needs to draw one frame."""
    mode: str
    cantica: Optional[str]
    canto_numbers: Tuple[int, ...]
    selected_canto_index: Optional[int]
    display_cantica: Optional[str]  # cantica of the displayed canto
    canto: Optional[Canto]
    verses: Tuple[Verse, ...]
    scroll: int
    highlight_line: Optional[int] = None
    query: str = ""
    results: Tuple[RankedHit, ...] = ()
    selected_result: Optional[int] = None


def context_scroll(line: int) -> int:
    """Scroll offset that puts the given line about CONTEXT_LEAD lines down the pane."""
    return max(0, line - CONTEXT_LEAD)


class Session:
    """Single-user interactive state: browse cursor plus current mode."""

    def __init__(
        self,
        commedia: Commedia,
        log_dir: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
    ):
        self.commedia = commedia
        self.engine = CommediaSearch(commedia)
        self.matcher = FuzzyMatcher()
        self.limit = limit
        self.cursor = Cursor()
        self.mode: Mode = BrowseMode()

        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.search_log_path = self.log_dir / "searches.jsonl"
        else:
            self.search_log_path = None

    def _write_jsonl(self, path: Optional[Path], payload: dict) -> None:
        if not path:
            return
        try:
            with path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False) + "\n")
        except OSError as e:
            print(f"Failed to write log entry: {e}")

    def dispatch(self, command: Command) -> ViewState:
        """Apply one command and return the resulting view. Commands that mean nothing in the current mode are ignored."""
        mode = self.mode
        if isinstance(mode, BrowseMode):
            self._handle_browse(command)
        elif isinstance(mode, LiveSearchMode):
            self._handle_search(mode, command)
        elif isinstance(mode, ContextViewMode):
            self._handle_context(mode, command)
        else:
            raise TypeError(f"Unknown mode: {mode!r}")
        return self.view()

    def _handle_browse(self, command: Command) -> None:
        action = command.action
        if action == Action.ENTER_SEARCH:
            self.mode = LiveSearchMode()
        elif action == Action.NEXT_CANTICA:
            self.cursor.next_cantica()
        elif action == Action.PREVIOUS_CANTICA:
            self.cursor.previous_cantica()
        elif action == Action.NEXT_CANTO:
            self.cursor.next_canto(self.commedia)
        elif action == Action.PREVIOUS_CANTO:
            self.cursor.previous_canto(self.commedia)
        elif action == Action.SCROLL_DOWN:
            self.cursor.scroll_down()
        elif action == Action.SCROLL_UP:
            self.cursor.scroll_up()

    def _handle_search(self, mode: LiveSearchMode, command: Command) -> None:
        action = command.action
        if action == Action.APPEND_CHAR:
            if command.char:
                self._update_query(mode, mode.query + command.char)
        elif action == Action.BACKSPACE:
            self._update_query(mode, mode.query[:-1])
        elif action == Action.SELECT_NEXT:
            if mode.results:
                mode.selected = 0 if mode.selected is None else (mode.selected + 1) % len(mode.results)
        elif action == Action.SELECT_PREVIOUS:
            if mode.results:
                mode.selected = 0 if mode.selected is None else (mode.selected - 1) % len(mode.results)
        elif action == Action.CONFIRM:
            self._open_context(mode)
        elif action == Action.CANCEL:
            self.mode = BrowseMode()

    def _handle_context(self, mode: ContextViewMode, command: Command) -> None:
        action = command.action
        if action == Action.SCROLL_DOWN:
            mode.scroll += 1
        elif action == Action.SCROLL_UP:
            mode.scroll = max(0, mode.scroll - 1)
        elif action == Action.CANCEL:
            self.mode = mode.search

    def _update_query(self, mode: LiveSearchMode, query: str) -> None:
        mode.query = query
        mode.results = live_search(self.engine, query, limit=self.limit, matcher=self.matcher)
        mode.selected = 0 if mode.results else None

    def _open_context(self, mode: LiveSearchMode) -> None:
        hit = mode.selected_result
        if hit is None:
            return
        self.mode = ContextViewMode(
            cantica=hit.cantica,
            canto=hit.canto,
            highlight_line=hit.line,
            scroll=context_scroll(hit.line),
            search=mode,
        )
        self._write_jsonl(self.search_log_path, {
            "timestamp": datetime.now().isoformat(timespec="seconds"),
            "query": mode.query,
            "result_count": len(mode.results),
            "selected": {
                "cantica": hit.cantica,
                "canto": hit.canto,
                "line": hit.line,
                "score": hit.score,
            },
        })

    def view(self) -> ViewState:
        """Snapshot of the current state for rendering."""
        cursor = self.cursor
        cantica = cursor.current_cantica
        canto_numbers = tuple(self.commedia.canto_numbers(cantica)) if cantica else ()
        mode = self.mode
        name = MODE_NAMES[type(mode)]

        if isinstance(mode, ContextViewMode):
            canto = self.commedia.canto(mode.cantica, mode.canto)
            verses = canto.verses[mode.scroll:] if canto else ()
            return ViewState(
                mode=name,
                cantica=cantica,
                canto_numbers=canto_numbers,
                selected_canto_index=cursor.canto_index,
                display_cantica=mode.cantica,
                canto=canto,
                verses=verses,
                scroll=mode.scroll,
                highlight_line=mode.highlight_line,
                query=mode.search.query,
                results=tuple(mode.search.results),
                selected_result=mode.search.selected,
            )

        canto = cursor.current_canto(self.commedia)
        verses = canto.verses[cursor.scroll:] if canto else ()
        if isinstance(mode, LiveSearchMode):
            return ViewState(
                mode=name,
                cantica=cantica,
                canto_numbers=canto_numbers,
                selected_canto_index=cursor.canto_index,
                display_cantica=cantica if canto else None,
                canto=canto,
                verses=verses,
                scroll=cursor.scroll,
                query=mode.query,
                results=tuple(mode.results),
                selected_result=mode.selected,
            )
        return ViewState(
            mode=name,
            cantica=cantica,
            canto_numbers=canto_numbers,
            selected_canto_index=cursor.canto_index,
            display_cantica=cantica if canto else None,
            canto=canto,
            verses=verses,
            scroll=cursor.scroll,
        )
