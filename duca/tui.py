"""
Curses front end for the interactive session.

Maps key presses to session commands and draws each ViewState: a left
column with the cantica and canto lists, and a right pane that shows the
selected canto, the live search results, or a result in context.
"""

import curses
from textwrap import wrap
from typing import List, Optional, Union

from .session import Action, Command, Session, ViewState
from .utils.types import CANTICA_NAMES, Commedia

Key = Union[int, str]

ESC = 27
ENTER_KEYS = (10, 13, curses.KEY_ENTER)
BACKSPACE_KEYS = (8, 127, curses.KEY_BACKSPACE)

PREVIEW_WIDTH = 80

HELP_LINES = [
    "Navigation:",
    "h/← l/→  - Switch Cantica",
    "j/↓ k/↑  - Select Canto",
    "J K      - Scroll verses",
    "/        - Interactive Search (fzf-like)",
    "q        - Quit",
    "",
    "Search Features:",
    "• Live filtering as you type",
    "• Fuzzy matching with scoring",
    "• Enter to view in context",
    "• Esc to return",
]

BROWSE_KEYS = {
    ord("h"): Action.PREVIOUS_CANTICA,
    curses.KEY_LEFT: Action.PREVIOUS_CANTICA,
    ord("l"): Action.NEXT_CANTICA,
    curses.KEY_RIGHT: Action.NEXT_CANTICA,
    ord("j"): Action.NEXT_CANTO,
    curses.KEY_DOWN: Action.NEXT_CANTO,
    ord("k"): Action.PREVIOUS_CANTO,
    curses.KEY_UP: Action.PREVIOUS_CANTO,
    ord("J"): Action.SCROLL_DOWN,
    ord("K"): Action.SCROLL_UP,
    ord("/"): Action.ENTER_SEARCH,
}

SEARCH_KEYS = {
    ESC: Action.CANCEL,
    curses.KEY_DOWN: Action.SELECT_NEXT,
    curses.KEY_UP: Action.SELECT_PREVIOUS,
    ord("j"): Action.SELECT_NEXT,
    ord("k"): Action.SELECT_PREVIOUS,
}

CONTEXT_KEYS = {
    ord("q"): Action.CANCEL,
    ESC: Action.CANCEL,
    ord("J"): Action.SCROLL_DOWN,
    curses.KEY_DOWN: Action.SCROLL_DOWN,
    ord("K"): Action.SCROLL_UP,
    curses.KEY_UP: Action.SCROLL_UP,
}


def _key_code(key: Key) -> Optional[int]:
    """get_wch returns str for characters and int for special keys."""
    if isinstance(key, int):
        return key
    if len(key) == 1:
        return ord(key)
    return None


def is_quit_key(mode: str, key: Key) -> bool:
    return mode == "browse" and _key_code(key) == ord("q")


def key_to_command(mode: str, key: Key) -> Optional[Command]:
    """Translate a key press into a session command; None for unbound keys."""
    code = _key_code(key)
    if code is None:
        return None

    if mode == "browse":
        action = BROWSE_KEYS.get(code)
        return Command(action) if action else None

    if mode == "search":
        if code in ENTER_KEYS:
            return Command(Action.CONFIRM)
        if code in BACKSPACE_KEYS:
            return Command(Action.BACKSPACE)
        action = SEARCH_KEYS.get(code)
        if action:
            return Command(action)
        if isinstance(key, str) and key.isprintable():
            return Command(Action.APPEND_CHAR, char=key)
        return None

    if mode == "context":
        action = CONTEXT_KEYS.get(code)
        return Command(action) if action else None

    return None


def preview(text: str, width: int = PREVIEW_WIDTH) -> str:
    if len(text) > width:
        return text[: width - 3] + "..."
    return text


class TerminalUI:
    """Draws ViewState frames on a curses screen and feeds keys to a Session."""

    def __init__(self, stdscr, session: Session):
        self.stdscr = stdscr
        self.session = session

        self.stdscr.clear()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(1, curses.COLOR_BLACK, curses.COLOR_GREEN)  # selection
            curses.init_pair(2, curses.COLOR_YELLOW, -1)                 # line numbers, input
            curses.init_pair(3, curses.COLOR_CYAN, -1)                   # context line numbers
            curses.init_pair(4, curses.COLOR_RED, -1)                    # highlighted line number
        curses.set_escdelay(25)

    def _color(self, pair: int) -> int:
        return curses.color_pair(pair) if curses.has_colors() else 0

    def _put(self, y: int, x: int, text: str, width: int, attr: int = 0) -> None:
        if width <= 0:
            return
        try:
            self.stdscr.addnstr(y, x, text, width, attr)
        except curses.error:
            # Writing into the bottom-right cell raises after the text is drawn.
            pass

    def _box(self, y: int, x: int, height: int, width: int, title: str) -> None:
        if height < 2 or width < 2:
            return
        try:
            win = self.stdscr.derwin(height, width, y, x)
            win.box()
        except curses.error:
            return
        self._put(y, x + 2, f" {title} ", width - 4)

    def _list(self, y: int, x: int, height: int, width: int, title: str,
              items: List[str], selected: Optional[int], marker: str = ">> ") -> None:
        self._box(y, x, height, width, title)
        rows = height - 2
        if rows <= 0:
            return
        offset = 0
        if selected is not None and selected >= rows:
            offset = selected - rows + 1
        for row, index in enumerate(range(offset, min(len(items), offset + rows))):
            if index == selected:
                self._put(y + 1 + row, x + 1, (marker + items[index]).ljust(width - 2),
                          width - 2, self._color(1) | curses.A_BOLD)
            else:
                self._put(y + 1 + row, x + 1, " " * len(marker) + items[index], width - 2)

    def draw(self, view: ViewState) -> None:
        self.stdscr.erase()
        rows, cols = self.stdscr.getmaxyx()
        left = max(16, cols // 5)
        right = cols - left

        cantica_index = CANTICA_NAMES.index(view.cantica) if view.cantica else None
        self._list(0, 0, 5, left, "Cantica", list(CANTICA_NAMES), cantica_index)
        self._list(5, 0, rows - 5, left, "Cantos",
                   [f"Canto {n}" for n in view.canto_numbers], view.selected_canto_index)

        if view.mode == "search":
            self._draw_search(view, 0, left, rows, right)
        elif view.mode == "context":
            self._draw_verses(view, 0, left, rows, right, context=True)
        else:
            self._draw_verses(view, 0, left, rows, right, context=False)

        self.stdscr.refresh()

    def _draw_verses(self, view: ViewState, y: int, x: int, height: int, width: int,
                     context: bool) -> None:
        if view.canto is None:
            if context:
                self._box(y, x, height, width, "Context View")
                self._put(y + 1, x + 2, "No context available", width - 4)
                return
            self._box(y, x, height, width, f"{view.cantica} - Select a Canto")
            for row, line in enumerate(HELP_LINES[: height - 2]):
                self._put(y + 1 + row, x + 2, line, width - 4)
            return

        if context:
            title = f"{view.display_cantica} Canto {view.canto.roman_numeral} - Context View (Esc to return)"
        else:
            title = f"{view.display_cantica} Canto {view.canto.roman_numeral}"
        self._box(y, x, height, width, title)

        row = y + 1
        text_width = max(1, width - 9)
        for verse in view.verses:
            if row >= y + height - 1:
                break
            highlighted = context and verse.line_number == view.highlight_line
            if context:
                number_attr = self._color(4 if highlighted else 3)
            else:
                number_attr = self._color(2)
            text_attr = (self._color(2) | curses.A_BOLD) if highlighted else 0
            self._put(row, x + 2, f"{verse.line_number:3}: ", 5, number_attr)
            for piece in wrap(verse.text, width=text_width) or [""]:
                if row >= y + height - 1:
                    break
                self._put(row, x + 7, piece, width - 8, text_attr)
                row += 1

    def _draw_search(self, view: ViewState, y: int, x: int, height: int, width: int) -> None:
        self._box(y, x, 3, width, "Interactive Search (type to filter)")
        self._put(y + 1, x + 2, view.query, width - 4, self._color(2))

        if not view.results and view.query:
            title = "No matches found"
        else:
            title = f"Results ({len(view.results)}) - Enter to view context"
        items = [
            f"{r.cantica} {r.canto}.{r.line}: {preview(r.text)}"
            for r in view.results
        ]
        self._list(y + 3, x, height - 3, width, title, items, view.selected_result, marker="► ")

    def loop(self) -> None:
        view = self.session.view()
        while True:
            self.draw(view)
            try:
                key = self.stdscr.get_wch()
            except curses.error:
                continue
            if key == curses.KEY_RESIZE:
                continue
            if is_quit_key(view.mode, key):
                return
            command = key_to_command(view.mode, key)
            if command is not None:
                view = self.session.dispatch(command)


def run_tui(commedia: Commedia, log_dir: Optional[str] = None) -> None:
    """Run the interactive terminal interface until the user quits."""
    session = Session(commedia, log_dir=log_dir)

    def _main(stdscr):
        TerminalUI(stdscr, session).loop()

    curses.wrapper(_main)
