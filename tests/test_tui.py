"""
Tests for the key bindings of the terminal interface.

Only the pure key mapping is tested; drawing needs a real terminal.
"""

import curses
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from duca.session import Action, Command
from duca.tui import is_quit_key, key_to_command, preview


class TestBrowseKeys(unittest.TestCase):

    def test_bindings(self):
        cases = {
            "h": Action.PREVIOUS_CANTICA,
            "l": Action.NEXT_CANTICA,
            "j": Action.NEXT_CANTO,
            "k": Action.PREVIOUS_CANTO,
            "J": Action.SCROLL_DOWN,
            "K": Action.SCROLL_UP,
            "/": Action.ENTER_SEARCH,
            curses.KEY_LEFT: Action.PREVIOUS_CANTICA,
            curses.KEY_RIGHT: Action.NEXT_CANTICA,
            curses.KEY_DOWN: Action.NEXT_CANTO,
            curses.KEY_UP: Action.PREVIOUS_CANTO,
        }
        for key, action in cases.items():
            self.assertEqual(key_to_command("browse", key), Command(action), key)

    def test_unbound_key(self):
        self.assertIsNone(key_to_command("browse", "x"))

    def test_quit_only_in_browse(self):
        self.assertTrue(is_quit_key("browse", "q"))
        self.assertFalse(is_quit_key("search", "q"))
        self.assertFalse(is_quit_key("context", "q"))


class TestSearchKeys(unittest.TestCase):

    def test_printable_characters_are_typed(self):
        self.assertEqual(key_to_command("search", "s"), Command(Action.APPEND_CHAR, char="s"))
        self.assertEqual(key_to_command("search", "q"), Command(Action.APPEND_CHAR, char="q"))
        self.assertEqual(key_to_command("search", "é"), Command(Action.APPEND_CHAR, char="é"))

    def test_editing_and_confirm(self):
        self.assertEqual(key_to_command("search", "\n"), Command(Action.CONFIRM))
        self.assertEqual(key_to_command("search", curses.KEY_ENTER), Command(Action.CONFIRM))
        self.assertEqual(key_to_command("search", "\x7f"), Command(Action.BACKSPACE))
        self.assertEqual(key_to_command("search", curses.KEY_BACKSPACE), Command(Action.BACKSPACE))
        self.assertEqual(key_to_command("search", "\x1b"), Command(Action.CANCEL))

    def test_selection(self):
        self.assertEqual(key_to_command("search", "j"), Command(Action.SELECT_NEXT))
        self.assertEqual(key_to_command("search", "k"), Command(Action.SELECT_PREVIOUS))
        self.assertEqual(key_to_command("search", curses.KEY_DOWN), Command(Action.SELECT_NEXT))
        self.assertEqual(key_to_command("search", curses.KEY_UP), Command(Action.SELECT_PREVIOUS))

    def test_unbound_special_key(self):
        self.assertIsNone(key_to_command("search", curses.KEY_F1))


class TestContextKeys(unittest.TestCase):

    def test_bindings(self):
        self.assertEqual(key_to_command("context", "q"), Command(Action.CANCEL))
        self.assertEqual(key_to_command("context", "\x1b"), Command(Action.CANCEL))
        self.assertEqual(key_to_command("context", "J"), Command(Action.SCROLL_DOWN))
        self.assertEqual(key_to_command("context", curses.KEY_UP), Command(Action.SCROLL_UP))
        self.assertIsNone(key_to_command("context", "/"))


class TestPreview(unittest.TestCase):

    def test_short_text_unchanged(self):
        self.assertEqual(preview("Nel mezzo del cammin"), "Nel mezzo del cammin")

    def test_long_text_truncated(self):
        text = "x" * 100
        shown = preview(text)
        self.assertEqual(len(shown), 80)
        self.assertTrue(shown.endswith("..."))


if __name__ == "__main__":
    unittest.main()
