"""
Tests for the command line interface.
"""

import io
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from duca.main import build_parser, main, make_run_log_dir
from duca.utils.loaders import load_commedia, save_commedia
from fixtures import SELVA, sample_commedia


class CliTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.data_path = self.dir / "commedia.json"
        save_commedia(sample_commedia(), self.data_path)

    def tearDown(self):
        self.tmp.cleanup()

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            main(["--data-path", str(self.data_path), *argv])
        return out.getvalue(), err.getvalue()


class TestSearchCommand(CliTestCase):

    def test_matches(self):
        out, _ = self.run_cli("search", "selva")
        self.assertIn("Found 1 matches for 'selva':", out)
        self.assertIn(f"Inferno 1.2: {SELVA}", out)

    def test_no_matches(self):
        out, _ = self.run_cli("search", "nonexistent")
        self.assertEqual(out.strip(), "No matches found for 'nonexistent'")

    def test_cantica_filter(self):
        out, _ = self.run_cli("search", "amor", "--cantica", "paradiso")
        self.assertIn("Found 1 matches", out)
        self.assertIn("Paradiso 33.2:", out)
        self.assertNotIn("Inferno", out)

    def test_results_in_canonical_order(self):
        out, _ = self.run_cli("search", "per")
        lines = [line for line in out.splitlines() if ": " in line and not line.startswith("Found")]
        canticas = [line.split()[0] for line in lines]
        self.assertEqual(canticas, sorted(canticas, key=["Inferno", "Purgatorio", "Paradiso"].index))


class TestCantoCommand(CliTestCase):

    def test_show_canto(self):
        out, _ = self.run_cli("canto", "inferno", "1")
        lines = out.splitlines()
        self.assertEqual(lines[0], "Inferno Canto I")
        self.assertIn(f"  2: {SELVA}", lines)

    def test_alias_and_roman_header(self):
        out, _ = self.run_cli("canto", "par", "33")
        self.assertTrue(out.startswith("Paradiso Canto XXXIII"))

    def test_missing_canto(self):
        out, _ = self.run_cli("canto", "purgatorio", "7")
        self.assertEqual(out.strip(), "Canto 7 not found in Purgatorio")

    def test_invalid_cantica(self):
        out, err = self.run_cli("canto", "limbo", "1")
        self.assertEqual(out, "")
        self.assertIn("Invalid cantica", err)


class TestParseCommand(CliTestCase):

    def test_parse_writes_corpus(self):
        text_dir = self.dir / "text"
        text_dir.mkdir()
        for name in ("inferno.txt", "purgatorio.txt", "paradiso.txt"):
            (text_dir / name).write_text("Canto I\n\nprimo\nsecondo\n\nCanto II\n\nterzo\n", encoding="utf-8")
        out_path = self.dir / "parsed.json"

        out, _ = self.run_cli("parse", "--text-dir", str(text_dir), "--out", str(out_path))

        self.assertIn(f"Parsed and saved to {out_path}", out)
        self.assertIn("Inferno cantos: 2 (3 verses)", out)
        self.assertEqual(load_commedia(out_path).canto_numbers("Purgatorio"), [1, 2])

    def test_parse_missing_text_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli("parse", "--text-dir", str(self.dir / "absent"))
        self.assertEqual(ctx.exception.code, 1)


class TestLoadErrors(unittest.TestCase):

    def test_broken_corpus_exits(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "commedia.json"
            path.write_text("[]", encoding="utf-8")
            err = io.StringIO()
            with redirect_stdout(io.StringIO()), redirect_stderr(err):
                with self.assertRaises(SystemExit) as ctx:
                    main(["--data-path", str(path), "search", "selva"])
            self.assertEqual(ctx.exception.code, 1)
            self.assertIn("Error loading the Commedia", err.getvalue())


class TestParser(unittest.TestCase):

    def test_subcommand_required(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_parser().parse_args([])

    def test_canto_number_must_be_int(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_parser().parse_args(["canto", "inferno", "one"])

    def test_run_log_dir(self):
        self.assertIsNone(make_run_log_dir(None))
        with tempfile.TemporaryDirectory() as tmp:
            run_dir = make_run_log_dir(tmp)
            self.assertTrue(run_dir.is_dir())
            self.assertEqual(run_dir.parent, Path(tmp))


if __name__ == "__main__":
    unittest.main()
