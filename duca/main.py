#!/usr/bin/env python3
"""
CLI interface for reading Dante's Divine Comedy from the terminal.
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .search import CommediaSearch, normalize_cantica
from .utils.extract_text import parse_text_files
from .utils.loaders import describe, load_or_parse, resolve_data_path, resolve_text_dir, save_commedia
from .utils.types import Commedia, CorpusError


def load_data(data_path: Optional[str]) -> Commedia:
    """Load the corpus or exit with an error message."""
    try:
        return load_or_parse(data_path)
    except (OSError, CorpusError) as e:
        print(f"Error loading the Commedia: {e}", file=sys.stderr)
        print("Run `duca parse` to build the corpus from the text files.", file=sys.stderr)
        sys.exit(1)


def make_run_log_dir(log_root: Optional[str]) -> Optional[Path]:
    """Create a per-run log directory under log_root, named by timestamp."""
    if not log_root:
        return None
    run_id = datetime.now().strftime("%Y%m%d-%H%M%S")
    run_log_dir = Path(log_root) / run_id
    run_log_dir.mkdir(parents=True, exist_ok=True)
    return run_log_dir


def search_command(args) -> None:
    commedia = load_data(args.data_path)
    search = CommediaSearch(commedia)
    results = search.search(args.pattern, normalize_cantica(args.cantica))

    if not results:
        print(f"No matches found for '{args.pattern}'")
        return

    print(f"Found {len(results)} matches for '{args.pattern}':\n")
    for r in results:
        print(f"{r.cantica} {r.canto}.{r.line}: {r.text}")


def canto_command(args) -> None:
    name = normalize_cantica(args.cantica)
    if name is None:
        print("Invalid cantica. Use: inferno, purgatorio, or paradiso", file=sys.stderr)
        return

    commedia = load_data(args.data_path)
    canto = commedia.canto(name, args.number)
    if canto is None:
        print(f"Canto {args.number} not found in {name}")
        return

    print(f"{name} Canto {canto.roman_numeral}\n")
    for verse in canto.verses:
        print(f"{verse.line_number:3}: {verse.text}")


def tui_command(args) -> None:
    from .tui import run_tui

    commedia = load_data(args.data_path)
    run_log_dir = make_run_log_dir(args.log_dir)
    run_tui(commedia, log_dir=str(run_log_dir) if run_log_dir else None)


def parse_command(args) -> None:
    text_dir = resolve_text_dir(args.text_dir)
    out_path = resolve_data_path(args.out or args.data_path)

    print(f"Parsing Divine Comedy text from {text_dir}...")
    try:
        commedia = parse_text_files(text_dir)
    except CorpusError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    save_commedia(commedia, out_path)
    print(f"Parsed and saved to {out_path}")
    for name, counts in describe(commedia).items():
        print(f"{name} cantos: {counts['cantos']} ({counts['verses']} verses)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="duca",
        description="Read Dante's Divine Comedy from your terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--data-path",
        type=str,
        default=None,
        help="Path to commedia.json (default: $DUCA_DATA_PATH or data/commedia.json)"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=os.getenv("DUCA_LOG_DIR"),
        help="Directory for per-run search logs (default: $DUCA_LOG_DIR, disabled if unset)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search for text across all canticas")
    search_parser.add_argument("pattern", help="Pattern to search for")
    search_parser.add_argument("-c", "--cantica", help="Limit search to specific cantica")
    search_parser.set_defaults(func=search_command)

    canto_parser = subparsers.add_parser("canto", help="Show specific canto")
    canto_parser.add_argument("cantica", help="Cantica (inferno, purgatorio, paradiso)")
    canto_parser.add_argument("number", type=int, help="Canto number")
    canto_parser.set_defaults(func=canto_command)

    tui_parser = subparsers.add_parser("tui", help="Interactive TUI mode")
    tui_parser.set_defaults(func=tui_command)

    parse_parser = subparsers.add_parser("parse", help="Parse and prepare text data")
    parse_parser.add_argument(
        "--text-dir",
        help="Directory with inferno.txt, purgatorio.txt, paradiso.txt (default: $DUCA_TEXT_DIR or data/text)"
    )
    parse_parser.add_argument("--out", help="Output JSON path (default: the data path)")
    parse_parser.set_defaults(func=parse_command)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    # Load environment variables
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args.func(args)


if __name__ == "__main__":
    main()
