"""Parse the Project Gutenberg plain text of the Commedia into cantos.

What it does
------------
1) Reads one text file per cantica (inferno.txt, purgatorio.txt,
   paradiso.txt).
2) Detects canto headers like "Canto XIV" or "Canto XIV." and converts the
   roman numeral to the canto number.
3) Numbers every following non-blank line as a verse of the current canto,
   starting again from 1 at each header.
4) Stops at the Gutenberg license trailer ("Updated editions will replace
   ...").

Output
------
A Commedia, which `duca parse` writes to commedia.json.

Notes
-----
- Lines before the first canto header (title page, Gutenberg preamble) are
  ignored.
- Gutenberg boilerplate lines ("*** START OF ...", anything mentioning
  "Project Gutenberg") are never counted as verses.
- A header whose numeral converts to 0 opens no canto; its lines are dropped.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List

from tqdm import tqdm

from .roman import from_roman
from .types import CANTICA_NAMES, Canto, Cantica, Commedia, Verse

logger = logging.getLogger(__name__)

# Canto header: "Canto I", "Canto XXXIII."
CANTO_RE = re.compile(r"^Canto\s+([IVXLCDM]+)\.?$")

# First line of the Gutenberg license trailer
END_MARKER = "Updated editions will replace"

TEXT_FILES = {
    "Inferno": "inferno.txt",
    "Purgatorio": "purgatorio.txt",
    "Paradiso": "paradiso.txt",
}


def _is_boilerplate(line: str) -> bool:
    return line.startswith("*** ") or "Project Gutenberg" in line


def parse_cantica_content(content: str) -> Dict[int, Canto]:
    """Split the text of one cantica into cantos keyed by number."""
    cantos: Dict[int, Canto] = {}
    current_number = 0
    current_verses: List[Verse] = []
    in_canto = False

    def flush() -> None:
        if in_canto and current_number > 0:
            if current_number in cantos:
                logger.warning("Canto %d appears twice; keeping the later one", current_number)
            cantos[current_number] = Canto(number=current_number, verses=tuple(current_verses))
        elif in_canto:
            logger.warning("Dropping %d lines under a canto header numbered 0", len(current_verses))

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(END_MARKER):
            break

        match = CANTO_RE.match(line)
        if match:
            flush()
            current_number = from_roman(match.group(1))
            current_verses = []
            in_canto = True
            continue

        if in_canto and not _is_boilerplate(line):
            current_verses.append(Verse(line_number=len(current_verses) + 1, text=line))

    flush()
    return cantos


def parse_text_files(text_dir: str | Path) -> Commedia:
    """
    Build a Commedia from the three Gutenberg files in text_dir.

    A missing file leaves its cantica empty, so the Commedia constructor
    raises CorpusError naming it.
    """
    text_dir = Path(text_dir)
    canticas = []
    for name in tqdm(CANTICA_NAMES, desc="Parsing canticas"):
        path = text_dir / TEXT_FILES[name]
        if path.exists():
            cantos = parse_cantica_content(path.read_text(encoding="utf-8"))
            logger.info("%s: parsed %d cantos from %s", name, len(cantos), path)
        else:
            logger.warning("%s: text file not found at %s", name, path)
            cantos = {}
        canticas.append(Cantica(name=name, cantos=cantos))
    return Commedia(canticas=tuple(canticas))
