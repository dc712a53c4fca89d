from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List

from .extract_text import parse_text_files
from .types import CANTICA_NAMES, Canto, Cantica, Commedia, CorpusError, JsonDict, Verse

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"


def resolve_data_path(data_path: str | Path | None = None) -> Path:
    """Pick the corpus JSON path: explicit argument, then DUCA_DATA_PATH, then data/commedia.json."""
    if data_path:
        return Path(data_path)
    env_path = os.getenv("DUCA_DATA_PATH")
    if env_path:
        return Path(env_path)
    return DEFAULT_DATA_DIR / "commedia.json"


def resolve_text_dir(text_dir: str | Path | None = None) -> Path:
    if text_dir:
        return Path(text_dir)
    env_dir = os.getenv("DUCA_TEXT_DIR")
    if env_dir:
        return Path(env_dir)
    return DEFAULT_DATA_DIR / "text"


def commedia_to_dict(commedia: Commedia) -> JsonDict:
    data: JsonDict = {}
    for cantica in commedia.canticas:
        cantos: Dict[str, JsonDict] = {}
        for number in cantica.canto_numbers():
            canto = cantica.cantos[number]
            cantos[str(number)] = {
                "number": canto.number,
                "roman_numeral": canto.roman_numeral,
                "verses": [
                    {"line_number": v.line_number, "text": v.text}
                    for v in canto.verses
                ],
            }
        data[cantica.name.lower()] = {"name": cantica.name, "cantos": cantos}
    return data


def commedia_from_dict(data: JsonDict) -> Commedia:
    """
    Build a Commedia from its JSON form.

    Canto keys are strings in JSON; the canto's own "number" field is
    authoritative. Missing canticas produce an empty cantica, which the
    Commedia constructor rejects.
    """
    if not isinstance(data, dict):
        raise CorpusError(f"Expected a JSON object, got {type(data).__name__}")
    canticas: List[Cantica] = []
    for name in CANTICA_NAMES:
        raw = data.get(name.lower()) or {}
        cantos: Dict[int, Canto] = {}
        for key, c in (raw.get("cantos") or {}).items():
            try:
                number = int(c.get("number", key))
                verses = [
                    Verse(line_number=int(v["line_number"]), text=v["text"])
                    for v in c.get("verses") or []
                ]
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise CorpusError(f"{name}: malformed canto {key!r}: {e}") from e
            cantos[number] = Canto(number=number, verses=tuple(verses))
        canticas.append(Cantica(name=name, cantos=cantos))
    return Commedia(canticas=tuple(canticas))


def save_commedia(commedia: Commedia, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(commedia_to_dict(commedia), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Saved corpus to %s", p)


def load_commedia(path: str | Path) -> Commedia:
    """Load the corpus from a JSON file written by save_commedia."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Corpus file not found at {p}")
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CorpusError(f"Corpus file {p} is not valid JSON: {e}") from e
    commedia = commedia_from_dict(raw)
    logger.debug(
        "Loaded %s: %s",
        p,
        ", ".join(f"{c.name}={len(c.cantos)}" for c in commedia.canticas),
    )
    return commedia


def load_or_parse(
    data_path: str | Path | None = None,
    text_dir: str | Path | None = None,
) -> Commedia:
    """Load the JSON corpus if it exists, otherwise ingest the plain-text files."""
    path = resolve_data_path(data_path)
    if path.exists():
        return load_commedia(path)

    directory = resolve_text_dir(text_dir)
    logger.info("No corpus at %s, parsing text files in %s", path, directory)
    return parse_text_files(directory)


def count_verses(cantica: Cantica) -> int:
    return sum(len(c.verses) for c in cantica.cantos.values())


def describe(commedia: Commedia) -> Dict[str, JsonDict]:
    """Per-cantica canto and verse counts, used by the parse command report."""
    return {
        c.name: {"cantos": len(c.cantos), "verses": count_verses(c)}
        for c in commedia.canticas
    }

