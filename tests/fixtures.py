"""
Small in-memory corpora shared by the test modules.
"""

import sys
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

sys.path.insert(0, str(Path(__file__).parent.parent))

from duca.utils.types import Canto, Cantica, Commedia, Verse

Lines = Union[Iterable[str], Dict[int, str]]

SELVA = "mi ritrovai per una selva oscura"
AMOR = "Amor, ch'a nullo amato amar perdona,"


def make_canto(number: int, lines: Lines) -> Canto:
    """Build a canto from a list of texts (numbered from 1) or a {line_number: text} dict."""
    if isinstance(lines, dict):
        items = lines.items()
    else:
        items = enumerate(lines, start=1)
    return Canto(number=number, verses=tuple(Verse(line_number=n, text=t) for n, t in items))


def make_commedia(
    inferno: Optional[Dict[int, Canto]] = None,
    purgatorio: Optional[Dict[int, Canto]] = None,
    paradiso: Optional[Dict[int, Canto]] = None,
) -> Commedia:
    """Assemble a Commedia; canticas left out get a single unrelated canto."""
    defaults: Tuple[Tuple[str, Optional[Dict[int, Canto]], str], ...] = (
        ("Inferno", inferno, "Lasciate ogne speranza, voi ch'intrate"),
        ("Purgatorio", purgatorio, "Dolce color d'oriental zaffiro"),
        ("Paradiso", paradiso, "La gloria di colui che tutto move"),
    )
    canticas = []
    for name, cantos, filler in defaults:
        if cantos is None:
            cantos = {1: make_canto(1, [filler])}
        canticas.append(Cantica(name=name, cantos=cantos))
    return Commedia(canticas=tuple(canticas))


def amor_canto() -> Canto:
    """Inferno V stand-in: 30 lines with the famous verse at line 25."""
    lines = {n: f"verso {n} del canto quinto" for n in range(1, 31)}
    lines[25] = AMOR
    return make_canto(5, lines)


def sample_commedia() -> Commedia:
    return make_commedia(
        inferno={
            1: make_canto(1, [
                "Nel mezzo del cammin di nostra vita",
                SELVA,
                "ché la diritta via era smarrita.",
            ]),
            3: make_canto(3, [
                "Per me si va ne la città dolente,",
                "per me si va ne l'etterno dolore,",
                "per me si va tra la perduta gente.",
            ]),
            5: amor_canto(),
        },
        purgatorio={
            1: make_canto(1, [
                "Per correr miglior acque alza le vele",
                "omai la navicella del mio ingegno,",
                "che lascia dietro a sé mar sì crudele;",
            ]),
        },
        paradiso={
            1: make_canto(1, [
                "La gloria di colui che tutto move",
                "per l'universo penetra, e risplende",
                "in una parte più e meno altrove.",
            ]),
            33: make_canto(33, [
                "Vergine Madre, figlia del tuo figlio,",
                "l'amor che move il sole e l'altre stelle.",
            ]),
        },
    )
