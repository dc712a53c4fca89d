"""
Fuzzy ranking for live search.

Scores each hit of a deterministic search with a subsequence matcher in the
style of skim/fzf: every query character must appear in the verse in order,
matches at word starts and consecutive runs earn bonuses, and skipped
characters cost a gap penalty.
"""

from typing import List, Optional, Sequence

from .search import CommediaSearch
from .utils.types import RankedHit, SearchHit

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1
BONUS_BOUNDARY = SCORE_MATCH // 2
BONUS_NON_WORD = SCORE_MATCH // 2
BONUS_CAMEL123 = BONUS_BOUNDARY + SCORE_GAP_EXTENSION
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2

# Live search never shows more than this many results.
DEFAULT_LIMIT = 50

_NON_WORD, _LOWER, _UPPER, _LETTER, _NUMBER = range(5)


def _char_class(ch: str) -> int:
    if ch.islower():
        return _LOWER
    if ch.isupper():
        return _UPPER
    if ch.isdigit():
        return _NUMBER
    if ch.isalpha():
        return _LETTER
    return _NON_WORD


def _position_bonus(prev_class: int, cur_class: int) -> int:
    if prev_class == _NON_WORD and cur_class != _NON_WORD:
        return BONUS_BOUNDARY
    if (prev_class == _LOWER and cur_class == _UPPER) or (
        prev_class != _NUMBER and cur_class == _NUMBER
    ):
        return BONUS_CAMEL123
    if cur_class == _NON_WORD:
        return BONUS_NON_WORD
    return 0


class FuzzyMatcher:
    """
    Subsequence matcher returning an integer score, or None for no match.

    Case matching is "smart" by default: case-insensitive unless the pattern
    contains an uppercase character. Pass case_sensitive to force either way.
    """

    def __init__(self, case_sensitive: Optional[bool] = None):
        self.case_sensitive = case_sensitive

    def _is_case_sensitive(self, pattern: str) -> bool:
        if self.case_sensitive is not None:
            return self.case_sensitive
        return any(ch.isupper() for ch in pattern)

    def fuzzy_match(self, choice: str, pattern: str) -> Optional[int]:
        if not pattern:
            return 0

        if self._is_case_sensitive(pattern):
            text = list(choice)
            pat = list(pattern)
        else:
            text = [ch.lower() for ch in choice]
            pat = [ch.lower() for ch in pattern]

        n, m = len(text), len(pat)
        if m > n:
            return None

        j = 0
        for pc in pat:
            while j < n and text[j] != pc:
                j += 1
            if j == n:
                return None
            j += 1

        bonuses = []
        prev_class = _NON_WORD
        for ch in choice:
            cur_class = _char_class(ch)
            bonuses.append(_position_bonus(prev_class, cur_class))
            prev_class = cur_class

        # prev_match[j]: best score with the previous pattern char matched exactly at j.
        # prev_best[j]:  best score with the previous pattern char matched at or before j.
        prev_match: List[Optional[int]] = [None] * n
        prev_best: List[Optional[int]] = [None] * n
        prev_chunk: List[int] = [0] * n

        for i, pc in enumerate(pat):
            match: List[Optional[int]] = [None] * n
            best: List[Optional[int]] = [None] * n
            chunk: List[int] = [0] * n
            running: Optional[int] = None
            running_from_match = False

            for j in range(n):
                score: Optional[int] = None
                if text[j] == pc:
                    if i == 0:
                        score = SCORE_MATCH + bonuses[j] * BONUS_FIRST_CHAR_MULTIPLIER
                        chunk[j] = bonuses[j]
                    elif j > 0:
                        if prev_match[j - 1] is not None:
                            first_bonus = prev_chunk[j - 1]
                            if bonuses[j] >= BONUS_BOUNDARY and bonuses[j] > first_bonus:
                                first_bonus = bonuses[j]
                            score = prev_match[j - 1] + SCORE_MATCH + max(
                                bonuses[j], first_bonus, BONUS_CONSECUTIVE
                            )
                            chunk[j] = first_bonus
                        if prev_best[j - 1] is not None:
                            gapped = prev_best[j - 1] + SCORE_MATCH + bonuses[j]
                            if score is None or gapped > score:
                                score = gapped
                                chunk[j] = bonuses[j]
                    match[j] = score

                gap = None
                if running is not None:
                    gap = running + (SCORE_GAP_START if running_from_match else SCORE_GAP_EXTENSION)
                if score is not None and (gap is None or score >= gap):
                    best[j] = score
                    running_from_match = True
                else:
                    best[j] = gap
                    running_from_match = False
                running = best[j]

            prev_match, prev_best, prev_chunk = match, best, chunk

        scores = [s for s in prev_match if s is not None]
        return max(scores) if scores else None


def rank(
    hits: Sequence[SearchHit],
    query: str,
    limit: int = DEFAULT_LIMIT,
    matcher: Optional[FuzzyMatcher] = None,
) -> List[RankedHit]:
    """
    Score hits against the query and keep the best ones.

    Hits the matcher rejects are dropped. The sort is stable, so equal
    scores keep the order of the incoming hits. An empty or blank query
    returns nothing.
    """
    if not query.strip():
        return []
    matcher = matcher or FuzzyMatcher()

    scored: List[RankedHit] = []
    for hit in hits:
        score = matcher.fuzzy_match(hit.text, query)
        if score is None:
            continue
        scored.append(RankedHit.from_hit(hit, score))

    scored.sort(key=lambda r: r.score, reverse=True)
    return scored[:limit]


def live_search(
    engine: CommediaSearch,
    query: str,
    limit: int = DEFAULT_LIMIT,
    matcher: Optional[FuzzyMatcher] = None,
) -> List[RankedHit]:
    """Run the deterministic search over all canticas, then fuzzy-rank it."""
    if not query.strip():
        return []
    return rank(engine.search(query), query, limit=limit, matcher=matcher)
