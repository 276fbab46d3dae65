"""Fuzzy subsequence matching for project names and paths.

Scoring follows the skim/fzf family: every pattern character has to appear in
the candidate in order, and the best alignment is chosen by dynamic
programming. Matches earn points, with bonuses for landing on word
boundaries, camelCase humps and consecutive runs; gaps between matched
characters cost points.
"""

from typing import List, Optional

SCORE_MATCH = 16
SCORE_GAP_START = 3
SCORE_GAP_EXTENSION = 1

BONUS_BOUNDARY = 8
BONUS_CAMEL = 7
BONUS_CONSECUTIVE = SCORE_GAP_START + SCORE_GAP_EXTENSION
BONUS_FIRST_CHAR_MULTIPLIER = 2

SEPARATORS = frozenset("/-_. \\")

_UNREACHABLE = float("-inf")


def _position_bonuses(text: str) -> List[int]:
    """Bonus for matching at each position of text."""
    bonuses = []
    prev = ""
    for i, ch in enumerate(text):
        if i == 0 or prev in SEPARATORS:
            bonus = BONUS_BOUNDARY
        elif prev.islower() and ch.isupper():
            bonus = BONUS_CAMEL
        elif not prev.isdigit() and ch.isdigit():
            bonus = BONUS_CAMEL
        else:
            bonus = 0
        bonuses.append(bonus)
        prev = ch
    return bonuses


class FuzzyMatcher:
    """Smart-case fuzzy matcher.

    Matching is case-insensitive unless the pattern contains an uppercase
    letter.
    """

    def fuzzy_match(self, choice: str, pattern: str) -> Optional[int]:
        """Score how well pattern matches choice.

        Returns:
            Non-negative score (higher is better), or None when pattern is not
            a subsequence of choice
        """
        if not pattern:
            return 0

        if any(c.isupper() for c in pattern):
            text, query = choice, pattern
        else:
            text, query = choice.lower(), pattern.lower()

        if not self._is_subsequence(text, query):
            return None

        # Case folding can change length for some characters
        bonuses = _position_bonuses(choice if len(choice) == len(text) else text)
        n = len(text)

        # prev[j]: best score with query[:i] matched and query[i-1] at text[j]
        prev = [_UNREACHABLE] * n
        for j, ch in enumerate(text):
            if ch == query[0]:
                prev[j] = SCORE_MATCH + bonuses[j] * BONUS_FIRST_CHAR_MULTIPLIER

        for qch in query[1:]:
            row = [_UNREACHABLE] * n
            # Best predecessor separated from j by a gap of at least one char
            gapped = _UNREACHABLE
            for j in range(1, n):
                if j >= 2:
                    gapped = max(
                        gapped - SCORE_GAP_EXTENSION, prev[j - 2] - SCORE_GAP_START
                    )
                if text[j] != qch:
                    continue
                consecutive = prev[j - 1] + BONUS_CONSECUTIVE
                best = max(consecutive, gapped)
                if best != _UNREACHABLE:
                    row[j] = best + SCORE_MATCH + bonuses[j]
            prev = row

        score = max(prev)
        if score == _UNREACHABLE:
            return None
        return max(int(score), 0)

    @staticmethod
    def _is_subsequence(text: str, query: str) -> bool:
        it = iter(text)
        return all(ch in it for ch in query)
