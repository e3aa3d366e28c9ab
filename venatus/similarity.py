"""Edit-distance similarity between normalized texts."""

from __future__ import annotations

from diff_match_patch import diff_match_patch

from .config import MatchingConfig


class SimilarityMetric:
    """Scores two strings in [0, 1] from the Levenshtein distance of their diff.

    The diff is the approximate, time-bounded one computed by diff-match-patch;
    once ``diff_timeout`` seconds pass the remaining text is treated as a
    wholesale replacement, which can only lower the score.
    """

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or MatchingConfig()
        self._dmp = diff_match_patch()
        self._dmp.Diff_Timeout = self.config.diff_timeout
        self._dmp.Diff_EditCost = self.config.diff_edit_cost

    def distance(self, a: str, b: str) -> int:
        """Return the edit distance implied by the diff of ``a`` and ``b``."""
        if a == b:
            return 0
        # Diff in a canonical order so that distance(a, b) == distance(b, a).
        first, second = (a, b) if a <= b else (b, a)
        diffs = self._dmp.diff_main(first, second, False)
        return self._dmp.diff_levenshtein(diffs)

    def similarity(self, a: str, b: str) -> float:
        longest = max(len(a), len(b))
        if longest == 0:
            return 1.0
        score = 1.0 - self.distance(a, b) / longest
        return min(1.0, max(0.0, score))

    __call__ = similarity


__all__ = ["SimilarityMetric"]
