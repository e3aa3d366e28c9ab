"""Filename pre-filter that prunes unrelated candidate pairs."""

from __future__ import annotations

from pathlib import PurePath

from .similarity import SimilarityMetric

DEFAULT_THRESHOLD = 0.5


class FilenameGate:
    """Admits a pair only when the two basenames are similar enough.

    A renamed file whose basename drifted past the threshold will never be
    compared by content.
    """

    def __init__(
        self, metric: SimilarityMetric | None = None, threshold: float = DEFAULT_THRESHOLD
    ) -> None:
        self.metric = metric or SimilarityMetric()
        self.threshold = threshold

    def passes(self, name1: str, name2: str) -> bool:
        base1 = PurePath(name1).name
        base2 = PurePath(name2).name
        return self.metric.similarity(base1, base2) > self.threshold


__all__ = ["DEFAULT_THRESHOLD", "FilenameGate"]
