"""Core data models shared across venatus components."""

from dataclasses import dataclass
from typing import Tuple

NO_MATCH = "N/A"


@dataclass(frozen=True)
class NormalizedFile:
    """A file reduced to its comparable canonical form."""

    path: str
    content: str
    line_count: int


@dataclass(frozen=True)
class MatchResult:
    """Best candidate found for a single target file."""

    target_path: str
    matched_path: str
    similarity: float
    line_count: int

    @property
    def matched(self) -> bool:
        return self.matched_path != NO_MATCH


@dataclass(frozen=True)
class AuditReport:
    """Sorted match results for a tree pair plus the weighted overall score."""

    source_root: str
    target_root: str
    results: Tuple[MatchResult, ...]
    overall_score: float
    total_lines: int
