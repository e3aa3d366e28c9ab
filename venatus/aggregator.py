"""Roll per-file match results into a tree-level score."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import AuditReport, MatchResult


def sort_results(results: Iterable[MatchResult]) -> List[MatchResult]:
    """Largest files first; equal sizes fall back to target path order."""
    return sorted(results, key=lambda result: (-result.line_count, result.target_path))


def total_lines(results: Iterable[MatchResult]) -> int:
    return sum(result.line_count for result in results)


def overall_score(results: Sequence[MatchResult]) -> float:
    """Line-count weighted mean similarity; 0.0 when there are no lines to weigh."""
    total = total_lines(results)
    if total == 0:
        return 0.0
    return sum(result.similarity * (result.line_count / total) for result in results)


def aggregate(results: Iterable[MatchResult], *, source_root: str, target_root: str) -> AuditReport:
    ordered = sort_results(results)
    return AuditReport(
        source_root=source_root,
        target_root=target_root,
        results=tuple(ordered),
        overall_score=overall_score(ordered),
        total_lines=total_lines(ordered),
    )


__all__ = ["aggregate", "overall_score", "sort_results", "total_lines"]
