"""Tabular and JSON rendering of audit reports."""

from __future__ import annotations

from typing import Dict, List, Sequence

from .models import NO_MATCH, AuditReport

STRONG = "strong"
GOOD = "good"
PARTIAL = "partial"
WEAK = "weak"

_TIER_COLORS = {
    STRONG: "\x1b[32m",
    GOOD: "\x1b[92m",
    PARTIAL: "\x1b[93m",
    WEAK: "\x1b[37m",
}
_RESET = "\x1b[0m"


def score_tier(score: float) -> str:
    """Map a similarity in [0, 1] to its display tier."""
    if score > 0.9:
        return STRONG
    if score > 0.8:
        return GOOD
    if score > 0.6:
        return PARTIAL
    return WEAK


def format_percentage(score: float) -> str:
    return f"{score * 100.0:.1f}%"


def common_prefix(a: str, b: str) -> str:
    """Return the longest shared leading substring of ``a`` and ``b``."""
    length = 0
    for left, right in zip(a, b):
        if left != right:
            break
        length += 1
    return a[:length]


def render_table(report: AuditReport, *, color: bool = False) -> str:
    """Render ``report`` as a double-ruled table with a totals footer."""
    prefix = common_prefix(report.source_root, report.target_root)
    header = [
        f"Path in {report.target_root[len(prefix):]}",
        f"Best match from {report.source_root[len(prefix):]}",
        "Score",
        "LoC",
    ]
    rows = [
        [
            result.target_path,
            result.matched_path if result.matched else NO_MATCH,
            format_percentage(result.similarity),
            str(result.line_count),
        ]
        for result in report.results
    ]
    overall = format_percentage(report.overall_score) if report.total_lines else NO_MATCH
    footer = ["Total", "", overall, str(report.total_lines)]

    widths = [len(cell) for cell in header]
    for row in [*rows, footer]:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

    lines = [
        _rule("╔", "╦", "╗", widths),
        _row(header, widths),
        _rule("╠", "╬", "╣", widths),
    ]
    for result, row in zip(report.results, rows):
        line = _row(row, widths)
        if color:
            line = f"{_TIER_COLORS[score_tier(result.similarity)]}{line}{_RESET}"
        lines.append(line)
    lines.append(_rule("╠", "╬", "╣", widths))
    lines.append(_row(footer, widths))
    lines.append(_rule("╚", "╩", "╝", widths))
    return "\n".join(lines) + "\n"


def report_to_dict(report: AuditReport) -> Dict[str, object]:
    files: List[Dict[str, object]] = []
    for result in report.results:
        files.append(
            {
                "target": result.target_path,
                "match": result.matched_path if result.matched else None,
                "similarity": result.similarity,
                "tier": score_tier(result.similarity),
                "line_count": result.line_count,
            }
        )
    return {
        "source": report.source_root,
        "target": report.target_root,
        "overall_score": report.overall_score if report.total_lines else None,
        "total_lines": report.total_lines,
        "files": files,
    }


def _rule(left: str, middle: str, right: str, widths: Sequence[int]) -> str:
    return left + middle.join("═" * (width + 2) for width in widths) + right


def _row(cells: Sequence[str], widths: Sequence[int]) -> str:
    # Path columns are left aligned, numeric columns right aligned.
    padded = [
        cell.ljust(width) if index < 2 else cell.rjust(width)
        for index, (cell, width) in enumerate(zip(cells, widths))
    ]
    return "║ " + " ║ ".join(padded) + " ║"


__all__ = [
    "GOOD",
    "PARTIAL",
    "STRONG",
    "WEAK",
    "common_prefix",
    "format_percentage",
    "render_table",
    "report_to_dict",
    "score_tier",
]
