"""Pipeline orchestration for a source/target audit run."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from tqdm import tqdm

from .aggregator import aggregate
from .config import VenatusConfig
from .logging import get_logger
from .matcher import Matcher
from .models import AuditReport
from .normalizer import CommentSyntax, Normalizer
from .tree_loader import TreeLoader, drop_skipped


class Auditor:
    """Coordinates loading, matching and aggregation for one tree pair."""

    def __init__(
        self,
        config: VenatusConfig,
        loader: TreeLoader | None = None,
        matcher: Matcher | None = None,
        show_progress: bool = False,
    ) -> None:
        self.config = config
        self.loader = loader or TreeLoader(
            Normalizer(CommentSyntax.from_config(config.comments)),
            extensions=config.extensions,
            exclude_paths=config.exclude_paths,
        )
        self.matcher = matcher or Matcher(config.matching)
        self.show_progress = show_progress
        self.logger = get_logger("auditor")

    def run(
        self,
        source: str | Path,
        target: str | Path,
        *,
        skip: Sequence[str] = (),
    ) -> AuditReport:
        """Match every target file against the source tree and score the pair."""
        self.logger.info("Opening code files...")
        source_files = self.loader.load(source)
        target_files = self.loader.load(target)
        self.logger.debug(
            "Loaded %d source files and %d target files", len(source_files), len(target_files)
        )
        target_files = drop_skipped(target_files, skip)

        self.logger.info("Comparing code files...")
        with tqdm(
            total=len(target_files),
            desc="Comparing",
            unit="file",
            leave=False,
            disable=not self.show_progress,
        ) as bar:
            results = self.matcher.match_all(
                target_files,
                source_files,
                workers=self.config.workers,
                on_result=lambda _result: bar.update(1),
            )

        report = aggregate(
            results,
            source_root=str(source),
            target_root=str(target),
        )
        matched = sum(1 for result in report.results if result.matched)
        self.logger.info(
            "Matched %d of %d target files; overall score %.1f%%",
            matched,
            len(report.results),
            report.overall_score * 100.0,
        )
        return report


__all__ = ["Auditor"]
