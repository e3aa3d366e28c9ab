"""Best-candidate search for target files against a shared candidate set."""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .config import MatchingConfig
from .gate import FilenameGate
from .logging import get_logger
from .models import NO_MATCH, MatchResult, NormalizedFile
from .similarity import SimilarityMetric

CandidateSet = Mapping[str, NormalizedFile]
ResultCallback = Callable[[MatchResult], None]

_logger = get_logger("matcher")

# Per-process snapshot installed by the pool initializer.
_WORKER_STATE: Optional[Tuple["Matcher", Dict[str, NormalizedFile]]] = None


class Matcher:
    """Finds, for each target file, the candidate it most resembles."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or MatchingConfig()
        self.metric = SimilarityMetric(self.config)
        self.gate = FilenameGate(self.metric, self.config.filename_threshold)

    def find_best_match(self, target: NormalizedFile, candidates: CandidateSet) -> MatchResult:
        """Return the highest-scoring candidate for ``target``.

        Candidates are visited in path order and only a strictly better score
        replaces the current best, so ties go to the smallest path. A target
        with no candidate past the filename gate gets ``NO_MATCH``.
        """
        best_path = NO_MATCH
        best_similarity = 0.0
        for path in sorted(candidates):
            if not self.gate.passes(target.path, path):
                continue
            similarity = self.metric.similarity(target.content, candidates[path].content)
            if similarity > best_similarity:
                best_similarity = similarity
                best_path = path
        _logger.debug("Best match for %s: %s (%.3f)", target.path, best_path, best_similarity)
        return MatchResult(
            target_path=target.path,
            matched_path=best_path,
            similarity=best_similarity,
            line_count=target.line_count,
        )

    def match_all(
        self,
        targets: Mapping[str, NormalizedFile],
        candidates: CandidateSet,
        *,
        workers: int = 1,
        on_result: ResultCallback | None = None,
    ) -> List[MatchResult]:
        """Match every target, fanning out over at most ``workers`` processes.

        The first failing task cancels everything still queued and its
        exception is re-raised; no partial results are returned.
        """
        ordered = [targets[path] for path in sorted(targets)]
        if not ordered:
            return []

        if workers <= 1 or len(ordered) == 1:
            results: List[MatchResult] = []
            for target in ordered:
                result = self.find_best_match(target, candidates)
                results.append(result)
                if on_result is not None:
                    on_result(result)
            return results

        max_workers = min(workers, len(ordered))
        _logger.debug("Matching %d targets with %d workers", len(ordered), max_workers)
        executor = ProcessPoolExecutor(
            max_workers=max_workers,
            initializer=_init_worker,
            initargs=(self.config, dict(candidates)),
        )
        results = []
        try:
            futures = [executor.submit(_match_in_worker, target) for target in ordered]
            for future in as_completed(futures):
                result = future.result()
                results.append(result)
                if on_result is not None:
                    on_result(result)
        except BaseException:
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown()
        return results


def _init_worker(config: MatchingConfig, candidates: Dict[str, NormalizedFile]) -> None:
    global _WORKER_STATE
    _WORKER_STATE = (Matcher(config), candidates)


def _match_in_worker(target: NormalizedFile) -> MatchResult:
    if _WORKER_STATE is None:  # pragma: no cover - initializer always runs first
        raise RuntimeError("matcher worker was not initialised")
    matcher, candidates = _WORKER_STATE
    return matcher.find_best_match(target, candidates)


__all__ = ["CandidateSet", "Matcher"]
