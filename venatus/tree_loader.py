"""Source tree enumeration and loading into normalized form."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence

from .config import DEFAULT_EXTENSIONS
from .logging import get_logger
from .models import NormalizedFile
from .normalizer import Normalizer

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".idea",
}

_logger = get_logger("tree_loader")


class LoadError(OSError):
    """Raised when a tree or one of its files cannot be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Failed to load {path}: {reason}")
        self.path = str(path)


@dataclass
class ExcludeRule:
    """A glob pattern from ``exclude_paths`` matched against tree-relative paths."""

    pattern: str
    directory_only: bool
    anchored: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored:
            return fnmatchcase(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_exclude_rules(patterns: Iterable[str]) -> List[ExcludeRule]:
    rules: List[ExcludeRule] = []
    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            continue
        directory_only = pattern.endswith("/")
        pattern = pattern.rstrip("/")
        anchored = pattern.startswith("/") or "/" in pattern
        pattern = pattern.lstrip("/")
        if pattern:
            rules.append(ExcludeRule(pattern, directory_only, anchored))
    return rules


def _is_excluded(rel_path: str, is_dir: bool, rules: Sequence[ExcludeRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _iter_files(
    root: Path, extensions: tuple[str, ...], rules: Sequence[ExcludeRule]
) -> Iterator[tuple[str, Path]]:
    # os.walk skips directories it cannot list instead of raising.
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if name in _EXCLUDED_DIRS or _is_excluded(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            if not filename.endswith(extensions):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_excluded(rel_path, False, rules):
                continue
            path = current_dir / filename
            # Dangling links and entries that fail to stat are skipped, not fatal.
            if not path.is_file():
                continue
            yield rel_path, path


class TreeLoader:
    """Walks a tree and returns its code files keyed by tree-relative path."""

    def __init__(
        self,
        normalizer: Normalizer | None = None,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.normalizer = normalizer or Normalizer()
        self.extensions = tuple(extensions)
        self.rules = build_exclude_rules(exclude_paths)

    def load(self, root: str | Path) -> Dict[str, NormalizedFile]:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise LoadError(root, "path not found")
        if not root_path.is_dir():
            raise LoadError(root, "not a directory")

        files: Dict[str, NormalizedFile] = {}
        for rel_path, path in _iter_files(root_path, self.extensions, self.rules):
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                raise LoadError(path, exc.strerror or str(exc)) from exc
            files[rel_path] = self.normalizer.normalize_file(rel_path, text)
        _logger.debug("Loaded %d code files from %s", len(files), root_path)
        return files


def drop_skipped(files: Mapping[str, NormalizedFile], skipped: Iterable[str]) -> Dict[str, NormalizedFile]:
    """Remove files whose basename matches an entry in ``skipped``, ignoring case."""
    names = {name.strip().casefold() for name in skipped if name.strip()}
    kept: Dict[str, NormalizedFile] = {}
    for path, file in files.items():
        if Path(path).name.casefold() in names:
            _logger.info("Skipping target file %s", path)
            continue
        kept[path] = file
    return kept


__all__ = ["ExcludeRule", "LoadError", "TreeLoader", "build_exclude_rules", "drop_skipped"]
