"""Configuration loading for venatus (.venatus.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".venatus.yml"

DEFAULT_EXTENSIONS = (".c", ".h")


class ConfigError(RuntimeError):
    """Raised when the configuration is missing required values or cannot be parsed."""


@dataclass(frozen=True)
class MatchingConfig:
    """Tuning for the similarity metric and filename gate."""

    # Keeps very dissimilar files from stalling a run. Raise it if files that
    # should be alike are scoring low.
    diff_timeout: float = 4.0
    diff_edit_cost: int = 4
    filename_threshold: float = 0.5


@dataclass(frozen=True)
class CommentConfig:
    """Comment markers stripped before comparison."""

    line: str = "//"
    block_open: str = "/*"
    block_close: str = "*/"


@dataclass
class VenatusConfig:
    """Represents the settings for one audit run."""

    root: Path
    source: Optional[Path] = None
    target: Optional[Path] = None
    skip: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_paths: List[str] = field(default_factory=list)
    workers: int = 1
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    comments: CommentConfig = field(default_factory=CommentConfig)

    def require_paths(self) -> tuple[Path, Path]:
        """Return the source and target roots, failing if either is unset."""
        if self.source is None:
            raise ConfigError("--source not specified")
        if self.target is None:
            raise ConfigError("--target not specified")
        return self.source, self.target


def load_config(config_path: Path) -> VenatusConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return VenatusConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source = _as_str(data.get("source"))
    target = _as_str(data.get("target"))

    matching = MatchingConfig()
    matching_data = _as_dict(data.get("matching"))
    if matching_data:
        timeout = _as_float(matching_data.get("diff_timeout"))
        edit_cost = _as_int(matching_data.get("diff_edit_cost"))
        threshold = _as_float(matching_data.get("filename_threshold"))
        matching = MatchingConfig(
            diff_timeout=timeout if timeout is not None else matching.diff_timeout,
            diff_edit_cost=edit_cost if edit_cost is not None else matching.diff_edit_cost,
            filename_threshold=threshold if threshold is not None else matching.filename_threshold,
        )

    comments = CommentConfig()
    comment_data = _as_dict(data.get("comments"))
    if comment_data:
        comments = CommentConfig(
            line=_as_str(comment_data.get("line")) or comments.line,
            block_open=_as_str(comment_data.get("block_open")) or comments.block_open,
            block_close=_as_str(comment_data.get("block_close")) or comments.block_close,
        )

    config = VenatusConfig(
        root=root,
        source=root / source if source else None,
        target=root / target if target else None,
        skip=_as_str_list(data.get("skip")),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        matching=matching,
        comments=comments,
    )
    if "extensions" in data:
        config.extensions = _as_str_list(data.get("extensions"))
    workers = _as_int(data.get("workers"))
    if workers is not None:
        config.workers = workers

    validate_config(config)
    return config


def apply_overrides(
    config: VenatusConfig,
    *,
    source: str | None = None,
    target: str | None = None,
    skip: Sequence[str] | None = None,
    extensions: Sequence[str] | None = None,
    workers: int | None = None,
    filename_threshold: float | None = None,
    diff_timeout: float | None = None,
) -> VenatusConfig:
    """Return ``config`` with command-line values layered on top."""
    result = replace(config)
    if source:
        result.source = Path(source).expanduser()
    if target:
        result.target = Path(target).expanduser()
    if skip:
        result.skip = list(skip)
    if extensions:
        result.extensions = list(extensions)
    if workers is not None:
        result.workers = workers
    if filename_threshold is not None:
        result.matching = replace(result.matching, filename_threshold=filename_threshold)
    if diff_timeout is not None:
        result.matching = replace(result.matching, diff_timeout=diff_timeout)
    validate_config(result)
    return result


def validate_config(config: VenatusConfig) -> None:
    """Reject settings the matching engine cannot run with."""
    threshold = config.matching.filename_threshold
    if not 0.0 <= threshold <= 1.0:
        raise ConfigError(f"filename_threshold must be between 0 and 1, got {threshold}")
    if config.matching.diff_timeout < 0:
        raise ConfigError("diff_timeout must not be negative")
    if config.matching.diff_edit_cost < 1:
        raise ConfigError("diff_edit_cost must be at least 1")
    if config.workers < 1:
        raise ConfigError("workers must be at least 1")
    if not config.extensions:
        raise ConfigError("at least one file extension is required")
    if not all((config.comments.line, config.comments.block_open, config.comments.block_close)):
        raise ConfigError("comment markers must not be empty")


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
