"""Source tree resemblance auditing."""

from .aggregator import aggregate, overall_score, sort_results
from .auditor import Auditor
from .config import ConfigError, VenatusConfig, load_config
from .gate import FilenameGate
from .matcher import Matcher
from .models import NO_MATCH, AuditReport, MatchResult, NormalizedFile
from .normalizer import CommentSyntax, Normalizer
from .similarity import SimilarityMetric
from .tree_loader import LoadError, TreeLoader

__all__ = [
    "NO_MATCH",
    "AuditReport",
    "Auditor",
    "CommentSyntax",
    "ConfigError",
    "FilenameGate",
    "LoadError",
    "MatchResult",
    "Matcher",
    "NormalizedFile",
    "Normalizer",
    "SimilarityMetric",
    "TreeLoader",
    "VenatusConfig",
    "aggregate",
    "load_config",
    "overall_score",
    "sort_results",
]
