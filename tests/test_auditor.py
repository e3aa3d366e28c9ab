"""End-to-end tests for venatus.auditor."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.tree_builder import TreeBuilder
from venatus.auditor import Auditor
from venatus.config import VenatusConfig
from venatus.models import NO_MATCH
from venatus.tree_loader import LoadError


def _config(trees: TreeBuilder, **overrides: object) -> VenatusConfig:
    config = VenatusConfig(root=trees.base, source=trees.source, target=trees.target)
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


def test_whitespace_and_comment_changes_match_exactly(trees: TreeBuilder) -> None:
    trees.write_source({"a.c": "int main(){return 0;}\n"})
    trees.write_target({"a.c": "// comment\nint main() { return 0; }\n"})

    report = Auditor(_config(trees)).run(trees.source, trees.target)

    (result,) = report.results
    assert result.target_path == "a.c"
    assert result.matched_path == "a.c"
    assert result.similarity == 1.0
    assert result.line_count == 2
    assert report.overall_score == 1.0


def test_report_is_weighted_and_sorted(trees: TreeBuilder) -> None:
    trees.write_source({"core.c": "int core;\n"})
    trees.write_target(
        {
            "core.c": "int core;\n",
            "brand_new_module.c": "".join(f"int v{i};\n" for i in range(9)),
        }
    )

    report = Auditor(_config(trees)).run(trees.source, trees.target)

    assert [result.target_path for result in report.results] == ["brand_new_module.c", "core.c"]
    assert report.results[0].matched_path == NO_MATCH
    assert report.total_lines == 10
    assert report.overall_score == pytest.approx(0.1)


def test_skipped_targets_are_left_out(trees: TreeBuilder) -> None:
    trees.write_source({"a.c": "int a;\n"})
    trees.write_target({"a.c": "int a;\n", "gen/Version.h": "#define V 2\n"})

    report = Auditor(_config(trees)).run(trees.source, trees.target, skip=["VERSION.H"])

    assert [result.target_path for result in report.results] == ["a.c"]


def test_empty_target_tree_reports_neutral_score(trees: TreeBuilder) -> None:
    trees.write_source({"a.c": "int a;\n"})

    report = Auditor(_config(trees)).run(trees.source, trees.target)

    assert report.results == ()
    assert report.total_lines == 0
    assert report.overall_score == 0.0


def test_parallel_run_matches_serial_run(trees: TreeBuilder) -> None:
    trees.write_source(
        {
            "list.c": "void push(int v);\nvoid pop(void);\n",
            "list.h": "void push(int v);\n",
            "map.c": "void put(int k);\n",
        }
    )
    trees.write_target(
        {
            "list.c": "void push(int value);\nvoid pop(void);\n",
            "map.c": "void put(int key);\n",
            "fresh.c": "int fresh;\n",
        }
    )

    serial = Auditor(_config(trees)).run(trees.source, trees.target)
    parallel = Auditor(_config(trees, workers=3)).run(trees.source, trees.target)

    assert parallel == serial


def test_missing_source_tree_fails_fast(trees: TreeBuilder, tmp_path: Path) -> None:
    trees.write_target({"a.c": "int a;\n"})
    with pytest.raises(LoadError):
        Auditor(_config(trees)).run(tmp_path / "absent", trees.target)
