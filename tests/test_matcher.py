"""Tests for venatus.matcher."""

from __future__ import annotations

from typing import Dict, List

import pytest

from venatus import matcher as matcher_module
from venatus.matcher import Matcher
from venatus.models import NO_MATCH, MatchResult, NormalizedFile


def _file(path: str, content: str, line_count: int | None = None) -> NormalizedFile:
    lines = content.count("\n") if line_count is None else line_count
    return NormalizedFile(path=path, content=content, line_count=lines)


def _candidates(*files: NormalizedFile) -> Dict[str, NormalizedFile]:
    return {file.path: file for file in files}


def test_picks_highest_scoring_candidate() -> None:
    target = _file("parser.c", "int parse(void) {\nreturn 1;\n}\n")
    candidates = _candidates(
        _file("old/parser.c", "int parse(void) {\nreturn 1;\n}\n"),
        _file("new/parser.c", "void nothing_alike(char *p);\n"),
    )

    result = Matcher().find_best_match(target, candidates)

    assert result == MatchResult(
        target_path="parser.c",
        matched_path="old/parser.c",
        similarity=1.0,
        line_count=3,
    )


def test_candidates_failing_the_gate_are_not_compared(monkeypatch: pytest.MonkeyPatch) -> None:
    matcher = Matcher()
    compared: List[str] = []
    original = matcher.metric.similarity

    def spy(a: str, b: str) -> float:
        compared.append(b)
        return original(a, b)

    monkeypatch.setattr(matcher.metric, "similarity", spy)
    target = _file("lexer.c", "int lex;\n")
    candidates = _candidates(_file("totally_unrelated_name.h", "int lex;\n"))

    result = matcher.find_best_match(target, candidates)

    # Only the basename comparison ran; file contents were never diffed.
    assert compared == ["totally_unrelated_name.h"]
    assert result.matched_path == NO_MATCH
    assert result.similarity == 0.0


def test_no_candidates_yields_no_match_with_own_line_count() -> None:
    result = Matcher().find_best_match(_file("a.c", "x;\ny;\n"), {})
    assert result.matched_path == NO_MATCH
    assert result.matched is False
    assert result.similarity == 0.0
    assert result.line_count == 2


def test_line_count_comes_from_target_not_candidate() -> None:
    target = _file("a.c", "x;\n", line_count=7)
    candidates = _candidates(_file("a.c", "x;\n", line_count=99))
    assert Matcher().find_best_match(target, candidates).line_count == 7


def test_ties_resolve_to_smallest_candidate_path() -> None:
    target = _file("util.c", "int util;\n")
    candidates = {
        "z/util.c": _file("z/util.c", "int util;\n"),
        "a/util.c": _file("a/util.c", "int util;\n"),
        "m/util.c": _file("m/util.c", "int util;\n"),
    }
    result = Matcher().find_best_match(target, candidates)
    assert result.matched_path == "a/util.c"


def test_find_best_match_is_reproducible() -> None:
    target = _file("io.c", "read();\nwrite();\n")
    candidates = _candidates(
        _file("x/io.c", "read();\n"),
        _file("y/io.c", "write();\n"),
        _file("z/io.h", "read();\nwrite();\nclose();\n"),
    )
    matcher = Matcher()
    first = matcher.find_best_match(target, candidates)
    assert all(matcher.find_best_match(target, candidates) == first for _ in range(5))


def test_one_source_may_match_many_targets() -> None:
    source = _candidates(_file("main.c", "int main;\n"))
    targets = {
        "a/main.c": _file("a/main.c", "int main;\n"),
        "b/main.c": _file("b/main.c", "int main;\n"),
    }
    results = Matcher().match_all(targets, source)
    assert [result.matched_path for result in results] == ["main.c", "main.c"]


def test_match_all_reports_each_result() -> None:
    targets = {path: _file(path, "x;\n") for path in ("a.c", "b.c", "c.c")}
    seen: List[str] = []
    results = Matcher().match_all(targets, {}, on_result=lambda result: seen.append(result.target_path))
    assert len(results) == 3
    assert sorted(seen) == ["a.c", "b.c", "c.c"]


def test_match_all_with_no_targets_returns_empty() -> None:
    assert Matcher().match_all({}, _candidates(_file("a.c", "x;\n")), workers=4) == []


def test_match_all_stops_at_first_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    matcher = Matcher()
    calls: List[str] = []

    def failing(target: NormalizedFile, candidates: object) -> MatchResult:
        calls.append(target.path)
        raise ValueError(f"cannot match {target.path}")

    monkeypatch.setattr(matcher, "find_best_match", failing)
    targets = {path: _file(path, "x;\n") for path in ("a.c", "b.c")}

    with pytest.raises(ValueError, match="cannot match a.c"):
        matcher.match_all(targets, {})
    assert calls == ["a.c"]


def test_parallel_matching_agrees_with_inline_matching() -> None:
    source = _candidates(
        _file("lib/list.c", "void push(list *l, int v);\nvoid pop(list *l);\n"),
        _file("lib/map.c", "void put(map *m, int k);\n"),
        _file("lib/list.h", "typedef struct list list;\n"),
    )
    targets = {
        "list.c": _file("list.c", "void push(list *l, int value);\nvoid pop(list *l);\n"),
        "map.c": _file("map.c", "void put(map *m, int key);\n"),
        "tree.c": _file("tree.c", "void insert(tree *t);\n"),
    }
    matcher = Matcher()

    inline = matcher.match_all(targets, source, workers=1)
    parallel = matcher.match_all(targets, source, workers=2)

    key = lambda result: result.target_path  # noqa: E731
    assert sorted(parallel, key=key) == sorted(inline, key=key)


def test_worker_state_is_installed_by_initializer() -> None:
    candidates = _candidates(_file("a.c", "x;\n"))
    matcher_module._init_worker(Matcher().config, candidates)
    try:
        result = matcher_module._match_in_worker(_file("a.c", "x;\n"))
    finally:
        matcher_module._WORKER_STATE = None
    assert result.matched_path == "a.c"
    assert result.similarity == 1.0


def test_parallel_matching_reraises_worker_failure() -> None:
    source = _candidates(_file("a.c", "x;\n"), _file("b.c", "y;\n"))
    targets = {
        "a.c": _file("a.c", "x;\n"),
        # Unusable content makes the worker fail while diffing.
        "b.c": NormalizedFile(path="b.c", content=None, line_count=1),  # type: ignore[arg-type]
    }

    with pytest.raises(TypeError):
        Matcher().match_all(targets, source, workers=2)
