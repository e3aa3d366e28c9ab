"""Comment stripping and whitespace canonicalisation for source text.

Classification is line based: a line is a comment when it starts with the
line-comment marker, starts with the block-open marker, or sits inside an
unterminated block comment. Markers inside string literals are not
recognised as such; this is a heuristic, not a lexer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

from .config import CommentConfig
from .models import NormalizedFile

_DELIMITER_SPACING = re.compile(r" ?([(){}\[\];,]) ?")


@dataclass(frozen=True)
class CommentSyntax:
    """Markers that introduce line and block comments."""

    line: str = "//"
    block_open: str = "/*"
    block_close: str = "*/"

    @classmethod
    def from_config(cls, config: CommentConfig) -> "CommentSyntax":
        return cls(line=config.line, block_open=config.block_open, block_close=config.block_close)


def count_lines(text: str) -> int:
    """Return the number of newline-terminated lines in ``text``."""
    return text.count("\n")


def split_lines(text: str) -> List[str]:
    """Split on newlines only, matching ``count_lines``; a trailing carriage return is dropped."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def normalize_line(line: str) -> str:
    """Collapse whitespace runs to single spaces and drop spaces around delimiters.

    ``int main() { return 0; }`` and ``int main(){return 0;}`` both become the
    latter; spaces between words and operators are kept.
    """
    return _DELIMITER_SPACING.sub(r"\1", " ".join(line.split()))


class Normalizer:
    """Reduces raw file text to the canonical form used for comparison."""

    def __init__(self, syntax: CommentSyntax | None = None) -> None:
        self.syntax = syntax or CommentSyntax()

    def normalize(self, text: str) -> str:
        """Drop comment lines and collapse whitespace in the lines that remain."""
        kept: List[str] = []
        in_block = False
        for line in split_lines(text):
            is_comment, in_block = self._classify(line, in_block)
            if not is_comment:
                kept.append(normalize_line(line) + "\n")
        return "".join(kept)

    def normalize_file(self, path: str, text: str) -> NormalizedFile:
        """Normalize ``text``; the line count is taken from the raw text."""
        return NormalizedFile(path=path, content=self.normalize(text), line_count=count_lines(text))

    def _classify(self, line: str, in_block: bool) -> Tuple[bool, bool]:
        # Returns (is_comment, still_in_block). A closing marker ends the block
        # from the next line on; the closing line itself stays a comment.
        line = line.strip()
        if not line:
            return in_block, in_block
        is_comment = in_block
        still_in_block = in_block
        if line.startswith(self.syntax.block_open):
            is_comment = True
            still_in_block = True
        if self.syntax.block_close in line:
            still_in_block = False
        if line.startswith(self.syntax.line):
            is_comment = True
        return is_comment, still_in_block


__all__ = ["CommentSyntax", "Normalizer", "count_lines", "normalize_line", "split_lines"]
