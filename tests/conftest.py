from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.tree_builder import TreeBuilder


@pytest.fixture
def trees(tmp_path: Path) -> TreeBuilder:
    """Provide empty source and target trees rooted at the pytest tmp_path."""
    return TreeBuilder(tmp_path)
