from __future__ import annotations

from pathlib import Path

import pytest

from mdlatex.core import user_dir


@pytest.fixture(autouse=True)
def isolated_cache_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep every test away from the real user cache."""
    cache_root = tmp_path / "mdlatex-cache"
    monkeypatch.setenv("MDLATEX_CACHE_DIR", str(cache_root))
    monkeypatch.setattr(user_dir, "_USER_DIR", None)
    return cache_root
