"""Shared fixtures for the vault sandbox tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    """A canonical (realpath) vault directory, so prefix checks see the real location."""
    root = tmp_path / "vault"
    root.mkdir()
    return root.resolve()


@pytest.fixture()
def outside(tmp_path: Path) -> Path:
    """A directory next to the vault that must never be touched through it."""
    target = tmp_path / "outside"
    target.mkdir()
    return target.resolve()


@pytest.fixture()
def make_file() -> Callable[..., Path]:
    def _make(root: Path, relative: str, content: str = "", mtime: float | None = None) -> Path:
        full = root / relative
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(content, encoding="utf-8")
        if mtime is not None:
            os.utime(full, (mtime, mtime))
        return full

    return _make
