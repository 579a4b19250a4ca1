"""Shared pytest fixtures for momentval tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from momentval.domain.constraints import MomentConfig


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test from an empty directory with no momentval env vars.

    Keeps config discovery from walking into a real momentval.toml.
    """
    for name in ("MOMENTVAL_CONFIG", "MOMENTVAL_EVALUATION__DEFAULT_TIMEZONE"):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config() -> MomentConfig:
    """An empty moment configuration."""
    return MomentConfig()


@pytest.fixture
def write_config() -> Callable[[Path, str], Path]:
    """Return a helper that writes a momentval.toml into a directory."""

    def _write(directory: Path, content: str) -> Path:
        path = directory / "momentval.toml"
        path.write_text(content, encoding="utf-8")
        return path

    return _write
