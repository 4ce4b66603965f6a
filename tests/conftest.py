# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

import theme
from config import StoreConfig
from storage import TaskStore

from .fakes import TickingClock


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ANSI colour out of asserted output regardless of FORCE_COLOR."""
    monkeypatch.setattr(theme, "_ENABLE", False)


@pytest.fixture()
def tasks_file(tmp_path: Path) -> Path:
    return tmp_path / "tasks.json"


@pytest.fixture()
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture()
def store(tasks_file: Path, clock: TickingClock) -> TaskStore:
    return TaskStore(StoreConfig(path=tasks_file), clock=clock)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()
