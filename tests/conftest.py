# tests/conftest.py
import random
from pathlib import Path

import pytest

from korean_work.controllers.question_bank_repository import QuestionBankRepository
from korean_work.services.session_store import SessionStore
from korean_work.services.settings_store import SettingsStore

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20240101)


@pytest.fixture
def bank() -> QuestionBankRepository:
    """Repository over the bundled data/ directory."""
    return QuestionBankRepository(data_dir=PROJECT_ROOT / "data")


@pytest.fixture
def settings(tmp_path: Path) -> SettingsStore:
    """Settings pointed at a temp file so tests never touch the real settings.yaml."""
    return SettingsStore(tmp_path / "settings.yaml")


@pytest.fixture
def session_store(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / "state" / "session.yaml")
