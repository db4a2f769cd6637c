from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from korean_work.domain.enums import LearnMode
from korean_work.domain.models import SessionResult
from korean_work.services.settings_store import project_root

logger = logging.getLogger(__name__)

_LAST_SESSION_KEY = "last_session"
_UNLOCK_KEY = "emoji_unlocked_level"


class SessionStore:
    """Client-local record of the last quiz session and emoji level unlocks.

    Stored as a small YAML file (default: <project_root>/.state/session.yaml).
    Reads are tolerant: a missing or malformed file simply means "no history".
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else project_root() / ".state" / "session.yaml"

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        try:
            if not self._path.exists():
                return {}
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
        except (OSError, UnicodeError, yaml.YAMLError) as e:
            logger.debug("Ignoring unreadable session file %s: %s", self._path, e)
            return {}

    def _save(self, data: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, allow_unicode=True, sort_keys=True)
            os.replace(str(tmp), str(self._path))
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to persist session state to %s: %s", self._path, e)

    # --- Last session ---

    def save_result(self, result: SessionResult) -> None:
        data = self._load()
        data[_LAST_SESSION_KEY] = result.to_dict()
        self._save(data)

    def load_result(self) -> SessionResult | None:
        raw = self._load().get(_LAST_SESSION_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return SessionResult(
                last_mode=LearnMode(raw.get("last_mode")),
                correct=int(raw.get("correct", 0)),
                wrong=int(raw.get("wrong", 0)),
                updated_at=str(raw.get("updated_at") or ""),
            )
        except (TypeError, ValueError, OverflowError):
            logger.debug("Malformed last session entry: %r", raw)
            return None

    # --- Emoji vocab unlocks ---

    def get_unlocked_level(self) -> int:
        try:
            v = int(self._load().get(_UNLOCK_KEY, 1))
        except (TypeError, ValueError, OverflowError):
            return 1
        return v if v in (1, 2, 3) else 1

    def set_unlocked_level(self, level: int) -> None:
        data = self._load()
        data[_UNLOCK_KEY] = max(1, min(3, int(level)))
        self._save(data)
