from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from korean_work.domain.enums import QuizLevel

logger = logging.getLogger(__name__)

_DEFAULT_QUIZ_COUNTS: dict[int, int] = {
    QuizLevel.LETTER: 24,
    QuizLevel.SYLLABLE: 15,
    QuizLevel.SYLLABLE_WITH_FINAL: 15,
}

ENV_REMOTE_URL = "KOREAN_WORK_SUPABASE_URL"
ENV_REMOTE_KEY = "KOREAN_WORK_SUPABASE_KEY"


def project_root() -> Path:
    # korean_work/services/settings_store.py -> services -> korean_work -> <project_root>
    return Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class RemoteConfig:
    url: str = ""
    api_key: str = ""
    user_id: str = "demo"

    @property
    def enabled(self) -> bool:
        return bool(self.url and self.api_key)


class SettingsStore:
    """YAML-backed settings store.

    Responsibilities:
      - Load/save settings.yaml atomically
      - Provide typed helpers for quiz sizes, data location and the remote database

    Example settings.yaml:

        quiz_counts: {1: 24, 2: 15, 3: 15}
        choices_count: 4
        max_attempts_factor: 50
        data_dir: data
        remote: {url: https://xyz.supabase.co, api_key: ..., user_id: demo}
    """

    def __init__(self, settings_path: str | Path | None = None) -> None:
        if settings_path is None:
            self._path = project_root() / "settings.yaml"
        else:
            self._path = Path(settings_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        try:
            p = self._path
            if not p.exists():
                return {}
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
                return data if isinstance(data, dict) else {}
        except (OSError, UnicodeError, yaml.YAMLError) as e:
            logger.debug("Ignoring unreadable settings %s: %s", self._path, e)
            return {}

    def save(self, data: dict[str, Any]) -> None:
        try:
            p = self._path
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp = p.with_suffix(p.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                yaml.safe_dump(data or {}, f, allow_unicode=True, sort_keys=True)
            os.replace(str(tmp), str(p))
        except (OSError, yaml.YAMLError) as e:
            # Best-effort persistence.
            logger.warning("Failed to save settings to %s: %s", self._path, e)

    # --- Typed helpers ---

    @staticmethod
    def _positive_int(value: Any, default: int) -> int:
        if isinstance(value, bool):
            return default
        try:
            v = int(value)
        except (TypeError, ValueError, OverflowError):
            return default
        return v if v > 0 else default

    def quiz_count(self, level: QuizLevel | int) -> int:
        lv = int(level)
        default = _DEFAULT_QUIZ_COUNTS.get(lv, 10)
        counts = self.load().get("quiz_counts") or {}
        if not isinstance(counts, dict):
            return default
        raw = counts.get(lv, counts.get(str(lv), default))
        return self._positive_int(raw, default)

    def set_quiz_count(self, level: QuizLevel | int, value: int) -> None:
        s = self.load()
        counts = s.get("quiz_counts") or {}
        if not isinstance(counts, dict):
            counts = {}
        counts[int(level)] = max(1, int(value))
        s["quiz_counts"] = counts
        self.save(s)

    def choices_count(self) -> int:
        return self._positive_int(self.load().get("choices_count"), 4)

    def max_attempts_factor(self) -> int:
        return self._positive_int(self.load().get("max_attempts_factor"), 50)

    def data_dir(self) -> Path:
        raw = self.load().get("data_dir")
        if isinstance(raw, str) and raw.strip():
            p = Path(raw.strip()).expanduser()
            return p if p.is_absolute() else self._path.parent / p
        return project_root() / "data"

    def remote_config(self) -> RemoteConfig:
        """Return remote database settings; environment variables win over the file."""
        remote = self.load().get("remote") or {}
        if not isinstance(remote, dict):
            remote = {}

        def _str(key: str, default: str = "") -> str:
            v = remote.get(key)
            return v.strip() if isinstance(v, str) and v.strip() else default

        url = (os.environ.get(ENV_REMOTE_URL) or "").strip() or _str("url")
        key = (os.environ.get(ENV_REMOTE_KEY) or "").strip() or _str("api_key")
        return RemoteConfig(url=url.rstrip("/"), api_key=key, user_id=_str("user_id", "demo"))
