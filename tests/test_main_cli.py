from pathlib import Path

import pytest

import main
from korean_work.services.remote_quiz_store import RemoteQuizStore
from korean_work.services.session_store import SessionStore
from korean_work.services.settings_store import ENV_REMOTE_KEY, ENV_REMOTE_URL, SettingsStore


def _answers(picks: list[str]):
    it = iter(picks)
    return lambda prompt: next(it)


def test_parser_defaults() -> None:
    args = main.build_parser().parse_args([])
    assert args.level == 2
    assert args.count == 0
    assert args.seed is None


def test_parser_rejects_unknown_level() -> None:
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["--level", "4"])


def test_main_runs_a_short_set(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr("builtins.input", _answers(["1", "2", "x"]))
    state = tmp_path / "session.yaml"

    rc = main.main(
        ["--level", "3", "--count", "3", "--seed", "4",
         "--settings", str(tmp_path / "settings.yaml"), "--state", str(state)]
    )

    assert rc == 0
    out = capsys.readouterr().out
    assert "[1/3] What syllable is this?" in out
    assert "Done:" in out
    result = SessionStore(state).load_result()
    assert result is not None
    assert result.correct + result.wrong == 3


def test_main_interrupted(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _eof(prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)
    rc = main.main(["--level", "1", "--settings", str(tmp_path / "s.yaml"), "--state", str(tmp_path / "st.yaml")])
    assert rc == 130


def test_main_rejects_oversized_set(tmp_path: Path, capsys) -> None:
    rc = main.main(
        ["--level", "2", "--count", "200",
         "--settings", str(tmp_path / "s.yaml"), "--state", str(tmp_path / "st.yaml")]
    )
    assert rc == 2
    assert "[ERROR]" in capsys.readouterr().err


def test_main_emoji_mode_unlocks_level2(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr("builtins.input", lambda prompt: "1")
    state = tmp_path / "session.yaml"

    rc = main.main(
        ["--mode", "emoji", "--level", "1", "--seed", "3",
         "--settings", str(tmp_path / "s.yaml"), "--state", str(state)]
    )

    assert rc == 0
    assert "Unlocked level: 2" in capsys.readouterr().out
    store = SessionStore(state)
    assert store.get_unlocked_level() == 2
    assert store.load_result().last_mode.value == "emoji"


def test_main_speech_mode(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("builtins.input", lambda prompt: "2")
    state = tmp_path / "session.yaml"
    rc = main.main(
        ["--mode", "speech", "--count", "4",
         "--settings", str(tmp_path / "s.yaml"), "--state", str(state)]
    )
    assert rc == 0
    result = SessionStore(state).load_result()
    assert result.total == 4


def test_main_korean_mode_without_remote(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.delenv(ENV_REMOTE_URL, raising=False)
    monkeypatch.delenv(ENV_REMOTE_KEY, raising=False)
    rc = main.main(["--mode", "korean", "--settings", str(tmp_path / "s.yaml"), "--state", str(tmp_path / "st.yaml")])
    assert rc == 1
    assert "No korean questions" in capsys.readouterr().err


def test_build_remote_follows_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_REMOTE_URL, raising=False)
    monkeypatch.delenv(ENV_REMOTE_KEY, raising=False)
    settings = SettingsStore(tmp_path / "s.yaml")
    assert main.build_remote(settings) is None

    settings.save({"remote": {"url": "https://proj.supabase.co", "api_key": "anon"}})
    remote = main.build_remote(settings)
    assert isinstance(remote, RemoteQuizStore)
    assert remote.is_enabled()
