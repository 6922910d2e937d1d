import os

from real_or_ai.config import DEFAULT_API_BASE, QuizSettings, load_settings
from real_or_ai.utils.env_utils import append_to_env_file, load_env


def test_settings_defaults() -> None:
    settings = QuizSettings.from_env({})

    assert settings.api_base == DEFAULT_API_BASE
    assert settings.puzzle_path is None
    assert settings.leaderboard_limit == 10
    assert settings.request_timeout_seconds == 15.0


def test_settings_read_environment_and_ignore_bad_numbers() -> None:
    settings = QuizSettings.from_env(
        {
            "API_BASE": "https://quiz.example",
            "PUZZLE_PATH": "today.json",
            "LEADERBOARD_LIMIT": "zero",
            "REQUEST_TIMEOUT_SECONDS": "-3",
        }
    )

    assert settings.api_base == "https://quiz.example"
    assert settings.puzzle_path == "today.json"
    assert settings.leaderboard_limit == 10
    assert settings.request_timeout_seconds == 15.0


def test_override_skips_none_values() -> None:
    settings = QuizSettings.from_env({"API_BASE": "https://a"}).override(api_base=None, leaderboard_limit=3)

    assert settings.api_base == "https://a"
    assert settings.leaderboard_limit == 3


def test_env_file_does_not_override_process_environment(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text('# comment\nAPI_BASE="https://from-file"\nLEADERBOARD_LIMIT=4\n', encoding="utf-8")
    monkeypatch.setenv("API_BASE", "https://from-process")
    monkeypatch.delenv("LEADERBOARD_LIMIT", raising=False)

    settings = load_settings(str(env_file))

    assert settings.api_base == "https://from-process"
    assert settings.leaderboard_limit == 4
    monkeypatch.delenv("LEADERBOARD_LIMIT")


def test_append_to_env_file_updates_in_place(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / ".env"

    append_to_env_file(str(env_file), "API_BASE", "https://one")
    append_to_env_file(str(env_file), "API_BASE", "https://two")

    lines = env_file.read_text(encoding="utf-8").splitlines()
    assert lines.count('API_BASE="https://two"') == 1
    assert not any("https://one" in line for line in lines)

    monkeypatch.delenv("API_BASE", raising=False)
    load_env(str(env_file))
    assert os.environ["API_BASE"] == "https://two"
    monkeypatch.delenv("API_BASE")
