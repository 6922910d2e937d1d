import json

import pytest

from real_or_ai.identity import FileIdentityProvider, StaticIdentityProvider


def test_file_identity_is_created_once_and_reused(tmp_path) -> None:
    path = tmp_path / "state" / "identity.json"

    first = FileIdentityProvider(path).user_token()
    second = FileIdentityProvider(path).user_token()

    assert first == second
    assert json.loads(path.read_text(encoding="utf-8")) == {"user_id": first}


def test_file_identity_replaces_corrupted_file(tmp_path) -> None:
    path = tmp_path / "identity.json"
    path.write_text("{not json", encoding="utf-8")

    token = FileIdentityProvider(path).user_token()

    assert token
    assert json.loads(path.read_text(encoding="utf-8"))["user_id"] == token


def test_file_identity_defaults_to_env_path(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("IDENTITY_FILE", str(tmp_path / "from-env.json"))

    provider = FileIdentityProvider()
    provider.user_token()

    assert (tmp_path / "from-env.json").exists()


def test_static_identity_requires_a_token() -> None:
    assert StaticIdentityProvider("abc").user_token() == "abc"
    with pytest.raises(ValueError):
        StaticIdentityProvider("")
