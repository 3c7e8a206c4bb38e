"""Unit tests for /lobbychess/core/config.py"""

import pytest
from pydantic import ValidationError

from lobbychess.core.config import EngineSettings
from lobbychess.core.shared_types import DisconnectPolicy


def test_defaults() -> None:
    settings = EngineSettings()
    assert not settings.strict_self_check
    assert not settings.fifty_move_resets
    assert settings.disconnect_policy == DisconnectPolicy.RELEASE_SEAT
    assert settings.log_level == "INFO"


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in EngineSettings.model_fields:
        monkeypatch.delenv(f"LOBBYCHESS_{name.upper()}", raising=False)
    assert EngineSettings.from_env() == EngineSettings()


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOBBYCHESS_STRICT_SELF_CHECK", "true")
    monkeypatch.setenv("LOBBYCHESS_FIFTY_MOVE_RESETS", "1")
    monkeypatch.setenv("LOBBYCHESS_DISCONNECT_POLICY", "delete_game")
    monkeypatch.setenv("LOBBYCHESS_LOG_LEVEL", "debug")
    settings = EngineSettings.from_env()
    assert settings.strict_self_check
    assert settings.fifty_move_resets
    assert settings.disconnect_policy == DisconnectPolicy.DELETE_GAME
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["0", "false", "no", "off", "nope"])
def test_falsy_flags(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("LOBBYCHESS_STRICT_SELF_CHECK", raw)
    assert not EngineSettings.from_env().strict_self_check


def test_unknown_disconnect_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOBBYCHESS_DISCONNECT_POLICY", "explode")
    with pytest.raises(ValidationError):
        EngineSettings.from_env()


def test_unknown_log_level() -> None:
    with pytest.raises(ValidationError):
        EngineSettings(log_level="chatty")
