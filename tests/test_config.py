"""Tests for ``SmfSettings`` env-driven configuration."""
from __future__ import annotations

import pydantic
import pytest

from smfcodec.config import SmfSettings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SMF_LOG_LEVEL", "SMF_DEFAULT_PPQ", "SMF_JSON_INDENT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = get_settings()
    assert settings.log_level == "WARNING"
    assert settings.default_ppq == 0xF0
    assert settings.json_indent == 2


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMF_LOG_LEVEL", "debug")
    monkeypatch.setenv("SMF_DEFAULT_PPQ", "960")
    monkeypatch.setenv("SMF_JSON_INDENT", "0")
    settings = get_settings()
    assert settings.log_level == "DEBUG"
    assert settings.default_ppq == 960
    assert settings.json_indent == 0


def test_unknown_log_level_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMF_LOG_LEVEL", "chatty")
    with pytest.raises(pydantic.ValidationError):
        SmfSettings()


@pytest.mark.parametrize("ppq", ["0", "32768", "abc"])
def test_default_ppq_bounds(monkeypatch: pytest.MonkeyPatch, ppq: str) -> None:
    monkeypatch.setenv("SMF_DEFAULT_PPQ", ppq)
    with pytest.raises(pydantic.ValidationError):
        SmfSettings()
