"""Tests for ratchet.config."""

import pytest
from pydantic import ValidationError

from ratchet.config import RatchetSettings


ENV_VARS = ["RATCHET_PREFIX", "RATCHET_SLACK", "RATCHET_GIT_BINARY", "RATCHET_GIT_TIMEOUT", "RATCHET_REPO_PATH"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = RatchetSettings()

    assert settings.prefix == "default"
    assert settings.slack == 0
    assert settings.git_binary == "git"
    assert settings.git_timeout == 60.0
    assert settings.repo_path is None


def test_loads_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("RATCHET_PREFIX", "web")
    monkeypatch.setenv("RATCHET_SLACK", "3")
    monkeypatch.setenv("RATCHET_REPO_PATH", str(tmp_path))

    settings = RatchetSettings()

    assert settings.prefix == "web"
    assert settings.slack == 3
    assert settings.repo_path == tmp_path


def test_note_refs():
    settings = RatchetSettings(prefix="web")

    assert settings.measures_ref == "git-ratchet-1-web"
    assert settings.exclusions_ref == "git-ratchet-excuse-1-web"


@pytest.mark.parametrize("overrides", [{"slack": -1}, {"prefix": ""}, {"git_timeout": 0}])
def test_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        RatchetSettings(**overrides)


def test_timeout_can_be_disabled():
    assert RatchetSettings(git_timeout=None).git_timeout is None
