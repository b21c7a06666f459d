"""Unit tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError
import pytest

from galaxyerp.application.config import Environment, JWTSettings, load_config, resolve_environment
from galaxyerp.application.config.settings import ENV_VAR, env_file_for

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def test_resolve_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_VAR, "PROD")

    assert resolve_environment() == Environment.PROD
    assert resolve_environment("test") == Environment.TEST
    assert resolve_environment("staging") == Environment.DEV


def test_env_file_for() -> None:
    assert str(env_file_for(Environment.PROD)) == ".env"
    assert env_file_for(Environment.TEST).as_posix() == "configs/test.env"


def test_environment_variables_override_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERVER_PORT", "9090")
    monkeypatch.setenv("JWT_EXPIRE_HOURS", "2")

    config = load_config("test")

    assert config.env == Environment.TEST
    assert config.environment == "test"
    assert config.server.port == 9090
    assert config.jwt.expire_hours == 2
    assert config.is_production is False


def test_overrides_replace_sections() -> None:
    config = load_config("test", jwt=JWTSettings(secret="override"))

    assert config.jwt.secret == "override"


def test_jwt_algorithm_must_be_hmac() -> None:
    assert JWTSettings(algorithm="hs512").algorithm == "HS512"
    with pytest.raises(ValidationError):
        JWTSettings(algorithm="RS256")


def test_load_dev_config_from_project_root(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(PROJECT_ROOT)

    config = load_config("dev")

    assert config.env == Environment.DEV
    assert config.database.url == "sqlite+aiosqlite:///./galaxyerp.db"
    assert config.server.host == "127.0.0.1"
    assert config.jwt.secret == "dev-secret-change-me"
    assert config.log.enable_file is False
    assert config.cors.origins == ["http://localhost:3000"]


def test_load_test_config_from_project_root(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(PROJECT_ROOT)

    config = load_config("test")

    assert config.database.url == "sqlite+aiosqlite:///:memory:"
    assert config.security.bcrypt_rounds == 4
    assert config.log.enable_console is False


def test_section_ignores_other_sections_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(PROJECT_ROOT)

    settings = JWTSettings(_env_file="configs/test.env")

    assert settings.secret == "test-secret"
