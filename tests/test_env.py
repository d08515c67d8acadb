import logging

import pytest

from docuflow import env
from docuflow.constants import DEFAULT_BASE_URL, LOGGER


def _clear(monkeypatch) -> None:
    for key in (
        "DOCUFLOW_API_BASE_URL",
        "DOCUFLOW_API_TIMEOUT",
        "DOCUFLOW_TOKEN_STORE_PATH",
        "DOCUFLOW_LOGIN_PATH",
        "DOCUFLOW_API_DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch) -> None:
    _clear(monkeypatch)

    settings = env.load_settings()

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout == 20.0
    assert settings.token_store_path == ".tokens.json"
    assert settings.login_path == "/login"
    assert settings.debug is False


def test_reads_environment(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("DOCUFLOW_API_BASE_URL", "https://api.docuflow.example.com/api/")
    monkeypatch.setenv("DOCUFLOW_API_TIMEOUT", "3")
    monkeypatch.setenv("DOCUFLOW_LOGIN_PATH", "/signin")
    monkeypatch.setenv("DOCUFLOW_API_DEBUG", "yes")

    settings = env.load_settings()

    assert settings.base_url == "https://api.docuflow.example.com/api"
    assert settings.timeout == 3.0
    assert settings.login_path == "/signin"
    assert settings.debug is True


@pytest.mark.parametrize("value", ["ftp://files.docuflow.com", "not a url"])
def test_invalid_base_url(monkeypatch, value) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("DOCUFLOW_API_BASE_URL", value)

    with pytest.raises(RuntimeError, match="DOCUFLOW_API_BASE_URL"):
        env.load_settings()


@pytest.mark.parametrize("value", ["soon", "0", "-1"])
def test_invalid_timeout(monkeypatch, value) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("DOCUFLOW_API_TIMEOUT", value)

    with pytest.raises(RuntimeError, match="DOCUFLOW_API_TIMEOUT"):
        env.load_settings()


@pytest.mark.parametrize("value,expected", [("1", True), ("On", True), ("0", False), (None, False)])
def test_is_truthy(value, expected) -> None:
    assert env.is_truthy(value) is expected


def test_setup_logging_enables_info(monkeypatch) -> None:
    monkeypatch.setattr(LOGGER, "level", logging.NOTSET)

    assert env.setup_logging(True) is True
    assert LOGGER.level == logging.INFO


def test_setup_logging_disabled(monkeypatch) -> None:
    monkeypatch.setattr(LOGGER, "level", logging.NOTSET)

    assert env.setup_logging(False) is False
    assert LOGGER.level == logging.NOTSET


def test_load_env_reads_dotenv(monkeypatch, tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("DOCUFLOW_LOGIN_PATH=/from-dotenv\n", encoding="utf-8")
    monkeypatch.setattr(env, "ENV_FILE", env_file)
    # Registers the variable with monkeypatch so the value load_dotenv writes is undone.
    monkeypatch.setenv("DOCUFLOW_LOGIN_PATH", "")
    monkeypatch.delenv("DOCUFLOW_LOGIN_PATH")

    env.load_env()

    assert env.load_settings().login_path == "/from-dotenv"
