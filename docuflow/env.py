from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from .constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, ENV_FILE, LOGGER, LOGIN_PATH

_HTTP_URL = TypeAdapter(AnyHttpUrl)


@dataclass
class ClientSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    token_store_path: str = ".tokens.json"
    login_path: str = LOGIN_PATH
    debug: bool = False


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_float(key: str, default: float) -> float:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number of seconds.")
    if value <= 0:
        raise RuntimeError(f"{key} must be greater than zero.")
    return value


def load_env() -> None:
    if not ENV_FILE.exists():
        return
    load_dotenv(ENV_FILE, override=True)


def validate_base_url(raw: str) -> str:
    try:
        _HTTP_URL.validate_python(raw)
    except ValidationError as error:
        raise RuntimeError(
            "DOCUFLOW_API_BASE_URL must be a valid http(s) URL (for example: "
            "https://api.docuflow.example.com)."
        ) from error
    return raw.rstrip("/")


def load_settings() -> ClientSettings:
    base_url = os.getenv("DOCUFLOW_API_BASE_URL", "").strip() or DEFAULT_BASE_URL
    return ClientSettings(
        base_url=validate_base_url(base_url),
        timeout=_get_env_float("DOCUFLOW_API_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        token_store_path=os.getenv("DOCUFLOW_TOKEN_STORE_PATH", "").strip() or ".tokens.json",
        login_path=os.getenv("DOCUFLOW_LOGIN_PATH", "").strip() or LOGIN_PATH,
        debug=is_truthy(os.getenv("DOCUFLOW_API_DEBUG")),
    )


def setup_logging(debug_enabled: bool) -> bool:
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled
