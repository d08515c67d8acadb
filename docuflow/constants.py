from __future__ import annotations

import logging
from pathlib import Path

HTTP_METHODS = {
    "get",
    "post",
    "put",
    "patch",
    "delete",
}

LOGGER = logging.getLogger("docuflow.api")
APP_VERSION = "0.1.0"

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_SECONDS = 20.0

REFRESH_PATH = "/auth/refresh"
LOGIN_PATH = "/login"
AUTH_COOKIE_NAMES = ("auth", "user_role")

ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
