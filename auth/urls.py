from __future__ import annotations

import urllib.parse

from docuflow.constants import LOGIN_PATH

UNAUTHORIZED_MARKER = {"unauthorized": "true"}


def append_query_params(url: str, params: dict[str, str]) -> str:
    parsed = urllib.parse.urlparse(url)
    existing = urllib.parse.parse_qs(parsed.query, keep_blank_values=True)
    for key, value in params.items():
        existing[key] = [value]

    new_query = urllib.parse.urlencode(existing, doseq=True)
    return urllib.parse.urlunparse(parsed._replace(query=new_query))


def build_login_url(login_path: str = LOGIN_PATH) -> str:
    return append_query_params(login_path, UNAUTHORIZED_MARKER)


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
