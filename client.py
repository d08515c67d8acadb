from __future__ import annotations

import argparse
import asyncio
import json
import sys

from auth.api import AuthApi
from auth.token_store import FileTokenStore
from docuflow.constants import APP_VERSION, HTTP_METHODS, LOGGER
from docuflow.env import load_env, load_settings, setup_logging
from docuflow.errors import ApiError
from docuflow.http import ApiClient
from docuflow.normalize import ApiResult
from docuflow.resources import (
    AuditLogsApi,
    DepartmentsApi,
    DocumentsApi,
    RolesApi,
    SignaturesApi,
    TagsApi,
    UsersApi,
    VersionsApi,
)


def create_client() -> ApiClient:
    load_env()
    settings = load_settings()
    debug_enabled = setup_logging(settings.debug)

    LOGGER.debug("Creating API client for %s", settings.base_url)
    return ApiClient(
        base_url=settings.base_url,
        token_store=FileTokenStore(settings.token_store_path),
        timeout=settings.timeout,
        login_path=settings.login_path,
        debug=debug_enabled,
    )


def parse_key_values(items: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {item!r}.")
        params[key] = value
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docuflow-client",
        description="Send one authenticated request to the DocuFlow API.",
    )
    parser.add_argument("--version", action="version", version=APP_VERSION)
    parser.add_argument("method", type=str.lower, choices=sorted(HTTP_METHODS))
    parser.add_argument("path")
    parser.add_argument("--data", help="JSON request body.")
    parser.add_argument("--param", action="append", default=[], help="Query parameter key=value.")
    parser.add_argument("--no-auth", action="store_true", help="Do not send the access token.")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds.")
    return parser


async def run_request(
    api: ApiClient,
    args: argparse.Namespace,
    body: object,
    params: dict[str, str],
) -> ApiResult:
    async with api:
        return await api.request(
            args.method,
            args.path,
            body=body,
            params=params,
            requires_auth=not args.no_auth,
            timeout=args.timeout,
        )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        params = parse_key_values(args.param)
        body = json.loads(args.data) if args.data else None
    except ValueError as error:
        parser.error(str(error))

    api = create_client()
    try:
        result = asyncio.run(run_request(api, args, body, params))
    except ApiError as error:
        print(f"Error: {error.message}", file=sys.stderr)
        if error.response is not None:
            print(json.dumps(error.response.data, indent=2), file=sys.stderr)
        return 1

    print(json.dumps(result.data, indent=2))
    return 0


__all__ = [
    "ApiClient",
    "AuthApi",
    "AuditLogsApi",
    "DepartmentsApi",
    "DocumentsApi",
    "RolesApi",
    "SignaturesApi",
    "TagsApi",
    "UsersApi",
    "VersionsApi",
    "create_client",
    "main",
]


if __name__ == "__main__":
    sys.exit(main())
