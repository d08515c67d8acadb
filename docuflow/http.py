from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from auth.models import TokenPair
from auth.session import HeadlessSessionEffects, SessionEffects
from auth.token_store import STORE_ERRORS, TokenStore
from auth.urls import build_login_url

from .constants import DEFAULT_TIMEOUT_SECONDS, LOGGER, LOGIN_PATH, REFRESH_PATH
from .errors import ApiError, AuthenticationFailedError, ErrorResponse
from .normalize import (
    ApiResult,
    network_error,
    parse_json_body,
    serialize_params,
    timeout_error,
    to_error,
    to_result,
    unwrap_payload,
)
from .refresh import RefreshCoordinator


@dataclass
class RequestDescriptor:
    method: str
    path: str
    body: Any = None
    params: dict[str, Any] | None = None
    requires_auth: bool = True
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    headers: dict[str, str | None] = field(default_factory=dict)


def build_headers(
    extra_headers: dict[str, str | None] | None,
    access_token: str | None,
) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    for key, value in (extra_headers or {}).items():
        if value is None:
            continue
        if key.lower() == "content-type":
            headers.pop("Content-Type", None)
        headers[key] = value
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    return headers


def make_logging_hooks(logger: logging.Logger = LOGGER) -> dict[str, list]:
    async def log_request(request: httpx.Request) -> None:
        logger.info("API request %s %s", request.method, request.url)

    async def log_response(response: httpx.Response) -> None:
        logger.info(
            "API response %s %s -> %s",
            response.request.method,
            response.request.url,
            response.status_code,
        )
        if response.status_code >= 400:
            body = await response.aread()
            text = body.decode("utf-8", errors="replace")
            if len(text) > 1000:
                text = text[:1000] + "...<truncated>"
            logger.warning("API error body: %s", text)

    return {"request": [log_request], "response": [log_response]}


class ApiClient:
    def __init__(
        self,
        *,
        base_url: str,
        token_store: TokenStore,
        session_effects: SessionEffects | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        refresh_timeout: float | None = None,
        refresh_path: str = REFRESH_PATH,
        login_path: str = LOGIN_PATH,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
        debug: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.timeout = timeout
        self.refresh_timeout = refresh_timeout or timeout
        self.refresh_path = refresh_path
        self.login_path = login_path
        self._logger = logger or LOGGER

        self._own_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                base_url=self.base_url,
                transport=transport,
                event_hooks=make_logging_hooks(self._logger) if debug else None,
            )
        self._client = client
        self.session_effects = session_effects or HeadlessSessionEffects(client.cookies)
        self.refresh_coordinator = RefreshCoordinator(self._refresh_credentials, logger=self._logger)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._own_client:
            await self._client.aclose()

    async def get(self, path: str, params: dict[str, Any] | None = None, **options) -> ApiResult:
        return await self.request("GET", path, params=params, **options)

    async def post(self, path: str, body: Any = None, **options) -> ApiResult:
        return await self.request("POST", path, body=body, **options)

    async def put(self, path: str, body: Any = None, **options) -> ApiResult:
        return await self.request("PUT", path, body=body, **options)

    async def patch(self, path: str, body: Any = None, **options) -> ApiResult:
        return await self.request("PATCH", path, body=body, **options)

    async def delete(self, path: str, params: dict[str, Any] | None = None, **options) -> ApiResult:
        return await self.request("DELETE", path, params=params, **options)

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str | None] | None = None,
        requires_auth: bool = True,
        timeout: float | None = None,
    ) -> ApiResult:
        descriptor = RequestDescriptor(
            method=method.upper(),
            path=path,
            body=body,
            params=params,
            requires_auth=requires_auth,
            timeout=self.timeout if timeout is None else timeout,
            headers=dict(headers or {}),
        )
        response = await self._send(descriptor)
        return to_result(response)

    async def download(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        requires_auth: bool = True,
        timeout: float | None = None,
    ) -> bytes:
        descriptor = RequestDescriptor(
            method="GET",
            path=path,
            params=params,
            requires_auth=requires_auth,
            timeout=self.timeout if timeout is None else timeout,
            headers={"Accept": "*/*"},
        )
        response = await self._send(descriptor)
        if not response.is_success:
            raise to_error(response)
        return response.content

    async def _send(self, descriptor: RequestDescriptor) -> httpx.Response:
        response, sent_token = await self._execute(descriptor)
        if not self._should_refresh(descriptor, response):
            return response

        if not await self._refresh_after_rejection(sent_token):
            raise AuthenticationFailedError(
                response=ErrorResponse(status=401, data=parse_json_body(response) or {}),
            )

        # Single retry; a second 401 is returned to the caller as-is.
        response, _ = await self._execute(descriptor)
        return response

    async def _execute(self, descriptor: RequestDescriptor) -> tuple[httpx.Response, str | None]:
        access_token = None
        if descriptor.requires_auth:
            access_token = await self.token_store.get_access_token()

        request = self._client.build_request(
            descriptor.method,
            descriptor.path,
            params=serialize_params(descriptor.params),
            headers=build_headers(descriptor.headers, access_token),
            json=descriptor.body,
            timeout=descriptor.timeout,
        )
        try:
            response = await asyncio.wait_for(self._client.send(request), descriptor.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as error:
            self._logger.warning(
                "API request timed out after %ss (%s %s)",
                descriptor.timeout,
                descriptor.method,
                descriptor.path,
            )
            raise timeout_error(descriptor.timeout) from error
        except httpx.RequestError as error:
            self._logger.warning(
                "API request failed (%s %s): %s",
                descriptor.method,
                descriptor.path,
                error,
            )
            raise network_error(error) from error
        return response, access_token

    def _should_refresh(self, descriptor: RequestDescriptor, response: httpx.Response) -> bool:
        if response.status_code != 401 or not descriptor.requires_auth:
            return False
        path = httpx.URL(descriptor.path).path
        return path.rstrip("/") != self.refresh_path.rstrip("/")

    async def _refresh_after_rejection(self, rejected_token: str | None) -> bool:
        current_token = await self.token_store.get_access_token()
        if current_token and current_token != rejected_token:
            # Another refresh already replaced the token this request was sent with.
            return True
        return await self.refresh_coordinator.refresh()

    async def _refresh_credentials(self) -> bool:
        refreshed = await self._request_new_tokens()
        if not refreshed:
            await self._force_logout()
        return refreshed

    async def _request_new_tokens(self) -> bool:
        try:
            refresh_token = await self.token_store.get_refresh_token()
        except STORE_ERRORS as error:
            self._logger.warning("Could not read refresh token: %s", error)
            return False
        if not refresh_token:
            self._logger.warning("No refresh token available; session cannot be refreshed")
            return False

        try:
            result = await self.post(
                self.refresh_path,
                {"refreshToken": refresh_token},
                requires_auth=False,
                timeout=self.refresh_timeout,
            )
            tokens = TokenPair.from_payload(
                unwrap_payload(result.data),
                fallback_refresh_token=refresh_token,
            )
        except (ApiError, ValueError) as error:
            self._logger.warning("Refresh request rejected: %s", error)
            return False

        try:
            await self.token_store.save_tokens(tokens.access_token, tokens.refresh_token)
        except STORE_ERRORS as error:
            self._logger.warning("Could not store refreshed tokens: %s", error)
            return False
        return True

    async def _force_logout(self) -> None:
        login_url = build_login_url(self.login_path)
        self._logger.warning("Authentication failed; clearing session and redirecting to %s", login_url)
        try:
            await self.token_store.clear_tokens()
        except STORE_ERRORS:
            self._logger.exception("Could not clear stored tokens during forced logout")
        try:
            self.session_effects.clear_auth_cookies()
        except Exception:
            self._logger.exception("Clearing auth cookies failed during forced logout")
        try:
            self.session_effects.redirect_to_login(login_url)
        except Exception:
            self._logger.exception("Login redirect failed during forced logout")
