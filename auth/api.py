from __future__ import annotations

from auth.models import LoginResult, TokenPair
from auth.urls import join_url
from docuflow.constants import LOGGER
from docuflow.errors import ApiError
from docuflow.http import ApiClient

LOGIN_ENDPOINT = "/auth/login"
LOGOUT_ENDPOINT = "/auth/logout"
GOOGLE_ENDPOINT = "/auth/google"


class AuthApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def login(self, email: str, password: str) -> LoginResult:
        result = await self._client.post(
            LOGIN_ENDPOINT,
            {"email": email, "password": password},
            requires_auth=False,
        )
        payload = result.payload
        tokens = TokenPair.from_payload(payload)
        await self._client.token_store.save_tokens(tokens.access_token, tokens.refresh_token)

        user = payload.get("user") if isinstance(payload, dict) else None
        LOGGER.info("Signed in as %s", email)
        return LoginResult(tokens=tokens, user=user if isinstance(user, dict) else {})

    async def logout(self) -> None:
        tokens = await self._client.token_store.get_tokens()
        headers = {}
        if tokens is not None:
            # Sent outside the refresh flow so a dead session never triggers a forced logout.
            headers["Authorization"] = f"Bearer {tokens.access_token}"
        try:
            await self._client.post(
                LOGOUT_ENDPOINT,
                {"refreshToken": tokens.refresh_token if tokens else None},
                headers=headers,
                requires_auth=False,
            )
        except ApiError as error:
            LOGGER.warning("Logout request failed; clearing local session anyway: %s", error)
        finally:
            await self._client.token_store.clear_tokens()
            self._client.session_effects.clear_auth_cookies()

    def google_url(self) -> str:
        return join_url(self._client.base_url, GOOGLE_ENDPOINT)
