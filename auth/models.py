from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        *,
        fallback_refresh_token: str | None = None,
    ) -> "TokenPair":
        if not isinstance(payload, dict):
            raise ValueError("Token response must be a JSON object.")

        access_token = payload.get("accessToken")
        refresh_token = payload.get("refreshToken") or fallback_refresh_token

        if not isinstance(access_token, str) or not access_token:
            raise ValueError("Token response missing accessToken.")
        if not isinstance(refresh_token, str) or not refresh_token:
            raise ValueError("Token response missing refreshToken.")

        return cls(access_token=access_token, refresh_token=refresh_token)


@dataclass
class LoginResult:
    tokens: TokenPair
    user: dict[str, Any] = field(default_factory=dict)
