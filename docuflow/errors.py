from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ErrorResponse:
    status: int
    data: Any


class ApiError(RuntimeError):
    def __init__(self, message: str, *, response: ErrorResponse | None = None) -> None:
        message = message or "Request failed"
        super().__init__(message)
        self.message = message
        self.response = response

    @property
    def status_code(self) -> int | None:
        if self.response is None:
            return None
        return self.response.status


class RequestTimeoutError(ApiError):
    def __init__(self, timeout: float) -> None:
        super().__init__(f"Request timed out after {round(timeout * 1000)}ms")
        self.timeout = timeout


class NetworkError(ApiError):
    pass


class AuthenticationFailedError(ApiError):
    def __init__(
        self,
        message: str = "Authentication failed",
        *,
        response: ErrorResponse | None = None,
    ) -> None:
        super().__init__(message, response=response)
