from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from .errors import ApiError, ErrorResponse, NetworkError, RequestTimeoutError

ENVELOPE_KEYS = {"success", "message", "data", "timestamp", "path", "duration", "statusCode"}


@dataclass
class ApiResult:
    data: Any
    status: int

    @property
    def payload(self) -> Any:
        return unwrap_payload(self.data)


def unwrap_payload(data: Any) -> Any:
    # Only dictionaries made entirely of envelope keys are unwrapped.
    while (
        isinstance(data, dict)
        and "data" in data
        and data["data"] is not None
        and set(data) <= ENVELOPE_KEYS
    ):
        data = data["data"]
    return data


def serialize_params(params: dict[str, Any] | None) -> dict[str, str]:
    if not params:
        return {}
    serialized: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            serialized[key] = "true" if value else "false"
        else:
            serialized[key] = str(value)
    return serialized


def is_json_response(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "").lower()
    media_type = content_type.split(";", 1)[0].strip()
    return media_type == "application/json" or media_type.endswith("+json")


def parse_json_body(response: httpx.Response) -> Any | None:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def error_message(body: Any, reason_phrase: str | None) -> str:
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, list):
            message = ", ".join(str(item) for item in message if item)
        if message:
            return str(message)
    return reason_phrase or "Request failed"


def to_error(response: httpx.Response) -> ApiError:
    body = parse_json_body(response)
    if body is None:
        body = {}
    return ApiError(
        error_message(body, response.reason_phrase),
        response=ErrorResponse(status=response.status_code, data=body),
    )


def to_result(response: httpx.Response) -> ApiResult:
    if not response.is_success:
        raise to_error(response)

    data: Any = {}
    if is_json_response(response):
        parsed = parse_json_body(response)
        if parsed is not None:
            data = parsed
    return ApiResult(data=data, status=response.status_code)


def timeout_error(timeout: float) -> RequestTimeoutError:
    return RequestTimeoutError(timeout)


def network_error(error: Exception) -> NetworkError:
    return NetworkError(str(error) or type(error).__name__)
