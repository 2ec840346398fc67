from __future__ import annotations

import enum
import json
from typing import Any

import httpx

from .constants import DEFAULT_ERROR_MESSAGE


class ErrorClass(enum.Enum):
    AUTH_EXPIRED = "auth_expired"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    OTHER = "other"


class NormalizedError(RuntimeError):
    """Backend rejection reshaped for callers.

    ``status_code`` and the raw ``data`` payload are kept for callers that
    need more than the message.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data


class RefreshInterruptedError(RuntimeError):
    def __init__(self, message: str = "Session refresh was interrupted.") -> None:
        super().__init__(message)


def classify_error(error: BaseException) -> ErrorClass:
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        if status_code == 401:
            return ErrorClass.AUTH_EXPIRED
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT_ERROR
        if status_code >= 500:
            return ErrorClass.SERVER_ERROR
        return ErrorClass.OTHER
    if isinstance(error, httpx.TransportError):
        return ErrorClass.NETWORK_ERROR
    return ErrorClass.OTHER


def _response_payload(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _payload_message(payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("detail", "message"):
            value = payload.get(key)
            if value:
                return value if isinstance(value, str) else str(value)
    return DEFAULT_ERROR_MESSAGE


def normalize_error(error: BaseException) -> BaseException:
    if not isinstance(error, httpx.HTTPStatusError):
        return error

    payload = _response_payload(error.response)
    if not payload:
        return error

    return NormalizedError(
        _payload_message(payload),
        status_code=error.response.status_code,
        data=payload,
    )
