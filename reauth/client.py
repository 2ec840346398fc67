from __future__ import annotations

import logging
from typing import Any

import httpx

from .constants import DEFAULT_LOGIN_PATH, DEFAULT_REFRESH_PATH, LOGGER
from .coordinator import RefreshCoordinator, RefreshFn, SessionExpiredFn
from .descriptor import RequestDescriptor
from .errors import ErrorClass, classify_error, normalize_error
from .policy import SessionRecoveryPolicy
from .transport import HttpTransport


class SessionClient:
    """HTTP client that refreshes an expired session and replays the request."""

    def __init__(
        self,
        transport: HttpTransport,
        *,
        refresh_path: str = DEFAULT_REFRESH_PATH,
        login_path: str = DEFAULT_LOGIN_PATH,
        refresh_fn: RefreshFn | None = None,
        on_session_expired: SessionExpiredFn | None = None,
        policy: SessionRecoveryPolicy | None = None,
        coordinator: RefreshCoordinator | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.transport = transport
        self.refresh_path = refresh_path
        self.policy = policy or SessionRecoveryPolicy(
            refresh_path=refresh_path,
            login_path=login_path,
        )
        self.coordinator = coordinator or RefreshCoordinator(
            refresh_fn or self.refresh,
            on_session_expired=on_session_expired,
            logger=logger,
        )
        self._logger = logger or LOGGER

    async def __aenter__(self) -> "SessionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def send(self, descriptor: RequestDescriptor) -> httpx.Response:
        try:
            return await self.transport.execute(descriptor)
        except Exception as error:
            classification = classify_error(error)
            self._log_failure(descriptor, error, classification)

            if self.policy.should_attempt_recovery(descriptor, classification):
                replay = await self.coordinator.recover(descriptor)
                return await self.send(replay)

            normalized = normalize_error(error)
            if normalized is error:
                raise
            raise normalized from error

    async def refresh(self) -> httpx.Response:
        return await self.send(RequestDescriptor.build("POST", self.refresh_path))

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | str | None = None,
        json: Any = None,
    ) -> httpx.Response:
        descriptor = RequestDescriptor.build(
            method,
            url,
            params=params,
            headers=headers,
            content=content,
            json=json,
        )
        return await self.send(descriptor)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    def _log_failure(
        self,
        descriptor: RequestDescriptor,
        error: Exception,
        classification: ErrorClass,
    ) -> None:
        if isinstance(error, httpx.HTTPStatusError):
            self._logger.error(
                "x %s %s %s",
                error.response.status_code,
                descriptor.method,
                descriptor.url,
            )
        elif classification is ErrorClass.NETWORK_ERROR:
            self._logger.error("x Network error (no response): %s", error)
        else:
            self._logger.error("x Request error: %s", error)
