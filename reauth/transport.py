from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx

from .constants import LOGGER
from .descriptor import RequestDescriptor


def _retry_after_seconds(header: str | None, *, now: datetime | None = None) -> int | None:
    if header is None:
        return None
    header = header.strip()
    if header.isdigit():
        return int(header)
    try:
        retry_at = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    return max(0, int((retry_at - current).total_seconds()))


class RetryTransport(httpx.AsyncBaseTransport):
    """Retries throttled and failing upstream responses below the client."""

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        *,
        max_retries: int = 2,
        sleep=None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._transport = transport
        self._max_retries = max(0, max_retries)
        self._sleep = sleep or asyncio.sleep
        self._logger = logger or LOGGER

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        body = request.content
        attempt = 0

        while True:
            response = await self._transport.handle_async_request(
                httpx.Request(
                    method=request.method,
                    url=request.url,
                    headers=request.headers,
                    content=body,
                    extensions=request.extensions,
                )
            )
            if attempt >= self._max_retries:
                return response

            status_code = response.status_code
            if status_code == 429 and attempt == 0:
                delay = _retry_after_seconds(response.headers.get("retry-after"))
                if delay is None:
                    delay = 1
            elif 500 <= status_code < 600:
                delay = 2**attempt
            else:
                return response

            self._logger.warning(
                "Retrying %s after %ss (%s %s)",
                status_code,
                delay,
                request.method,
                request.url,
            )
            await response.aclose()
            await self._sleep(delay)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()


class HttpTransport:
    """Executes request descriptors on an httpx client.

    Error statuses are raised as ``httpx.HTTPStatusError`` so every failure,
    with or without a response, reaches the caller as an exception.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def execute(self, descriptor: RequestDescriptor) -> httpx.Response:
        request = descriptor.to_request(self.client)
        response = await self.client.send(request)
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        await self.client.aclose()


def build_logging_hooks(*, debug_enabled: bool, logger: logging.Logger | None = None):
    log = logger or LOGGER

    async def log_request(request: httpx.Request) -> None:
        if not debug_enabled or request.method == "OPTIONS":
            return
        log.info("-> %s %s", request.method, request.url)

    async def log_response(response: httpx.Response) -> None:
        if not debug_enabled or response.status_code >= 400:
            return
        log.info(
            "<- %s %s %s",
            response.status_code,
            response.request.method,
            response.request.url,
        )

    return {"request": [log_request], "response": [log_response]}
