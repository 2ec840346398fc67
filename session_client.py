from __future__ import annotations

import argparse
import asyncio
import json
import sys

import httpx

from reauth.client import SessionClient
from reauth.constants import APP_VERSION, DEFAULT_HEADERS, LOGGER
from reauth.env import load_env, load_settings, setup_logging
from reauth.errors import NormalizedError
from reauth.navigation import (
    FileRedirectMemory,
    MemoryNavigator,
    Navigator,
    RedirectMemory,
    SessionExpiredHandler,
)
from reauth.transport import HttpTransport, RetryTransport, build_logging_hooks


def create_client(
    *,
    navigator: Navigator | None = None,
    redirect_memory: RedirectMemory | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SessionClient:
    load_env()
    debug_enabled = setup_logging()
    settings = load_settings()

    LOGGER.info("Configuring API client with base URL: %s", settings.base_url)

    retry_transport = RetryTransport(
        transport or httpx.AsyncHTTPTransport(),
        max_retries=settings.max_retries,
        logger=LOGGER,
    )
    http_client = httpx.AsyncClient(
        base_url=settings.base_url,
        headers=DEFAULT_HEADERS,
        timeout=settings.timeout,
        transport=retry_transport,
        event_hooks=build_logging_hooks(debug_enabled=debug_enabled),
    )

    session_expired = SessionExpiredHandler(
        navigator or MemoryNavigator(),
        redirect_memory or FileRedirectMemory(settings.redirect_store_path),
        login_route=settings.login_route,
    )
    return SessionClient(
        HttpTransport(http_client),
        refresh_path=settings.refresh_path,
        login_path=settings.login_path,
        on_session_expired=session_expired,
    )


def _print_response(response: httpx.Response) -> None:
    print(f"{response.status_code} {response.request.method} {response.request.url}")
    if not response.content:
        return
    try:
        print(json.dumps(response.json(), indent=2, sort_keys=True))
    except ValueError:
        print(response.text)


async def _run(method: str, path: str, body: str | None) -> int:
    payload = json.loads(body) if body else None
    async with create_client() as client:
        try:
            response = await client.request(method, path, json=payload)
        except NormalizedError as error:
            print(f"{error.status_code} {error.message}", file=sys.stderr)
            return 1
        except httpx.HTTPError as error:
            print(f"Request failed: {error}", file=sys.stderr)
            return 1
    _print_response(response)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="session-client",
        description="Send one request through the session-recovering API client.",
    )
    parser.add_argument("method", help="HTTP method, for example GET")
    parser.add_argument("path", help="Path relative to REAUTH_API_BASE_URL")
    parser.add_argument("--json", dest="body", help="JSON request body")
    parser.add_argument("--version", action="version", version=APP_VERSION)
    args = parser.parse_args(argv)
    return asyncio.run(_run(args.method, args.path, args.body))


if __name__ == "__main__":
    sys.exit(main())
