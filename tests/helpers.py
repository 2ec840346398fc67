import asyncio

import httpx

from reauth.client import SessionClient
from reauth.coordinator import RefreshCoordinator
from reauth.navigation import MemoryNavigator, MemoryRedirectMemory, SessionExpiredHandler
from reauth.transport import HttpTransport

BASE_URL = "https://api.example.com"


class FakeBackend:
    """Mock API whose session is valid only after a refresh."""

    def __init__(
        self,
        *,
        refresh_status: int = 200,
        refresh_json: dict | None = None,
        refresh_error: Exception | None = None,
        always_reject: bool = False,
    ) -> None:
        self.refresh_status = refresh_status
        self.refresh_json = refresh_json if refresh_json is not None else {"ok": True}
        self.refresh_error = refresh_error
        self.always_reject = always_reject
        self.session_valid = False
        self.refresh_calls = 0
        self.calls: list[tuple[str, str]] = []
        self.bodies: list[bytes] = []
        self.refresh_gate = asyncio.Event()
        self.refresh_gate.set()

    def hold_refresh(self) -> None:
        self.refresh_gate.clear()

    def count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        self.bodies.append(request.content)

        if path == "/auth/refresh":
            self.refresh_calls += 1
            await self.refresh_gate.wait()
            if self.refresh_error is not None:
                raise self.refresh_error
            if self.refresh_status < 400:
                self.session_valid = True
            if self.refresh_status == 204:
                return httpx.Response(204, request=request)
            return httpx.Response(self.refresh_status, request=request, json=self.refresh_json)

        if path == "/auth/login":
            return httpx.Response(401, request=request, json={"detail": "Invalid credentials"})

        if path == "/api/offline":
            raise httpx.ConnectError("Connection refused", request=request)

        if path == "/api/broken":
            return httpx.Response(500, request=request, json={"message": "Database unavailable"})

        if self.always_reject or not self.session_valid:
            return httpx.Response(401, request=request, json={"detail": "Token expired"})

        return httpx.Response(200, request=request, json={"path": path})


def build_client(
    backend: FakeBackend,
    *,
    navigator: MemoryNavigator | None = None,
    redirect_memory: MemoryRedirectMemory | None = None,
    refresh_fn=None,
) -> SessionClient:
    http_client = httpx.AsyncClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(backend.handler),
    )
    handler = SessionExpiredHandler(
        navigator or MemoryNavigator("/dashboard"),
        redirect_memory or MemoryRedirectMemory(),
    )
    return SessionClient(
        HttpTransport(http_client),
        refresh_fn=refresh_fn,
        on_session_expired=handler,
    )


async def wait_for_followers(coordinator: RefreshCoordinator, count: int) -> None:
    for _ in range(1000):
        if len(coordinator.state.queue) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError(
        f"expected {count} queued requests, found {len(coordinator.state.queue)}"
    )
