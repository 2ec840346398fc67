from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from .constants import DEFAULT_LOGIN_ROUTE, DEFAULT_REDIRECT_STORE_PATH, LOGGER


class Navigator(ABC):
    @abstractmethod
    def current_path(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def redirect_to(self, path: str) -> None:
        raise NotImplementedError


class MemoryNavigator(Navigator):
    def __init__(self, path: str = "/") -> None:
        self._path = path
        self.history: list[str] = []

    def current_path(self) -> str:
        return self._path

    def redirect_to(self, path: str) -> None:
        self.history.append(path)
        self._path = path


class RedirectMemory(ABC):
    @abstractmethod
    async def store(self, path: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def load(self) -> str | None:
        raise NotImplementedError

    @abstractmethod
    async def clear(self) -> None:
        raise NotImplementedError


class MemoryRedirectMemory(RedirectMemory):
    def __init__(self) -> None:
        self._path: str | None = None

    async def store(self, path: str) -> None:
        self._path = path

    async def load(self) -> str | None:
        return self._path

    async def clear(self) -> None:
        self._path = None


class FileRedirectMemory(RedirectMemory):
    def __init__(self, path: str | Path = DEFAULT_REDIRECT_STORE_PATH) -> None:
        self._path = Path(path)

    async def store(self, path: str) -> None:
        self._write({"redirect_url": path})

    async def load(self) -> str | None:
        if not self._path.exists():
            return None

        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise RuntimeError("Redirect store file is invalid; expected top-level JSON object.")
        value = raw.get("redirect_url")
        return value if isinstance(value, str) else None

    async def clear(self) -> None:
        self._path.unlink(missing_ok=True)

    def _write(self, payload: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        tmp_path = Path(tmp_name)

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()


class SessionExpiredHandler:
    """Sends the user to the login route after a failed session refresh."""

    def __init__(
        self,
        navigator: Navigator,
        redirect_memory: RedirectMemory,
        *,
        login_route: str = DEFAULT_LOGIN_ROUTE,
        logger: logging.Logger | None = None,
    ) -> None:
        self.navigator = navigator
        self.redirect_memory = redirect_memory
        self.login_route = login_route
        self._logger = logger or LOGGER

    async def __call__(self) -> None:
        current_path = self.navigator.current_path()
        if current_path == self.login_route:
            return

        await self.redirect_memory.store(current_path)
        self._logger.warning("Refresh token failed, redirecting to login")
        self.navigator.redirect_to(self.login_route)
