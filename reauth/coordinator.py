from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from .constants import LOGGER
from .descriptor import RequestDescriptor
from .errors import RefreshInterruptedError

RefreshFn = Callable[[], Awaitable[Any]]
SessionExpiredFn = Callable[[], Awaitable[None]]


class PendingEntry:
    """Completion handle for one suspended follower."""

    def __init__(self, future: asyncio.Future[None]) -> None:
        self._future = future

    def succeed(self) -> None:
        if not self._future.done():
            self._future.set_result(None)

    def fail(self, reason: BaseException) -> None:
        if not self._future.done():
            self._future.set_exception(reason)

    def settle(self, outcome: "RefreshOutcome") -> None:
        if outcome.ok:
            self.succeed()
        else:
            self.fail(outcome.cause)

    def __await__(self):
        return self._future.__await__()


class PendingQueue:
    def __init__(self) -> None:
        self._entries: deque[PendingEntry] = deque()

    def append(self, entry: PendingEntry) -> None:
        self._entries.append(entry)

    def take_all(self) -> list[PendingEntry]:
        entries = list(self._entries)
        self._entries = deque()
        return entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class SessionState:
    refreshing: bool = False
    queue: PendingQueue = field(default_factory=PendingQueue)


@dataclass(frozen=True)
class RefreshOutcome:
    cause: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.cause is None

    @classmethod
    def success(cls) -> "RefreshOutcome":
        return cls()

    @classmethod
    def failure(cls, cause: BaseException) -> "RefreshOutcome":
        return cls(cause=cause)


@dataclass
class RefreshStats:
    refreshes: int = 0
    failures: int = 0
    followers: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "refreshes": self.refreshes,
            "failures": self.failures,
            "followers": self.followers,
        }


class RefreshCoordinator:
    def __init__(
        self,
        refresh_fn: RefreshFn,
        *,
        on_session_expired: SessionExpiredFn | None = None,
        state: SessionState | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._refresh_fn = refresh_fn
        self._on_session_expired = on_session_expired
        self._state = state or SessionState()
        self._logger = logger or LOGGER
        self._stats = RefreshStats()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def refreshing(self) -> bool:
        return self._state.refreshing

    def get_stats(self) -> RefreshStats:
        return self._stats

    async def recover(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        """Wait for a refreshed session and return the descriptor to replay.

        Raises the refresh failure when the session could not be refreshed.
        Every caller of one refresh cycle sees the same outcome.
        """
        replay = descriptor.mark_retried()

        # No await between the check and the transition.
        if self._state.refreshing:
            entry = PendingEntry(asyncio.get_running_loop().create_future())
            self._state.queue.append(entry)
            self._stats.followers += 1
            self._logger.debug(
                "Queued %s %s behind session refresh (%s waiting)",
                descriptor.method,
                descriptor.url,
                len(self._state.queue),
            )
            await entry
            return replay

        self._state.refreshing = True
        self._stats.refreshes += 1
        self._logger.info(
            "Session expired on %s %s; refreshing", descriptor.method, descriptor.url
        )

        try:
            await self._refresh_fn()
        except Exception as error:
            self._stats.failures += 1
            self._drain(RefreshOutcome.failure(error))
            await self._session_expired()
            raise
        except BaseException:
            self._drain(RefreshOutcome.failure(RefreshInterruptedError()))
            raise

        self._drain(RefreshOutcome.success())
        return replay

    def _drain(self, outcome: RefreshOutcome) -> None:
        self._state.refreshing = False
        entries = self._state.queue.take_all()
        if entries:
            self._logger.info(
                "Session refresh %s; releasing %s queued request(s)",
                "succeeded" if outcome.ok else "failed",
                len(entries),
            )
        for entry in entries:
            entry.settle(outcome)

    async def _session_expired(self) -> None:
        if self._on_session_expired is None:
            return
        try:
            await self._on_session_expired()
        except Exception:
            self._logger.exception("Session-expired handler failed")
