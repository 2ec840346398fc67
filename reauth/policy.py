from __future__ import annotations

from .constants import DEFAULT_LOGIN_PATH, DEFAULT_REFRESH_PATH
from .descriptor import RequestDescriptor
from .errors import ErrorClass


class SessionRecoveryPolicy:
    """Decides whether a failed request may go through a session refresh.

    Refresh and login calls are never recovered: a failed refresh would loop,
    and a rejected login is a bad credential rather than an expired session.
    A request that was already replayed once surfaces its failure as is.
    """

    def __init__(
        self,
        *,
        refresh_path: str = DEFAULT_REFRESH_PATH,
        login_path: str = DEFAULT_LOGIN_PATH,
    ) -> None:
        self.refresh_path = refresh_path
        self.login_path = login_path

    def should_attempt_recovery(
        self,
        descriptor: RequestDescriptor,
        classification: ErrorClass,
    ) -> bool:
        if classification is not ErrorClass.AUTH_EXPIRED:
            return False
        if descriptor.retried:
            return False
        if descriptor.targets(self.refresh_path):
            return False
        if descriptor.targets(self.login_path):
            return False
        return True
