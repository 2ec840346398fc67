from __future__ import annotations

import logging

LOGGER = logging.getLogger("reauth")
APP_VERSION = "0.1.0"

DEFAULT_TIMEOUT = 10.0
DEFAULT_REFRESH_PATH = "/auth/refresh"
DEFAULT_LOGIN_PATH = "/auth/login"
DEFAULT_LOGIN_ROUTE = "/login"
DEFAULT_REDIRECT_STORE_PATH = ".redirect.json"
DEFAULT_ERROR_MESSAGE = "An error occurred"

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "X-Requested-With": "XMLHttpRequest",
}
