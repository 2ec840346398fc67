from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

import httpx


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    url: str
    params: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes | None = None
    json: Any = None
    retried: bool = False

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | str | None = None,
        json: Any = None,
    ) -> "RequestDescriptor":
        if isinstance(content, str):
            content = content.encode("utf-8")
        return cls(
            method=method.upper(),
            url=url,
            params=dict(params) if params else None,
            headers=dict(headers or {}),
            content=content,
            json=json,
        )

    def mark_retried(self) -> "RequestDescriptor":
        return replace(
            self,
            params=dict(self.params) if self.params is not None else None,
            headers=dict(self.headers),
            retried=True,
        )

    def path(self) -> str:
        return httpx.URL(self.url).path

    def targets(self, endpoint: str) -> bool:
        endpoint = endpoint.rstrip("/")
        if not endpoint:
            return False
        return self.path().rstrip("/").endswith(endpoint)

    def to_request(self, client: httpx.AsyncClient) -> httpx.Request:
        return client.build_request(
            self.method,
            self.url,
            params=self.params,
            headers=self.headers,
            content=self.content,
            json=self.json,
        )
