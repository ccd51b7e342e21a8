"""ASGI request wrapper implementing :class:`~apiroute._types.IncomingRequest`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl

if TYPE_CHECKING:
    from apiroute._types import Receive, Scope

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
_SECURE_SCHEMES = frozenset({"https", "wss"})


class Request:
    """Thin wrapper around an ASGI *scope*.

    ``post`` and ``files`` are whatever the host has already decoded;
    :meth:`from_asgi` fills ``post`` from a url-encoded form body.
    """

    __slots__ = ("_scope", "files", "post")

    def __init__(
        self,
        scope: Scope,
        post: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> None:
        self._scope = scope
        self.post: dict[str, Any] = post or {}
        self.files: dict[str, Any] = files or {}

    @classmethod
    async def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Read the whole body from *receive* and decode form fields into ``post``."""
        chunks: list[bytes] = []
        while True:
            message = await receive()
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break

        request = cls(scope)
        content_type = request.headers.get("content-type", "")
        if content_type.split(";", 1)[0].strip() == _FORM_CONTENT_TYPE:
            request.post = dict(parse_qsl(b"".join(chunks).decode("latin-1"), keep_blank_values=True))
        return request

    @property
    def method(self) -> str:
        return self._scope["method"]

    @property
    def path(self) -> str:
        return self._scope["path"]

    @property
    def query_string(self) -> bytes:
        return self._scope.get("query_string", b"")

    @property
    def query_params(self) -> dict[str, str]:
        """Query parameters, last value wins for repeated keys."""
        return dict(parse_qsl(self.query_string.decode("latin-1"), keep_blank_values=True))

    @property
    def headers(self) -> dict[str, str]:
        """Headers as a lowercase-keyed dict (last value wins for dupes)."""
        return {k.decode("latin-1").lower(): v.decode("latin-1") for k, v in self._scope.get("headers", [])}

    @property
    def is_secured(self) -> bool:
        return self._scope.get("scheme", "http") in _SECURE_SCHEMES
