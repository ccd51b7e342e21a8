"""Shared helpers for building requests."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from apiroute.request import Request


def make_request(
    path: str,
    method: str = "GET",
    *,
    headers: dict[str, str] | None = None,
    query: dict[str, str] | None = None,
    scheme: str = "http",
    post: dict[str, Any] | None = None,
    files: dict[str, Any] | None = None,
) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": urlencode(query or {}).encode("latin-1"),
        "headers": [(k.encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()],
        "scheme": scheme,
    }
    return Request(scope, post=post, files=files)
