"""ASGI scope aliases and the inbound request interface."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, MutableMapping
from typing import Any, Protocol

Scope = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[dict[str, Any]]]


class IncomingRequest(Protocol):
    """What :meth:`apiroute.Route.match` reads from a request.

    ``headers`` keys are lower-case.  ``post`` and ``files`` are passed
    through to the :class:`~apiroute.routing.ActionInvocation` untouched.
    """

    @property
    def method(self) -> str: ...

    @property
    def path(self) -> str: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def query_params(self) -> Mapping[str, str]: ...

    @property
    def post(self) -> Mapping[str, Any]: ...

    @property
    def files(self) -> Mapping[str, Any]: ...

    @property
    def is_secured(self) -> bool: ...
