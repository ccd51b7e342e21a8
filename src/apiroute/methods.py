"""HTTP verbs, per-verb action tables and method-override resolution."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

OVERRIDE_HEADER = "x-http-method-override"
OVERRIDE_QUERY_PARAM = "__apiRouteMethod"


class HttpMethod(str, Enum):
    """The verbs a route can attach an action to."""

    POST = "POST"
    GET = "GET"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, value: str) -> HttpMethod | None:
        """Return the member for *value* (any case), or ``None``."""
        try:
            return cls(value.upper())
        except ValueError:
            return None


DEFAULT_ACTIONS: dict[HttpMethod, str] = {
    HttpMethod.POST: "create",
    HttpMethod.GET: "read",
    HttpMethod.PUT: "update",
    HttpMethod.DELETE: "delete",
    HttpMethod.OPTIONS: "options",
    HttpMethod.PATCH: "patch",
}


class ActionTable:
    """Maps each :class:`HttpMethod` to an action name, or ``None``."""

    __slots__ = ("_actions",)

    def __init__(self) -> None:
        self._actions: dict[HttpMethod, str | None] = dict.fromkeys(HttpMethod)

    @classmethod
    def from_methods(cls, methods: Iterable[str] | Mapping[str, str] | None = None) -> ActionTable:
        """Build a table from route configuration.

        ``None`` or empty enables every verb with its default action.  A
        sequence of verbs enables just those, with default actions.  A
        mapping assigns explicit actions.  Unknown verbs are ignored.
        """
        table = cls()
        if not methods:
            table._actions.update(DEFAULT_ACTIONS)
            return table

        if hasattr(methods, "items"):
            for method, action in methods.items():
                table.set_action(action, method)
            return table

        for method in methods:
            verb = HttpMethod.parse(method)
            if verb is not None:
                table.set_action(DEFAULT_ACTIONS[verb], verb)
        return table

    def set_action(self, action: str, method: str | HttpMethod | None = None) -> None:
        """Attach *action* to *method*.

        Without *method* the verb is inferred from the default action names,
        so ``set_action("update")`` targets ``PUT``.
        """
        if method is None:
            verb = next((m for m, name in DEFAULT_ACTIONS.items() if name == action), None)
        elif isinstance(method, HttpMethod):
            verb = method
        else:
            verb = HttpMethod.parse(method)
        if verb is None:
            return
        self._actions[verb] = action

    def action_for(self, method: str | HttpMethod) -> str | None:
        verb = method if isinstance(method, HttpMethod) else HttpMethod.parse(method)
        if verb is None:
            return None
        return self._actions[verb]

    def methods(self) -> list[str]:
        """Verbs that have an action, in declaration order."""
        return [verb.value for verb, action in self._actions.items() if action]

    def has_action(self, action: str) -> bool:
        return action in self._actions.values()

    def __iter__(self) -> Iterator[tuple[HttpMethod, str | None]]:
        return iter(self._actions.items())

    def __repr__(self) -> str:
        pairs = ", ".join(f"{verb.value}={action!r}" for verb, action in self if action)
        return f"ActionTable({pairs})"


def resolve_method(
    headers: Mapping[str, str],
    query: Mapping[str, str],
    actual: str,
    actions: ActionTable,
) -> str:
    """Work out which verb a request is really using.

    An ``X-HTTP-Method-Override`` header wins outright.  The
    ``__apiRouteMethod`` query parameter is honoured only when it names a
    verb *actions* can serve.  Otherwise the transport verb is used.
    """
    override = headers.get(OVERRIDE_HEADER, "")
    if override:
        return override.upper()

    tunnelled = str(query.get(OVERRIDE_QUERY_PARAM) or "").upper()
    if tunnelled and actions.action_for(tunnelled):
        return tunnelled

    return actual.upper()
