"""A single API route: match requests to actions and build URLs back."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from apiroute.errors import RouteConfigError
from apiroute.methods import ActionTable, resolve_method
from apiroute.negotiation import DEFAULT_FORMATS, negotiate_format
from apiroute.pattern import DEFAULT_REQUIREMENT, Placeholder, compile_template

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from apiroute._types import IncomingRequest
    from apiroute.config import RouteConfig
    from apiroute.pattern import CompiledPattern

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"<(\w+)>")
_INNERMOST_GROUP_RE = re.compile(r"\[([^\[\]]*)\]")


@dataclass(frozen=True, slots=True)
class ActionInvocation:
    """Result of a successful :meth:`Route.match`, ready for dispatch."""

    handler: str | None
    method: str
    action: str
    parameters: Mapping[str, Any]
    post: Mapping[str, Any] = field(default_factory=dict)
    files: Mapping[str, Any] = field(default_factory=dict)
    secured: bool = False
    format: str = "json"


class Route:
    """One path template plus the actions it exposes per HTTP verb.

    Parameters
    ----------
    path:
        Template such as ``/users/<id>[/<format>]``.  ``<name>`` is a
        placeholder, ``[...]`` an optional segment (nestable).
    handler:
        Opaque identifier of whatever serves this route.
    methods:
        Verbs to enable (default actions) or a verb -> action mapping.
        ``None`` enables all six verbs with their default actions.
    parameters:
        Placeholder settings, ``name -> {"requirement": ..., "default": ...}``.
        A ``"default"`` key, even with a ``None`` value, makes the
        placeholder optional in the compiled pattern.
    disabled:
        A disabled route never matches.
    format:
        Pins the response format and skips ``Accept`` negotiation.
    formats:
        Negotiable formats, short name -> MIME type.
    """

    __slots__ = ("_compiled", "actions", "disabled", "format", "formats", "handler", "on_match", "path", "placeholders")

    def __init__(
        self,
        path: str,
        handler: str | None = None,
        *,
        methods: Iterable[str] | Mapping[str, str] | None = None,
        parameters: Mapping[str, Mapping[str, Any]] | None = None,
        disabled: bool = False,
        format: str | None = None,
        formats: Mapping[str, str] | None = None,
    ) -> None:
        self.path = path
        self.handler = handler
        self.actions = ActionTable.from_methods(methods)
        self.placeholders: dict[str, Placeholder] = {
            name: _placeholder(name, options) for name, options in (parameters or {}).items()
        }
        self.disabled = disabled
        self.format = format
        self.formats: dict[str, str] = dict(formats if formats is not None else DEFAULT_FORMATS)
        if format is not None and format not in self.formats:
            raise RouteConfigError(path, f"pinned format {format!r} is not one of {sorted(self.formats)}")
        self.on_match: list[Callable[[Route, ActionInvocation], None]] = []
        self._compiled = compile_template(path, self.placeholders)

    @classmethod
    def from_config(cls, config: RouteConfig | Mapping[str, Any]) -> Route:
        """Build a route from a validated :class:`~apiroute.config.RouteConfig` or its dict form."""
        from apiroute.config import RouteConfig

        if not isinstance(config, RouteConfig):
            config = RouteConfig.model_validate(config)
        return config.to_route()

    @property
    def compiled(self) -> CompiledPattern:
        return self._compiled

    def set_action(self, action: str, method: str | None = None) -> None:
        self.actions.set_action(action, method)

    def methods(self) -> list[str]:
        return self.actions.methods()

    def mime_type(self, format: str) -> str:
        """MIME type for a negotiated short *format* name."""
        return self.formats[format]

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def match(self, request: IncomingRequest) -> ActionInvocation | None:
        """Return an :class:`ActionInvocation` if *request* fits, else ``None``."""
        if self.disabled:
            return None

        compiled = self._compiled
        m = compiled.regex.fullmatch(request.path)
        if m is None:
            return None

        headers = request.headers
        query = request.query_params
        response_format = negotiate_format(headers.get("accept"), self.formats, self.format)
        method = resolve_method(headers, query, request.method, self.actions)
        action = self.actions.action_for(method)
        if not action:
            logger.debug("%s %s: no action for %s", self.path, request.path, method)
            return None

        params: dict[str, Any] = dict(query)
        params["action"] = action

        for index, name in enumerate(compiled.capture_order, start=1):
            if name is None:
                continue
            value = m.group(index)
            if value:
                params[name] = value
                continue
            if name in compiled.required:
                logger.debug("%s %s: required placeholder <%s> is empty", self.path, request.path, name)
                return None
            placeholder = self.placeholders.get(name)
            if placeholder is not None and placeholder.has_default:
                params[name] = placeholder.default

        invocation = ActionInvocation(
            handler=self.handler,
            method=method,
            action=action,
            parameters=MappingProxyType(params),
            post=request.post,
            files=request.files,
            secured=request.is_secured,
            format=response_format,
        )

        for observer in self.on_match:
            observer(self, invocation)

        return invocation

    # ------------------------------------------------------------------
    # URL building
    # ------------------------------------------------------------------

    def build(
        self,
        handler: str | None,
        action: str,
        parameters: Mapping[str, Any] | None = None,
        base_url: str = "",
    ) -> str | None:
        """Fill the template back in, or return ``None`` if it can't be done.

        Parameters that don't appear in the template become the query
        string.  Optional segments whose placeholders were not supplied are
        dropped entirely.
        """
        if handler != self.handler:
            return None
        if not self.actions.has_action(action):
            return None

        names = set(self._compiled.placeholders)
        resolved: dict[str, str] = {}
        leftover: dict[str, Any] = {}

        for name, value in (parameters or {}).items():
            if name == "action":
                continue
            if value is not None and name in names:
                resolved[name] = str(value)
            else:
                leftover[name] = value

        path = _collapse_optional_groups(self.path.lstrip("/"), resolved)

        missing = [name for name in _PLACEHOLDER_RE.findall(path) if name not in resolved]
        if missing:
            logger.debug("%s: cannot build %r, unresolved placeholders %s", self.path, action, missing)
            return None

        # Values are substituted last so their text is never re-scanned.
        path = _PLACEHOLDER_RE.sub(lambda m: resolved[m.group(1)], path)

        query = urlencode({name: value for name, value in leftover.items() if value is not None}, doseq=True)
        return base_url + path + ("?" + query if query else "")

    def construct_url(self, invocation: ActionInvocation, base_url: str = "") -> str | None:
        """Reverse of :meth:`match`: the URL an invocation would have come from."""
        parameters = dict(invocation.parameters)
        action = parameters.pop("action", invocation.action)
        return self.build(invocation.handler, action, parameters, base_url)

    def __repr__(self) -> str:
        return f"Route({self.path!r}, {self.handler!r})"


def _placeholder(name: str, options: Mapping[str, Any]) -> Placeholder:
    return Placeholder(
        name=name,
        requirement=options.get("requirement") or DEFAULT_REQUIREMENT,
        has_default="default" in options,
        default=options.get("default"),
    )


def _collapse_optional_groups(path: str, resolved: Mapping[str, str]) -> str:
    """Resolve ``[...]`` segments innermost first.

    A segment holding a ``<name>`` missing from *resolved* disappears,
    otherwise only its brackets are removed.
    """

    def collapse(m: re.Match[str]) -> str:
        body = m.group(1)
        missing = any(name not in resolved for name in _PLACEHOLDER_RE.findall(body))
        return "" if missing else body

    while _INNERMOST_GROUP_RE.search(path):
        path = _INNERMOST_GROUP_RE.sub(collapse, path)
    return path
