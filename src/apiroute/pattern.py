"""Compile ``/users/<id>[/<format>]`` templates into anchored regexes."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from apiroute.errors import RouteConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_REQUIREMENT = r"\w+"

_TOKEN_RE = re.compile(r"<(\w+)>|\[|\]")
_PLACEHOLDER_RE = re.compile(r"<(\w+)>")
_INNERMOST_GROUP_RE = re.compile(r"\[[^\[\]]*\]")
# Escape sequences and character classes are kept as-is; a bare "(" not
# opening a "(?" construct is a capturing group and gets rewritten.
_GROUP_OPEN_RE = re.compile(r"\\.|\[\^?\]?(?:\\.|[^\]\\])*\]|\((?!\?)")


@dataclass(frozen=True, slots=True)
class Placeholder:
    """Constraint and default for one ``<name>`` slot."""

    name: str
    requirement: str = DEFAULT_REQUIREMENT
    has_default: bool = False
    default: str | None = None


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """Immutable result of :func:`compile_template`.

    ``capture_order[i]`` names the placeholder held by capture group
    ``i + 1`` of ``regex``, or is ``None`` when that group is an optional
    ``[...]`` segment.
    """

    template: str
    expression: str
    regex: re.Pattern[str]
    capture_order: tuple[str | None, ...]
    placeholders: tuple[str, ...]
    required: frozenset[str]


def compile_template(
    template: str,
    placeholders: Mapping[str, Placeholder] | None = None,
) -> CompiledPattern:
    """Compile *template* into a :class:`CompiledPattern`.

    Raises :class:`RouteConfigError` for unbalanced brackets, duplicate
    placeholder names and requirements that are invalid or still add
    capturing groups after rewriting.
    """
    placeholders = placeholders or {}
    parts: list[str] = []
    order: list[str | None] = []
    names: list[str] = []
    depth = 0
    last_end = 0

    for m in _TOKEN_RE.finditer(template):
        parts.append(re.escape(template[last_end : m.start()]))
        last_end = m.end()
        token = m.group(0)

        if token == "[":
            depth += 1
            order.append(None)
            parts.append("(")
            continue

        if token == "]":
            if depth == 0:
                raise RouteConfigError(template, f"unmatched ']' at position {m.start()}")
            depth -= 1
            parts.append(")?")
            continue

        name = m.group(1)
        if name in names:
            raise RouteConfigError(template, f"duplicate placeholder <{name}>")
        names.append(name)
        order.append(name)

        placeholder = placeholders.get(name) or Placeholder(name)
        regex = _non_capturing(placeholder.requirement)
        parts.append(f"({regex})?" if placeholder.has_default else f"({regex})")

    if depth:
        raise RouteConfigError(template, f"{depth} unclosed '['")

    parts.append(re.escape(template[last_end:]))
    expression = "^" + "".join(parts) + "$"

    try:
        compiled = re.compile(expression)
    except re.error as exc:
        raise RouteConfigError(template, f"bad requirement pattern ({exc})") from exc

    if compiled.groups != len(order):
        raise RouteConfigError(
            template,
            f"requirements add {compiled.groups - len(order)} capturing group(s); "
            "use plain or (?:...) groups only",
        )

    logger.debug("Compiled %r to %r with capture order %r", template, expression, order)

    return CompiledPattern(
        template=template,
        expression=expression,
        regex=compiled,
        capture_order=tuple(order),
        placeholders=tuple(names),
        required=required_placeholders(template),
    )


def required_placeholders(template: str) -> frozenset[str]:
    """Return placeholders that sit outside every ``[...]`` group.

    Innermost groups are stripped repeatedly until no brackets remain;
    whatever ``<name>`` tokens survive are mandatory.
    """
    path = template
    while _INNERMOST_GROUP_RE.search(path):
        path = _INNERMOST_GROUP_RE.sub("", path)
    return frozenset(_PLACEHOLDER_RE.findall(path))


def _non_capturing(requirement: str) -> str:
    return _GROUP_OPEN_RE.sub(lambda m: m.group(0) if m.group(0) != "(" else "(?:", requirement)
