"""Exceptions raised while configuring a route."""

from __future__ import annotations


class RouteConfigError(ValueError):
    """A route definition cannot be compiled.

    Raised at construction time for malformed templates (unbalanced
    brackets, duplicate placeholders) and for requirement patterns that are
    not valid regular expressions.  Request-time failures are never errors:
    they are reported as a ``None`` match.
    """

    def __init__(self, template: str, problem: str) -> None:
        self.template = template
        self.problem = problem
        super().__init__(f"Invalid route template {template!r}: {problem}")
