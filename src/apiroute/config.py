"""Validated route configuration.

The dict form accepted here is what route files and the CLI ``--config``
option carry::

    {
        "path": "/articles/<id>[/<slug>]",
        "handler": "Articles",
        "methods": {"GET": "read", "DELETE": "remove"},
        "parameters": {"id": {"requirement": "\\\\d+"}},
        "format": null,
        "formats": {"json": "application/json"}
    }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apiroute.methods import HttpMethod
from apiroute.negotiation import DEFAULT_FORMATS
from apiroute.pattern import DEFAULT_REQUIREMENT

if TYPE_CHECKING:
    from apiroute.routing import Route


class PlaceholderConfig(BaseModel):
    """Settings for one ``<name>`` placeholder.

    Leaving ``default`` out and setting ``"default": null`` differ: only the
    latter makes the placeholder optional in the compiled pattern.
    """

    model_config = ConfigDict(extra="forbid")

    requirement: str = DEFAULT_REQUIREMENT
    default: str | None = None

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    def as_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"requirement": self.requirement}
        if self.has_default:
            options["default"] = self.default
        return options


class RouteConfig(BaseModel):
    """Everything needed to construct a :class:`~apiroute.routing.Route`."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    path: str = Field(alias="value")
    handler: str | None = Field(default=None, alias="presenter")
    methods: list[str] | dict[str, str] | None = None
    parameters: dict[str, PlaceholderConfig] = Field(default_factory=dict)
    disabled: bool = Field(default=False, alias="disable")
    format: str | None = None
    formats: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_FORMATS))

    @field_validator("methods")
    @classmethod
    def _known_verbs(cls, value: list[str] | dict[str, str] | None) -> list[str] | dict[str, str] | None:
        if value is None:
            return value
        verbs = value.keys() if isinstance(value, dict) else value
        unknown = sorted(v for v in verbs if HttpMethod.parse(v) is None)
        if unknown:
            allowed = ", ".join(m.value for m in HttpMethod)
            msg = f"Unknown HTTP method(s) {unknown}; expected one of {allowed}"
            raise ValueError(msg)
        if isinstance(value, dict):
            return {verb.upper(): action for verb, action in value.items()}
        return [verb.upper() for verb in value]

    @field_validator("format")
    @classmethod
    def _blank_format_is_unpinned(cls, value: str | None) -> str | None:
        return value or None

    def to_route(self) -> Route:
        from apiroute.routing import Route

        return Route(
            self.path,
            self.handler,
            methods=self.methods,
            parameters={name: p.as_options() for name, p in self.parameters.items()},
            disabled=self.disabled,
            format=self.format,
            formats=self.formats,
        )
