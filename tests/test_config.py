"""Tests for validated route configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from apiroute.config import PlaceholderConfig, RouteConfig
from apiroute.errors import RouteConfigError

# -- PlaceholderConfig ------------------------------------------------------


def test_placeholder_defaults() -> None:
    config = PlaceholderConfig()
    assert config.requirement == r"\w+"
    assert not config.has_default
    assert config.as_options() == {"requirement": r"\w+"}


def test_explicit_null_default_counts_as_default() -> None:
    config = PlaceholderConfig.model_validate({"default": None})
    assert config.has_default
    assert config.as_options() == {"requirement": r"\w+", "default": None}


def test_placeholder_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        PlaceholderConfig.model_validate({"regex": r"\d+"})


# -- RouteConfig ------------------------------------------------------------


def test_field_names_and_aliases_both_accepted() -> None:
    by_alias = RouteConfig.model_validate({"value": "/x", "presenter": "X", "disable": True})
    by_name = RouteConfig.model_validate({"path": "/x", "handler": "X", "disabled": True})
    assert by_alias == by_name


def test_methods_are_upper_cased() -> None:
    assert RouteConfig(path="/x", methods=["get", "post"]).methods == ["GET", "POST"]
    assert RouteConfig(path="/x", methods={"get": "show"}).methods == {"GET": "show"}


def test_unknown_method_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown HTTP method"):
        RouteConfig(path="/x", methods=["GET", "BREW"])


def test_blank_format_is_unpinned() -> None:
    assert RouteConfig(path="/x", format="").format is None


def test_pinned_format_must_be_configured() -> None:
    config = RouteConfig(path="/x", format="yaml")
    with pytest.raises(RouteConfigError, match="pinned format 'yaml'"):
        config.to_route()


def test_to_route_carries_everything() -> None:
    config = RouteConfig.model_validate(
        {
            "path": "/reports[/<year>]",
            "handler": "Reports",
            "methods": {"GET": "list"},
            "parameters": {"year": {"requirement": r"\d{4}", "default": None}},
            "format": "xml",
        }
    )
    route = config.to_route()
    assert route.handler == "Reports"
    assert route.methods() == ["GET"]
    assert route.format == "xml"
    assert route.compiled.expression == r"^/reports(/(\d{4})?)?$"
    assert route.placeholders["year"].has_default
