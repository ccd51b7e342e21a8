"""Bidirectional API route templates: match requests, build URLs."""

__version__ = "0.1.0"

from apiroute.config import PlaceholderConfig, RouteConfig
from apiroute.errors import RouteConfigError
from apiroute.methods import DEFAULT_ACTIONS, ActionTable, HttpMethod
from apiroute.negotiation import negotiate_format
from apiroute.pattern import CompiledPattern, Placeholder, compile_template
from apiroute.request import Request
from apiroute.routing import ActionInvocation, Route

__all__ = [
    "DEFAULT_ACTIONS",
    "ActionInvocation",
    "ActionTable",
    "CompiledPattern",
    "HttpMethod",
    "Placeholder",
    "PlaceholderConfig",
    "Request",
    "Route",
    "RouteConfig",
    "RouteConfigError",
    "compile_template",
    "negotiate_format",
]
