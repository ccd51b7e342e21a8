"""apiroute command-line interface powered by Typer."""

import json
from pathlib import Path
from typing import Annotated, Any
from urllib.parse import urlencode

import typer
from pydantic import ValidationError

from apiroute.config import RouteConfig
from apiroute.errors import RouteConfigError
from apiroute.methods import DEFAULT_ACTIONS, HttpMethod
from apiroute.request import Request
from apiroute.routing import Route

app = typer.Typer(name="apiroute", add_completion=False, no_args_is_help=True)


# ------------------------------------------------------------------
# Shared options
# ------------------------------------------------------------------

TemplateArg = Annotated[str, typer.Argument(help="Path template, e.g. '/users/<id>[/<format>]'.")]
HandlerOpt = Annotated[str | None, typer.Option("--handler", help="Handler identifier of the route.")]
MethodOpt = Annotated[
    list[str] | None,
    typer.Option("--method", "-m", help="Enable a verb, optionally with an action: GET or GET=read. Repeatable."),
]
RequirementOpt = Annotated[
    list[str] | None,
    typer.Option("--requirement", "-r", help="Placeholder requirement: name=regex. Repeatable."),
]
DefaultOpt = Annotated[
    list[str] | None,
    typer.Option("--default", "-d", help="Placeholder default: name=value. Repeatable."),
]
ConfigOpt = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="JSON route file for handler, methods and parameters; options override it."),
]


def _split_pairs(values: list[str] | None, option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"expected name=value, got {item!r}", param_hint=option)
        pairs[name] = value
    return pairs


def _split_methods(values: list[str] | None) -> list[str] | dict[str, str] | None:
    if not values:
        return None
    if not any("=" in v for v in values):
        return list(values)
    mapping: dict[str, str] = {}
    for item in values:
        verb, _, action = item.partition("=")
        if not action:
            known = HttpMethod.parse(verb)
            action = DEFAULT_ACTIONS[known] if known else ""
        mapping[verb] = action
    return mapping


def _load_route(
    template: str,
    handler: str | None,
    methods: list[str] | None,
    requirements: list[str] | None,
    defaults: list[str] | None,
    config: Path | None,
) -> Route:
    """Merge the ``--config`` file and command-line options into a Route."""
    data: dict[str, Any] = {}
    if config is not None:
        try:
            data = json.loads(config.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            typer.echo(f"Error reading {str(config)!r}: {exc}", err=True)
            raise typer.Exit(1) from exc

    data.pop("value", None)
    data["path"] = template
    if handler is not None:
        data["handler"] = handler
    if methods:
        data["methods"] = _split_methods(methods)

    parameters: dict[str, dict[str, Any]] = data.setdefault("parameters", {})
    for name, regex in _split_pairs(requirements, "--requirement").items():
        parameters.setdefault(name, {})["requirement"] = regex
    for name, value in _split_pairs(defaults, "--default").items():
        parameters.setdefault(name, {})["default"] = value

    try:
        return RouteConfig.model_validate(data).to_route()
    except (ValidationError, RouteConfigError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


@app.command("compile")
def show_pattern(
    template: TemplateArg,
    requirement: RequirementOpt = None,
    default: DefaultOpt = None,
    config: ConfigOpt = None,
) -> None:
    """Show the regular expression and capture order a template compiles to."""
    route = _load_route(template, None, None, requirement, default, config)
    compiled = route.compiled
    _echo_json(
        {
            "expression": compiled.expression,
            "capture_order": list(compiled.capture_order),
            "required": sorted(compiled.required),
        }
    )


@app.command()
def match(
    template: TemplateArg,
    path: Annotated[str, typer.Argument(help="Request path to match.")],
    verb: Annotated[str, typer.Option("--verb", help="Transport HTTP verb.")] = "GET",
    accept: Annotated[str, typer.Option(help="Accept header value.")] = "",
    override: Annotated[str, typer.Option(help="X-HTTP-Method-Override header value.")] = "",
    query: Annotated[list[str] | None, typer.Option("--query", "-q", help="Query parameter name=value.")] = None,
    secure: Annotated[bool, typer.Option("--secure/--insecure", help="Pretend the request came over HTTPS.")] = False,
    handler: HandlerOpt = None,
    method: MethodOpt = None,
    requirement: RequirementOpt = None,
    default: DefaultOpt = None,
    config: ConfigOpt = None,
) -> None:
    """Match a request against a route and print the resulting action."""
    route = _load_route(template, handler, method, requirement, default, config)

    headers = [(b"accept", accept.encode("latin-1"))]
    if override:
        headers.append((b"x-http-method-override", override.encode("latin-1")))
    scope = {
        "type": "http",
        "method": verb,
        "path": path,
        "query_string": urlencode(_split_pairs(query, "--query")).encode("latin-1"),
        "headers": headers,
        "scheme": "https" if secure else "http",
    }

    invocation = route.match(Request(scope))
    if invocation is None:
        typer.echo("no match", err=True)
        raise typer.Exit(1)

    _echo_json(
        {
            "handler": invocation.handler,
            "method": invocation.method,
            "action": invocation.action,
            "parameters": dict(invocation.parameters),
            "format": invocation.format,
            "content_type": route.mime_type(invocation.format) if invocation.format in route.formats else None,
            "secured": invocation.secured,
        }
    )


@app.command()
def build(
    template: TemplateArg,
    action: Annotated[str, typer.Argument(help="Action name to build a URL for.")],
    param: Annotated[list[str] | None, typer.Option("--param", "-p", help="Parameter name=value. Repeatable.")] = None,
    base_url: Annotated[str, typer.Option(help="Prefix for the built path.")] = "",
    handler: HandlerOpt = None,
    method: MethodOpt = None,
    requirement: RequirementOpt = None,
    default: DefaultOpt = None,
    config: ConfigOpt = None,
) -> None:
    """Build a URL from an action and parameters."""
    route = _load_route(template, handler, method, requirement, default, config)
    url = route.build(route.handler, action, _split_pairs(param, "--param"), base_url)
    if url is None:
        typer.echo("no match", err=True)
        raise typer.Exit(1)
    typer.echo(url)
