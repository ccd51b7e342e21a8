"""Tests for action tables and verb resolution."""

from __future__ import annotations

from apiroute.methods import DEFAULT_ACTIONS, ActionTable, HttpMethod, resolve_method

# =====================================================================
# HttpMethod
# =====================================================================


def test_parse_is_case_insensitive() -> None:
    assert HttpMethod.parse("get") is HttpMethod.GET
    assert HttpMethod.parse("Patch") is HttpMethod.PATCH


def test_parse_unknown_verb() -> None:
    assert HttpMethod.parse("TRACE") is None


def test_every_verb_has_default_action() -> None:
    assert set(DEFAULT_ACTIONS) == set(HttpMethod)


# =====================================================================
# ActionTable
# =====================================================================


class TestActionTable:
    def test_no_methods_enables_defaults(self) -> None:
        table = ActionTable.from_methods(None)
        assert table.methods() == ["POST", "GET", "PUT", "DELETE", "OPTIONS", "PATCH"]
        assert table.action_for("PUT") == "update"

    def test_verb_list_uses_default_actions(self) -> None:
        table = ActionTable.from_methods(["GET", "delete", "TRACE"])
        assert table.methods() == ["GET", "DELETE"]
        assert table.action_for("DELETE") == "delete"
        assert table.action_for("POST") is None

    def test_mapping_sets_explicit_actions(self) -> None:
        table = ActionTable.from_methods({"GET": "show", "BREW": "coffee"})
        assert table.action_for(HttpMethod.GET) == "show"
        assert table.methods() == ["GET"]
        assert not table.has_action("coffee")

    def test_set_action_infers_verb_from_default_name(self) -> None:
        table = ActionTable.from_methods(["GET"])
        table.set_action("update")
        assert table.action_for("PUT") == "update"

    def test_set_action_ignores_unknown_verb(self) -> None:
        table = ActionTable.from_methods(["GET"])
        table.set_action("trace", "TRACE")
        table.set_action("mystery")
        assert table.methods() == ["GET"]

    def test_action_for_unknown_verb(self) -> None:
        assert ActionTable.from_methods(None).action_for("TRACE") is None

    def test_has_action(self) -> None:
        table = ActionTable.from_methods({"POST": "publish"})
        assert table.has_action("publish")
        assert not table.has_action("create")


# =====================================================================
# resolve_method
# =====================================================================


class TestResolveMethod:
    def test_transport_verb_upper_cased(self) -> None:
        assert resolve_method({}, {}, "get", ActionTable.from_methods(None)) == "GET"

    def test_override_header_wins(self) -> None:
        actions = ActionTable.from_methods(None)
        assert resolve_method({"x-http-method-override": "delete"}, {}, "POST", actions) == "DELETE"

    def test_header_beats_query_parameter(self) -> None:
        actions = ActionTable.from_methods(None)
        headers = {"x-http-method-override": "PUT"}
        query = {"__apiRouteMethod": "PATCH"}
        assert resolve_method(headers, query, "POST", actions) == "PUT"

    def test_empty_header_is_ignored(self) -> None:
        actions = ActionTable.from_methods(None)
        assert resolve_method({"x-http-method-override": ""}, {}, "POST", actions) == "POST"

    def test_query_parameter_used_when_action_exists(self) -> None:
        actions = ActionTable.from_methods(["POST", "PATCH"])
        assert resolve_method({}, {"__apiRouteMethod": "patch"}, "POST", actions) == "PATCH"

    def test_query_parameter_ignored_without_action(self) -> None:
        actions = ActionTable.from_methods(["POST"])
        assert resolve_method({}, {"__apiRouteMethod": "DELETE"}, "post", actions) == "POST"

    def test_header_not_checked_against_actions(self) -> None:
        actions = ActionTable.from_methods(["GET"])
        assert resolve_method({"x-http-method-override": "DELETE"}, {}, "GET", actions) == "DELETE"
