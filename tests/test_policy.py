"""Tests for routecache.policy — route policies and request matching."""

import pytest

from routecache.policy import MatchResult, PolicyRegistry, RoutePolicy, match_route


def _registry(**policies: RoutePolicy) -> PolicyRegistry:
    return PolicyRegistry(policies)


class TestRoutePolicy:
    def test_defaults_allow_everything(self) -> None:
        policy = RoutePolicy()
        assert policy.allows_method("DELETE")
        assert policy.allows_params({})

    def test_methods_upper_cased(self) -> None:
        policy = RoutePolicy(methods=frozenset({"get", "Head"}))
        assert policy.methods == frozenset({"GET", "HEAD"})

    def test_params_read_only(self) -> None:
        policy = RoutePolicy(params={"lang": "en"})
        with pytest.raises(TypeError):
            policy.params["lang"] = "fr"  # type: ignore[index]

    def test_frozen(self) -> None:
        policy = RoutePolicy()
        with pytest.raises(AttributeError):
            policy.methods = frozenset({"GET"})  # type: ignore[misc]


class TestPolicyRegistry:
    def test_mapping_interface(self) -> None:
        policy = RoutePolicy()
        registry = PolicyRegistry({"home": policy})
        assert registry["home"] is policy
        assert list(registry) == ["home"]
        assert len(registry) == 1
        assert "missing" not in registry

    def test_source_dict_changes_do_not_leak(self) -> None:
        source = {"home": RoutePolicy()}
        registry = PolicyRegistry(source)
        source["other"] = RoutePolicy()
        assert "other" not in registry


class TestMatchRoute:
    def test_unknown_route(self) -> None:
        assert match_route(_registry(), "blog.show", {"id": "5"}, "GET") is None

    def test_route_without_constraints(self) -> None:
        registry = _registry(home=RoutePolicy())
        match = match_route(registry, "home", {}, "POST")
        assert isinstance(match, MatchResult)
        assert match.route == "home"
        assert match.policy is registry["home"]

    def test_method_rejected(self) -> None:
        registry = _registry(home=RoutePolicy(methods=frozenset({"GET", "HEAD"})))
        assert match_route(registry, "home", {}, "POST") is None

    def test_method_accepted(self) -> None:
        registry = _registry(home=RoutePolicy(methods=frozenset({"GET", "HEAD"})))
        assert match_route(registry, "home", {}, "GET") is not None

    def test_method_case_insensitive(self) -> None:
        registry = _registry(home=RoutePolicy(methods=frozenset({"GET"})))
        assert match_route(registry, "home", {}, "get") is not None

    def test_literal_param_rejected(self) -> None:
        registry = _registry(page=RoutePolicy(params={"lang": "en"}))
        assert match_route(registry, "page", {"lang": "fr"}, "GET") is None

    def test_literal_param_accepted(self) -> None:
        registry = _registry(page=RoutePolicy(params={"lang": "en"}))
        assert match_route(registry, "page", {"lang": "en"}, "GET") is not None

    def test_set_param_rejected(self) -> None:
        registry = _registry(page=RoutePolicy(params={"lang": frozenset({"en", "fr"})}))
        assert match_route(registry, "page", {"lang": "de"}, "GET") is None

    def test_set_param_accepted(self) -> None:
        registry = _registry(page=RoutePolicy(params={"lang": frozenset({"en", "fr"})}))
        assert match_route(registry, "page", {"lang": "fr"}, "GET") is not None

    def test_missing_param_never_matches(self) -> None:
        registry = _registry(page=RoutePolicy(params={"lang": "en"}))
        assert match_route(registry, "page", {"slug": "intro"}, "GET") is None

    def test_literal_requires_exact_equality(self) -> None:
        registry = _registry(page=RoutePolicy(params={"id": "5"}))
        assert match_route(registry, "page", {"id": 5}, "GET") is None

    def test_all_constraints_must_hold(self) -> None:
        registry = _registry(
            page=RoutePolicy(
                methods=frozenset({"GET"}),
                params={"lang": "en", "section": frozenset({"docs", "blog"})},
            )
        )
        assert match_route(registry, "page", {"lang": "en", "section": "docs"}, "GET")
        assert match_route(registry, "page", {"lang": "en", "section": "news"}, "GET") is None
        assert match_route(registry, "page", {"lang": "en", "section": "docs"}, "HEAD") is None

    def test_match_keeps_all_parameters(self) -> None:
        registry = _registry(page=RoutePolicy(params={"lang": "en"}))
        match = match_route(registry, "page", {"lang": "en", "slug": "intro"}, "GET")
        assert match is not None
        assert dict(match.parameters) == {"lang": "en", "slug": "intro"}

    def test_match_parameters_are_a_snapshot(self) -> None:
        params = {"id": "5"}
        match = match_route(_registry(show=RoutePolicy()), "show", params, "GET")
        params["id"] = "6"
        assert match is not None
        assert match.parameters["id"] == "5"
