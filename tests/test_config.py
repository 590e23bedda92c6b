"""Tests for routecache.config — CacheConfig and policy parsing."""

import pytest

from routecache.backends.memory import MemoryBackend
from routecache.config import CacheConfig, parse_policy, parse_routes
from routecache.errors import ConfigurationError
from routecache.policy import PolicyRegistry, RoutePolicy


class TestCacheConfig:
    def test_defaults(self) -> None:
        cfg = CacheConfig()

        assert cfg.cache_prefix == "slm_cache_"
        assert isinstance(cfg.routes, PolicyRegistry)
        assert len(cfg.routes) == 0
        assert cfg.cache is None
        assert cfg.use_compression is False
        assert cfg.compression_level == 6
        assert cfg.store_filter is None

    def test_override(self) -> None:
        backend = MemoryBackend()
        cfg = CacheConfig(cache_prefix="pages_", cache=backend, use_compression=True)

        assert cfg.cache_prefix == "pages_"
        assert cfg.cache is backend
        assert cfg.use_compression is True

    def test_plain_dict_routes_become_registry(self) -> None:
        cfg = CacheConfig(routes={"home": RoutePolicy()})
        assert isinstance(cfg.routes, PolicyRegistry)
        assert "home" in cfg.routes

    def test_frozen(self) -> None:
        cfg = CacheConfig()

        with pytest.raises(AttributeError):
            cfg.use_compression = True  # type: ignore[misc]


class TestFromMapping:
    def test_full_application_config(self) -> None:
        cfg = CacheConfig.from_mapping(
            {
                "db": {"dsn": "sqlite://"},
                "slm_cache": {
                    "cache_prefix": "pages_",
                    "cache": "page_cache",
                    "use_compression": True,
                    "routes": {"blog.show": {"match_method": ["GET"]}},
                },
            }
        )

        assert cfg.cache_prefix == "pages_"
        assert cfg.cache == "page_cache"
        assert cfg.use_compression is True
        assert cfg.routes["blog.show"].methods == frozenset({"GET"})

    def test_section_only(self) -> None:
        cfg = CacheConfig.from_mapping({"routes": {"home": {}}, "cache": {"adapter": "memory"}})
        assert cfg.routes["home"] == RoutePolicy()
        assert cfg.cache == {"adapter": "memory"}

    def test_empty_mapping_uses_defaults(self) -> None:
        cfg = CacheConfig.from_mapping({})
        assert cfg.cache_prefix == "slm_cache_"
        assert len(cfg.routes) == 0
        assert cfg.use_compression is False

    def test_overrides_win(self) -> None:
        cfg = CacheConfig.from_mapping({"use_compression": True}, use_compression=False)
        assert cfg.use_compression is False

    def test_store_filter_override(self) -> None:
        def only_ok(response) -> bool:
            return response.status == 200

        cfg = CacheConfig.from_mapping({}, store_filter=only_ok)
        assert cfg.store_filter is only_ok

    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(ConfigurationError):
            CacheConfig.from_mapping(["routes"])  # type: ignore[arg-type]

    def test_rejects_non_mapping_section(self) -> None:
        with pytest.raises(ConfigurationError, match="slm_cache"):
            CacheConfig.from_mapping({"slm_cache": "yes"})

    def test_rejects_non_string_prefix(self) -> None:
        with pytest.raises(ConfigurationError, match="cache_prefix"):
            CacheConfig.from_mapping({"cache_prefix": 42})

    def test_rejects_string_compression_flag(self) -> None:
        # "false" is truthy; it must not silently enable compression
        with pytest.raises(ConfigurationError, match="use_compression"):
            CacheConfig.from_mapping({"use_compression": "false"})

    def test_rejects_non_integer_compression_level(self) -> None:
        with pytest.raises(ConfigurationError, match="compression_level"):
            CacheConfig.from_mapping({"compression_level": "high"})

    def test_rejects_bool_compression_level(self) -> None:
        with pytest.raises(ConfigurationError, match="compression_level"):
            CacheConfig.from_mapping({"compression_level": True})

    def test_reads_compression_level(self) -> None:
        cfg = CacheConfig.from_mapping({"use_compression": True, "compression_level": 9})
        assert cfg.compression_level == 9


class TestParsePolicy:
    def test_none_means_unconstrained(self) -> None:
        assert parse_policy("home", None) == RoutePolicy()

    def test_single_method_widens(self) -> None:
        policy = parse_policy("home", {"match_method": "get"})
        assert policy.methods == frozenset({"GET"})

    def test_method_list(self) -> None:
        policy = parse_policy("home", {"match_method": ["GET", "HEAD"]})
        assert policy.methods == frozenset({"GET", "HEAD"})

    def test_literal_and_list_params(self) -> None:
        policy = parse_policy(
            "page",
            {"match_route_params": {"lang": ["en", "fr"], "section": "docs"}},
        )
        assert policy.params is not None
        assert policy.params["lang"] == frozenset({"en", "fr"})
        assert policy.params["section"] == "docs"

    def test_no_params_key_means_no_constraint(self) -> None:
        assert parse_policy("home", {"match_method": "GET"}).params is None

    def test_rejects_non_mapping_policy(self) -> None:
        with pytest.raises(ConfigurationError, match="home"):
            parse_policy("home", ["GET"])  # type: ignore[arg-type]

    def test_rejects_bad_method_list(self) -> None:
        with pytest.raises(ConfigurationError, match="match_method"):
            parse_policy("home", {"match_method": ["GET", 1]})

    def test_rejects_bad_params(self) -> None:
        with pytest.raises(ConfigurationError, match="match_route_params"):
            parse_policy("home", {"match_route_params": ["lang"]})

    def test_rejects_bad_param_value(self) -> None:
        with pytest.raises(ConfigurationError, match="match_route_params.lang"):
            parse_policy("home", {"match_route_params": {"lang": 3}})


class TestParseRoutes:
    def test_builds_registry(self) -> None:
        registry = parse_routes({"a": {}, "b": {"match_method": "POST"}})
        assert set(registry) == {"a", "b"}
        assert registry["b"].methods == frozenset({"POST"})

    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(ConfigurationError, match="routes"):
            parse_routes(["a"])  # type: ignore[arg-type]
