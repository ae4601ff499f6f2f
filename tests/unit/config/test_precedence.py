"""Unit tests for prefix-override precedence resolution."""

import pytest

from srfactory.config.precedence import PrefixOverrideResolver, resolve_prefix_override
from srfactory.config.types import ConfigSource


class TestResolvePrefixOverride:
    """Test prefix-override resolution."""

    def test_prefixed_key_overrides_ambient(self) -> None:
        """Test that a prefixed key wins over the ambient key of the same name."""
        config = {"ssl.protocol": "TLSv1.2", "ns.ssl.protocol": "SSLv3"}

        resolved = resolve_prefix_override(config, "ns.")

        assert resolved == {"ssl.protocol": "SSLv3"}

    def test_prefixed_key_wins_regardless_of_insertion_order(self) -> None:
        """Test that precedence does not depend on mapping order."""
        config = {"ns.ssl.protocol": "SSLv3", "ssl.protocol": "TLSv1.2"}

        resolved = resolve_prefix_override(config, "ns.")

        assert resolved["ssl.protocol"] == "SSLv3"

    def test_other_namespace_excluded(self) -> None:
        """Test that keys under another reserved prefix never appear."""
        config = {
            "ns.url": "http://registry:8081",
            "other.url": "http://elsewhere:9092",
            "other.ssl.protocol": "TLSv1.1",
        }

        resolved = resolve_prefix_override(config, "ns.", reserved_prefixes=("ns.", "other."))

        assert resolved == {"url": "http://registry:8081"}
        assert "other.url" not in resolved
        assert "ssl.protocol" not in resolved

    def test_same_key_under_two_prefixes(self) -> None:
        """Test that only the requested prefix is honored when both carry a key."""
        config = {"ns.ssl.protocol": "TLSv1.3", "other.ssl.protocol": "TLSv1.1"}

        resolved = resolve_prefix_override(config, "other.", reserved_prefixes=("ns.", "other."))

        assert resolved == {"ssl.protocol": "TLSv1.1"}

    def test_ambient_pass_through_without_prefixed_keys(self) -> None:
        """Test that ambient keys are returned unchanged when nothing is prefixed."""
        config = {"ssl.protocol": "TLSv1.2", "request.timeout.ms": 30000, "enabled": True}

        resolved = resolve_prefix_override(config, "ns.")

        assert resolved == config

    def test_empty_configuration(self) -> None:
        """Test that an empty configuration resolves to an empty mapping."""
        assert resolve_prefix_override({}, "ns.") == {}

    def test_basic_auth_scenario(self) -> None:
        """Test the credentials keys are stripped of their prefix."""
        config = {
            "ns.basic.auth.credentials.source": "USER_INFO",
            "ns.basic.auth.user.info": "username:password",
        }

        resolved = resolve_prefix_override(config, "ns.")

        assert resolved == {
            "basic.auth.credentials.source": "USER_INFO",
            "basic.auth.user.info": "username:password",
        }

    def test_bare_prefix_key_dropped(self) -> None:
        """Test that a key equal to the prefix itself resolves to nothing."""
        resolved = resolve_prefix_override({"ns.": "value", "a": 1}, "ns.")

        assert resolved == {"a": 1}

    def test_result_is_read_only(self) -> None:
        """Test that the resolved mapping cannot be mutated."""
        resolved = resolve_prefix_override({"a": 1}, "ns.")

        with pytest.raises(TypeError):
            resolved["a"] = 2  # type: ignore[index]

    def test_input_not_mutated(self) -> None:
        """Test that resolution leaves the source mapping untouched."""
        config = {"ssl.protocol": "TLSv1.2", "ns.ssl.protocol": "TLSv1.3"}
        snapshot = dict(config)

        resolve_prefix_override(config, "ns.")

        assert config == snapshot

    def test_empty_prefix_rejected(self) -> None:
        """Test that an empty namespace prefix is rejected."""
        with pytest.raises(ValueError, match="non-empty"):
            resolve_prefix_override({"a": 1}, "")


class TestPrefixOverrideResolver:
    """Test the resolver object and its source tracking."""

    def test_requested_prefix_always_reserved(self) -> None:
        """Test that the requested prefix is added to the reserved set."""
        resolver = PrefixOverrideResolver("ns.", reserved_prefixes=("other.",))

        assert resolver.reserved_prefixes == ("other.", "ns.")

    def test_resolve_matches_function(self) -> None:
        """Test that the resolver applies the same algorithm as the function."""
        config = {"ssl.protocol": "TLSv1.2", "ns.ssl.protocol": "TLSv1.3", "other.x": 1}
        resolver = PrefixOverrideResolver("ns.", reserved_prefixes=("other.",))

        assert resolver.resolve(config) == resolve_prefix_override(
            config, "ns.", reserved_prefixes=("other.",)
        )

    def test_config_source_tracking(self) -> None:
        """Test that config source is correctly identified."""
        config = {"ssl.protocol": "TLSv1.2", "ns.ssl.protocol": "TLSv1.3", "timeout": 5, "other.x": 1}
        resolver = PrefixOverrideResolver("ns.", reserved_prefixes=("other.",))

        assert resolver.get_config_source("ssl.protocol", config) == ConfigSource.PREFIXED
        assert resolver.get_config_source("timeout", config) == ConfigSource.AMBIENT
        assert resolver.get_config_source("other.x", config) is None
        assert resolver.get_config_source("x", config) is None
        assert resolver.get_config_source("missing", config) is None

    def test_resolve_with_metadata(self) -> None:
        """Test resolution with source metadata."""
        config = {"ssl.protocol": "TLSv1.2", "ns.ssl.protocol": "TLSv1.3", "timeout": 5}
        resolver = PrefixOverrideResolver("ns.")

        effective, source_map = resolver.resolve_with_metadata(config)

        assert effective == {"ssl.protocol": "TLSv1.3", "timeout": 5}
        assert source_map == {
            "ssl.protocol": ConfigSource.PREFIXED,
            "timeout": ConfigSource.AMBIENT,
        }
