"""Unit tests for configuration."""

from mcp_bridge.utils.config import BridgeConfig, UpstreamConfig


class TestBridgeConfig:
    def test_defaults(self):
        config = BridgeConfig()

        assert config.http.mount_path == "/mcp"
        assert config.upstream.resource_uri == "categories://summary"
        assert config.upstream.list_field == "categories"
        assert config.upstream.timeout_seconds == 10.0

    def test_from_dict_overrides_sections(self):
        config = BridgeConfig.from_dict(
            {
                "server": {"name": "bridge"},
                "upstream": {"base_url": "https://api.example.org/", "timeout_seconds": 2.5},
                "http": {"port": 8081},
            }
        )

        assert config.server.name == "bridge"
        assert config.server.version == "0.1.0"
        assert config.upstream.base_url == "https://api.example.org/"
        assert config.upstream.timeout_seconds == 2.5
        assert config.http.port == 8081
        assert config.http.host == "127.0.0.1"

    def test_from_empty_dict(self):
        assert BridgeConfig.from_dict({}) == BridgeConfig()


class TestUpstreamConfig:
    def test_url_joins_base_and_path(self):
        assert UpstreamConfig(base_url="https://api.example.org/", path="/categories").url == (
            "https://api.example.org/categories"
        )
        assert UpstreamConfig(base_url="https://api.example.org", path="v1/categories").url == (
            "https://api.example.org/v1/categories"
        )
