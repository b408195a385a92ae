from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class ServerConfig:
    name: str = "mcp-bridge"
    version: str = "0.1.0"


@dataclass
class UpstreamConfig:
    base_url: str = "http://127.0.0.1:8080"
    path: str = "/categories"
    list_field: str = "categories"
    timeout_seconds: float = 10.0
    resource_uri: str = "categories://summary"

    @property
    def url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.path.lstrip("/")


@dataclass
class HTTPConfig:
    host: str = "127.0.0.1"
    port: int = 3000
    mount_path: str = "/mcp"


@dataclass
class BridgeConfig:
    server: ServerConfig = dataclasses.field(default_factory=ServerConfig)
    upstream: UpstreamConfig = dataclasses.field(default_factory=UpstreamConfig)
    http: HTTPConfig = dataclasses.field(default_factory=HTTPConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeConfig":
        def build(dc_cls, key):
            values = data.get(key, {})
            return dc_cls(**values)

        return cls(
            server=build(ServerConfig, "server"),
            upstream=build(UpstreamConfig, "upstream"),
            http=build(HTTPConfig, "http"),
        )
