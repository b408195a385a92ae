"""Utility module for configuration."""

from .config import BridgeConfig, HTTPConfig, ServerConfig, UpstreamConfig

__all__ = [
    "BridgeConfig",
    "HTTPConfig",
    "ServerConfig",
    "UpstreamConfig",
]
