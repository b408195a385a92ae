"""mcp_bridge

A stateless HTTP-to-JSON-RPC bridge exposing MCP resources. Each POST gets a
fresh session that dispatches exactly one call and is released with the
response.
"""

from .app import build_session, create_app
from .core.errors import (
    BridgeError,
    DuplicateCapabilityError,
    ProtocolError,
    SessionClosedError,
    SessionStateError,
    UpstreamError,
    UpstreamPayloadError,
)
from .core.models import CapabilityDescriptor, RequestEnvelope, SessionState
from .core.session import Session
from .core.transport import HTTPTransportBinding, StatelessHTTPTransport
from .providers import CategoriesProvider
from .utils.config import BridgeConfig

__all__ = [
    "create_app",
    "build_session",
    "Session",
    "StatelessHTTPTransport",
    "HTTPTransportBinding",
    "CategoriesProvider",
    "BridgeConfig",
    "CapabilityDescriptor",
    "RequestEnvelope",
    "SessionState",
    "BridgeError",
    "DuplicateCapabilityError",
    "ProtocolError",
    "SessionClosedError",
    "SessionStateError",
    "UpstreamError",
    "UpstreamPayloadError",
]

__version__ = "0.1.0"
