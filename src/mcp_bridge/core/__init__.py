"""Core module for the per-request session and its HTTP transport."""

from .errors import (
    BridgeError,
    DuplicateCapabilityError,
    ProtocolError,
    SessionClosedError,
    SessionError,
    SessionStateError,
    UpstreamError,
    UpstreamPayloadError,
)
from .models import CapabilityDescriptor, CapabilityResult, RequestEnvelope, SessionState
from .session import Session
from .transport import CATCH_ALL_RESPONSE, HTTPTransportBinding, StatelessHTTPTransport

__all__ = [
    # Session and transport
    "Session",
    "StatelessHTTPTransport",
    "HTTPTransportBinding",
    "CATCH_ALL_RESPONSE",
    # Models
    "CapabilityDescriptor",
    "CapabilityResult",
    "RequestEnvelope",
    "SessionState",
    # Errors
    "BridgeError",
    "SessionError",
    "SessionClosedError",
    "SessionStateError",
    "DuplicateCapabilityError",
    "ProtocolError",
    "UpstreamError",
    "UpstreamPayloadError",
]
