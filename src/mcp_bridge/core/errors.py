from __future__ import annotations

import typing as t

from mcp.types import ErrorData

RequestId = t.Union[str, int, None]


class BridgeError(Exception):
    """Base class for mcp-bridge failures."""


class SessionError(BridgeError):
    pass


class SessionClosedError(SessionError):
    def __init__(self, message: str = "session closed") -> None:
        super().__init__(message)


class SessionStateError(SessionError):
    pass


class DuplicateCapabilityError(BridgeError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"capability already registered: {name}")
        self.name = name


class ProtocolError(BridgeError):
    """A JSON-RPC error destined for the wire.

    `request_id` is None when the id of the failing call could not be
    determined (for example, the envelope itself was malformed).
    """

    def __init__(self, code: int, message: str, request_id: RequestId = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.request_id = request_id

    @property
    def error(self) -> ErrorData:
        return ErrorData(code=self.code, message=self.message)

    def to_response(self) -> t.Dict[str, t.Any]:
        return {
            "jsonrpc": "2.0",
            "id": self.request_id,
            "error": self.error.model_dump(exclude_none=True),
        }


class UpstreamError(BridgeError):
    """The upstream data provider failed or could not be reached."""


class UpstreamPayloadError(UpstreamError):
    """The upstream answered 2xx but the body does not have the expected shape."""


class InvalidCapabilityError(BridgeError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"capability name is not a valid URI: {name!r}")
        self.name = name
