from __future__ import annotations

import logging
import typing as t

from mcp.shared.exceptions import McpError
from mcp.shared.version import SUPPORTED_PROTOCOL_VERSIONS
from mcp.types import (
    LATEST_PROTOCOL_VERSION,
    Implementation,
    InitializeResult,
    ListResourcesResult,
    ReadResourceResult,
    Resource,
    ResourcesCapability,
    ServerCapabilities,
)
from pydantic import ValidationError

from .errors import (
    DuplicateCapabilityError,
    ProtocolError,
    RequestId,
    SessionClosedError,
    SessionStateError,
)
from .models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    RESOURCE_NOT_FOUND,
    CapabilityDescriptor,
    CapabilityHandler,
    CloseCallback,
    RegisteredCapability,
    RequestEnvelope,
    SessionState,
)

JSON = t.Dict[str, t.Any]
MethodHandler = t.Callable[[JSON], t.Awaitable[JSON]]


class Session:
    """Short-lived protocol endpoint serving exactly one JSON-RPC call.

    A session is created for a single inbound request, has capabilities
    registered on it, dispatches one call through `handle_request` and is then
    closed. It keeps no state that could leak into another request.

    Usage:
        async with Session() as session:
            session.register(descriptor, handler)
            response = await session.handle_request(payload)
    """

    def __init__(self, server_name: str = "mcp-bridge", server_version: str = "0.1.0") -> None:
        self._server_info = Implementation(name=server_name, version=server_version)
        self._capabilities: t.Dict[str, RegisteredCapability] = {}
        self._close_callbacks: t.List[CloseCallback] = []
        self._state = SessionState.CREATED
        self._methods: t.Dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
        }
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is SessionState.CLOSED

    def register(
        self,
        descriptor: CapabilityDescriptor,
        handler: CapabilityHandler,
        *,
        on_close: t.Optional[CloseCallback] = None,
    ) -> None:
        """Add a capability under `descriptor.name`.

        Names are unique per session; a duplicate is a configuration error and
        raises immediately. `on_close` runs when the session is closed and is
        where a handler releases what it holds.
        """
        if self._state is SessionState.CLOSED:
            raise SessionClosedError()
        if self._state is SessionState.ACTIVE:
            raise SessionStateError("cannot register capabilities after dispatch has started")
        if descriptor.name in self._capabilities:
            raise DuplicateCapabilityError(descriptor.name)

        self._capabilities[descriptor.name] = RegisteredCapability(descriptor=descriptor, handler=handler)
        if on_close is not None:
            self._close_callbacks.append(on_close)
        self._state = SessionState.REGISTERING
        self._logger.debug("Session: registered capability name=%s mime=%s", descriptor.name, descriptor.mime_type)

    async def handle_request(self, payload: t.Any) -> t.Optional[JSON]:
        """Dispatch one decoded JSON-RPC call and return the response envelope.

        Protocol-level failures are returned as error envelopes, never raised.
        Returns None for notifications, which carry no response.
        """
        if self._state is SessionState.CLOSED:
            raise SessionClosedError()
        if self._state is SessionState.ACTIVE:
            raise SessionStateError("session already handled a request")
        self._state = SessionState.ACTIVE

        try:
            envelope = self._decode(payload)
            if envelope.is_notification:
                self._logger.debug("Session: notification method=%s", envelope.method)
                return None
            result = await self._dispatch(envelope)
        except ProtocolError as exc:
            self._logger.info("Session: error code=%d id=%r message=%s", exc.code, exc.request_id, exc.message)
            return exc.to_response()

        return {"jsonrpc": JSONRPC_VERSION, "id": envelope.id, "result": result}

    async def close(self) -> None:
        if self._state is SessionState.CLOSED:
            return
        self._state = SessionState.CLOSED
        callbacks, self._close_callbacks = self._close_callbacks, []
        for callback in reversed(callbacks):
            try:
                await callback()
            except Exception:
                self._logger.exception("Session: close callback failed")
        self._capabilities.clear()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.close()

    def _decode(self, payload: t.Any) -> RequestEnvelope:
        try:
            return RequestEnvelope.model_validate(payload)
        except ValidationError as exc:
            raise ProtocolError(INVALID_REQUEST, "Invalid Request", _best_effort_id(payload)) from exc

    async def _dispatch(self, envelope: RequestEnvelope) -> JSON:
        method = self._methods.get(envelope.method)
        if method is None:
            raise ProtocolError(METHOD_NOT_FOUND, f"Method not found: {envelope.method}", envelope.id)

        try:
            return await method(envelope.params)
        except ProtocolError as exc:
            raise ProtocolError(exc.code, exc.message, envelope.id) from exc
        except McpError as exc:
            raise ProtocolError(exc.error.code, exc.error.message, envelope.id) from exc
        except Exception as exc:
            self._logger.warning("Session: method=%s failed: %s", envelope.method, exc)
            raise ProtocolError(INTERNAL_ERROR, str(exc) or type(exc).__name__, envelope.id) from exc

    async def _initialize(self, params: JSON) -> JSON:
        requested = params.get("protocolVersion")
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION
        result = InitializeResult(
            protocolVersion=version,
            capabilities=ServerCapabilities(resources=ResourcesCapability(subscribe=False, listChanged=False)),
            serverInfo=self._server_info,
        )
        return _dump(result)

    async def _ping(self, params: JSON) -> JSON:
        return {}

    async def _list_resources(self, params: JSON) -> JSON:
        resources = [
            Resource(
                uri=entry.descriptor.name,
                name=entry.descriptor.title or entry.descriptor.name,
                description=entry.descriptor.description,
                mimeType=entry.descriptor.mime_type,
            )
            for entry in self._capabilities.values()
        ]
        return _dump(ListResourcesResult(resources=resources))

    async def _read_resource(self, params: JSON) -> JSON:
        uri = params.get("uri")
        if not isinstance(uri, str) or not uri:
            raise ProtocolError(INVALID_PARAMS, "resources/read requires a 'uri' string parameter")
        # exact-name lookup
        entry = self._capabilities.get(uri)
        if entry is None:
            raise ProtocolError(RESOURCE_NOT_FOUND, f"Resource not found: {uri}")
        contents = await entry.handler(params)
        return _dump(ReadResourceResult(contents=contents))


def _best_effort_id(payload: t.Any) -> RequestId:
    if isinstance(payload, dict):
        request_id = payload.get("id")
        if isinstance(request_id, float) and request_id.is_integer():
            return int(request_id)
        if isinstance(request_id, (str, int)) and not isinstance(request_id, bool):
            return request_id
    return None


def _dump(model: t.Any) -> JSON:
    return model.model_dump(by_alias=True, mode="json", exclude_none=True)
