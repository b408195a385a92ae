from __future__ import annotations

import json
import logging
import typing as t

import anyio
import anyio.lowlevel
from starlette.types import Receive, Scope, Send

from .models import INTERNAL_ERROR, JSONRPC_VERSION
from .session import Session

SessionFactory = t.Callable[[], Session]

# Sent for any failure that escapes the session; the call id is never known here
CATCH_ALL_RESPONSE: t.Dict[str, t.Any] = {
    "jsonrpc": JSONRPC_VERSION,
    "id": None,
    "error": {"code": INTERNAL_ERROR, "message": "Internal error"},
}


class HTTPTransportBinding:
    """One-shot binding between an ASGI response channel and a session.

    At most one response goes out through a binding. Once closed (the client
    disconnected, or the request finished) writes are dropped.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self._closed = False
        self._responded = False
        self._logger = logging.getLogger(__name__)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def responded(self) -> bool:
        return self._responded

    async def respond(
        self,
        status: int,
        body: bytes = b"",
        *,
        content_type: t.Optional[str] = None,
        headers: t.Optional[t.List[t.Tuple[bytes, bytes]]] = None,
    ) -> bool:
        if self._closed:
            self._logger.info("Transport: binding closed, dropping response status=%d", status)
            return False
        if self._responded:
            self._logger.warning("Transport: response already sent, dropping status=%d", status)
            return False
        self._responded = True

        raw_headers: t.List[t.Tuple[bytes, bytes]] = [(b"content-length", str(len(body)).encode("latin1"))]
        if content_type:
            raw_headers.append((b"content-type", content_type.encode("latin1")))
        raw_headers.extend(headers or [])

        await self._send({"type": "http.response.start", "status": status, "headers": raw_headers})
        await self._send({"type": "http.response.body", "body": body, "more_body": False})
        return True

    async def respond_json(self, status: int, payload: t.Any) -> bool:
        body = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return await self.respond(status, body, content_type="application/json")

    def close(self) -> None:
        self._closed = True


class StatelessHTTPTransport:
    """ASGI adapter bridging one HTTP POST to one freshly created session.

    Every request gets its own session from `session_factory`; nothing is kept
    between requests. Non-POST methods are rejected with 405 before any session
    exists. Anything that escapes the session is answered with the fixed
    catch-all envelope and status 500.

    Usage:
        transport = StatelessHTTPTransport(lambda: build_session(config))
        app = Starlette(routes=[Route("/mcp", endpoint=transport)])
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory
        self._logger = logging.getLogger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return

        method = scope.get("method")
        self._logger.info("Transport: http request method=%s path=%s", method, scope.get("path"))
        binding = HTTPTransportBinding(send)

        if method != "POST":
            await binding.respond(405, headers=[(b"allow", b"POST")])
            binding.close()
            return

        body = await self._read_body(receive)
        if body is None:
            self._logger.info("Transport: client disconnected before body was received")
            binding.close()
            return

        await self.handle(body, receive, binding)

    async def handle(self, body: bytes, receive: Receive, binding: HTTPTransportBinding) -> None:
        session: t.Optional[Session] = None
        try:
            payload = json.loads(body)
            session = self._session_factory()
            response = await self._dispatch(session, payload, receive, binding)
            if response is None:
                await binding.respond(202)
            else:
                await binding.respond_json(200, response)
        except Exception:
            self._logger.exception("Transport: request failed")
            await binding.respond_json(500, CATCH_ALL_RESPONSE)
        finally:
            await self._release(binding, session)

    async def _dispatch(
        self,
        session: Session,
        payload: t.Any,
        receive: Receive,
        binding: HTTPTransportBinding,
    ) -> t.Optional[t.Dict[str, t.Any]]:
        async with anyio.create_task_group() as tg:
            tg.start_soon(self._watch_disconnect, receive, binding, session)
            try:
                return await session.handle_request(payload)
            finally:
                tg.cancel_scope.cancel()

    async def _watch_disconnect(self, receive: Receive, binding: HTTPTransportBinding, session: Session) -> None:
        # The in-flight call is left to finish; only the binding and session are released
        while True:
            message = await receive()
            if message.get("type") == "http.disconnect":
                self._logger.info("Transport: client disconnected, releasing session")
                await self._release(binding, session)
                return
            await anyio.lowlevel.checkpoint()

    async def _release(self, binding: HTTPTransportBinding, session: t.Optional[Session]) -> None:
        binding.close()
        if session is not None:
            await session.close()

    async def _read_body(self, receive: Receive) -> t.Optional[bytes]:
        body_chunks: t.List[bytes] = []
        while True:
            message = await receive()
            if message.get("type") == "http.request":
                body_chunks.append(message.get("body", b""))
                if not message.get("more_body", False):
                    break
            elif message.get("type") == "http.disconnect":
                return None
        return b"".join(body_chunks)
