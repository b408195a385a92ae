from __future__ import annotations

import typing as t

import httpx
from starlette.applications import Starlette
from starlette.routing import Route

from .core.models import validate_capability_name
from .core.session import Session
from .core.transport import StatelessHTTPTransport
from .providers.categories import CategoriesProvider
from .utils.config import BridgeConfig


def build_session(
    config: BridgeConfig,
    *,
    upstream_transport: t.Optional[httpx.AsyncBaseTransport] = None,
) -> Session:
    """Create a fresh session with every capability provider attached."""
    session = Session(server_name=config.server.name, server_version=config.server.version)
    CategoriesProvider(config.upstream, transport=upstream_transport).attach(session)
    return session


def create_app(
    config: t.Optional[BridgeConfig] = None,
    *,
    upstream_transport: t.Optional[httpx.AsyncBaseTransport] = None,
) -> Starlette:
    config = config or BridgeConfig()
    validate_capability_name(config.upstream.resource_uri)
    transport = StatelessHTTPTransport(lambda: build_session(config, upstream_transport=upstream_transport))
    return Starlette(routes=[Route(config.http.mount_path, endpoint=transport)])
