from __future__ import annotations

import enum
import typing as t
from dataclasses import dataclass

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    BlobResourceContents,
    TextResourceContents,
)
from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .errors import InvalidCapabilityError

# Not part of the JSON-RPC reserved set; MCP uses it for unknown resource URIs
RESOURCE_NOT_FOUND = -32002

JSONRPC_VERSION = "2.0"

_capability_uri = TypeAdapter(AnyUrl)


class SessionState(str, enum.Enum):
    CREATED = "CREATED"
    REGISTERING = "REGISTERING"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class RequestEnvelope(BaseModel):
    """A single decoded JSON-RPC call."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    jsonrpc: t.Literal["2.0"]
    id: t.Union[StrictStr, StrictInt, None] = None
    method: StrictStr = Field(min_length=1)
    params: t.Dict[str, t.Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _integral_id(cls, value: t.Any) -> t.Any:
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @field_validator("params", mode="before")
    @classmethod
    def _null_params(cls, value: t.Any) -> t.Any:
        return {} if value is None else value

    @property
    def is_notification(self) -> bool:
        return self.id is None and self.method.startswith("notifications/")


@dataclass(frozen=True)
class CapabilityDescriptor:
    name: str
    mime_type: str = "text/plain"
    title: t.Optional[str] = None
    description: t.Optional[str] = None

    def __post_init__(self) -> None:
        validate_capability_name(self.name)


def validate_capability_name(name: str) -> None:
    """Capability names are exposed as MCP resource URIs and must parse as one."""
    try:
        _capability_uri.validate_python(name)
    except ValidationError as exc:
        raise InvalidCapabilityError(name) from exc


ContentBlock = t.Union[TextResourceContents, BlobResourceContents]
CapabilityResult = t.List[ContentBlock]
CapabilityHandler = t.Callable[[t.Dict[str, t.Any]], t.Awaitable[CapabilityResult]]
CloseCallback = t.Callable[[], t.Awaitable[None]]


@dataclass(frozen=True)
class RegisteredCapability:
    descriptor: CapabilityDescriptor
    handler: CapabilityHandler


__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "RESOURCE_NOT_FOUND",
    "JSONRPC_VERSION",
    "SessionState",
    "RequestEnvelope",
    "CapabilityDescriptor",
    "validate_capability_name",
    "ContentBlock",
    "CapabilityResult",
    "CapabilityHandler",
    "CloseCallback",
    "RegisteredCapability",
]
