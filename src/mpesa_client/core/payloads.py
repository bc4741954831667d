"""
Shapes shared by every gateway request and response.

A request is any object satisfying :class:`GatewayRequest`. The dispatch
pipeline only relies on these attributes, so adding a service never touches
:meth:`mpesa_client.core.client.Mpesa.dispatch`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Protocol, Type, TypeVar

__all__ = [
    "ConversationResponse",
    "GatewayRequest",
    "GatewayResponse",
    "first_present",
    "wire_value",
]

R = TypeVar("R", bound="GatewayResponse")


class GatewayResponse(Protocol):
    @classmethod
    def from_response(cls: Type[R], payload: Mapping[str, Any]) -> R:
        ...


class GatewayRequest(Protocol):
    """
    A frozen dataclass describing one gateway call.

    When ``requires_credential`` is true the dataclass must also have a
    ``security_credential`` field, which dispatch fills in. ``to_wire``
    returns the JSON body: an object for most calls, an array for the bulk
    bill manager calls.
    """

    path: ClassVar[str]
    requires_credential: ClassVar[bool]
    response_type: ClassVar[Type[Any]]

    def to_wire(self) -> Any:
        ...


def wire_value(value: Any) -> Any:
    """Convert enums to the plain strings the gateway expects."""
    if isinstance(value, enum.Enum):
        return value.value
    return value


def first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    """
    Return the value of the first key present in ``payload``.

    The gateway is inconsistent about some spellings
    (``OriginatorCoversationID`` vs ``OriginatorConversationID``).
    """
    for key in keys:
        if key in payload:
            return payload[key]
    raise KeyError(keys[0])


@dataclass(frozen=True)
class ConversationResponse:
    """
    The acknowledgement returned by the asynchronous business APIs.

    The actual outcome is delivered later to the request's result URL.
    """

    conversation_id: str
    originator_conversation_id: str
    response_code: str
    response_description: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "ConversationResponse":
        return cls(
            conversation_id=str(payload["ConversationID"]),
            originator_conversation_id=str(
                first_present(
                    payload, "OriginatorConversationID", "OriginatorCoversationID"
                )
            ),
            response_code=str(payload["ResponseCode"]),
            response_description=str(payload["ResponseDescription"]),
            raw=dict(payload),
        )
