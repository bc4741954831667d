"""
C2B Register URL: tell the gateway where to send payment notifications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Type

from ..core.constants import ResponseType
from ..core.payloads import first_present, wire_value
from .base import ServiceBuilder, check_enum, check_text, check_url

__all__ = ["C2bRegisterBuilder", "C2bRegisterRequest", "C2bRegisterResponse"]


@dataclass(frozen=True)
class C2bRegisterResponse:
    originator_conversation_id: str
    response_code: str
    response_description: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "C2bRegisterResponse":
        return cls(
            originator_conversation_id=str(
                first_present(
                    payload, "OriginatorCoversationID", "OriginatorConversationID"
                )
            ),
            response_code=str(payload["ResponseCode"]),
            response_description=str(payload["ResponseDescription"]),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class C2bRegisterRequest:
    path: ClassVar[str] = "mpesa/c2b/v1/registerurl"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = C2bRegisterResponse

    short_code: str
    confirmation_url: str
    validation_url: str
    validation_fallback: ResponseType = ResponseType.COMPLETED

    def to_wire(self) -> Dict[str, Any]:
        return {
            "ValidationURL": self.validation_url,
            "ConfirmationURL": self.confirmation_url,
            "ResponseType": wire_value(self.validation_fallback),
            "ShortCode": self.short_code,
        }


class C2bRegisterBuilder(ServiceBuilder):
    request_type = C2bRegisterRequest
    required = ("short_code", "confirmation_url", "validation_url")

    def short_code(self, value: str) -> "C2bRegisterBuilder":
        return self._set("short_code", value)

    def confirmation_url(self, value: str) -> "C2bRegisterBuilder":
        return self._set("confirmation_url", value)

    def validation_url(self, value: str) -> "C2bRegisterBuilder":
        return self._set("validation_url", value)

    def response_type(self, value: ResponseType) -> "C2bRegisterBuilder":
        """Completed or Cancelled when the validation URL cannot be reached."""
        return self._set("validation_fallback", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "short_code")
        check_url(values, "confirmation_url", invalid)
        check_url(values, "validation_url", invalid)
        check_enum(values, "validation_fallback", ResponseType, invalid)
