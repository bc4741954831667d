"""
Business to Customer (B2C) payments.

Lets a company pay customers who are end-users of its products or services,
e.g. salary payments, promotions or refunds. Requires a B2C short code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Type, Union

from ..core.constants import CommandId
from ..core.payloads import ConversationResponse, wire_value
from .base import ServiceBuilder, check_amount, check_enum, check_text, check_url

__all__ = ["B2cBuilder", "B2cRequest", "B2cResponse"]


class B2cResponse(ConversationResponse):
    pass


@dataclass(frozen=True)
class B2cRequest:
    path: ClassVar[str] = "mpesa/b2c/v1/paymentrequest"
    requires_credential: ClassVar[bool] = True
    response_type: ClassVar[Type[Any]] = B2cResponse

    initiator_name: str
    amount: Union[int, float]
    party_a: str
    party_b: str
    result_url: str
    queue_timeout_url: str
    command_id: CommandId = CommandId.BUSINESS_PAYMENT
    remarks: Optional[str] = None
    occasion: Optional[str] = None
    security_credential: Optional[str] = field(default=None, repr=False)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "InitiatorName": self.initiator_name,
            "SecurityCredential": self.security_credential,
            "CommandID": wire_value(self.command_id),
            "Amount": self.amount,
            "PartyA": self.party_a,
            "PartyB": self.party_b,
            "Remarks": self.remarks,
            "QueueTimeOutURL": self.queue_timeout_url,
            "ResultURL": self.result_url,
            "Occasion": self.occasion,
        }


class B2cBuilder(ServiceBuilder):
    request_type = B2cRequest
    required = (
        "initiator_name",
        "amount",
        "party_a",
        "party_b",
        "result_url",
        "queue_timeout_url",
    )

    def initiator_name(self, value: str) -> "B2cBuilder":
        return self._set("initiator_name", value)

    def amount(self, value: Union[int, float, str]) -> "B2cBuilder":
        return self._set("amount", value)

    def party_a(self, value: str) -> "B2cBuilder":
        """Short code sending the money."""
        return self._set("party_a", value)

    def party_b(self, value: str) -> "B2cBuilder":
        """Phone number receiving the money."""
        return self._set("party_b", value)

    def result_url(self, value: str) -> "B2cBuilder":
        return self._set("result_url", value)

    def queue_timeout_url(self, value: str) -> "B2cBuilder":
        return self._set("queue_timeout_url", value)

    def command_id(self, value: CommandId) -> "B2cBuilder":
        return self._set("command_id", value)

    def remarks(self, value: str) -> "B2cBuilder":
        return self._set("remarks", value)

    def occasion(self, value: str) -> "B2cBuilder":
        return self._set("occasion", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "party_a")
        check_text(values, "party_b")
        check_amount(values, "amount", invalid)
        check_url(values, "result_url", invalid)
        check_url(values, "queue_timeout_url", invalid)
        check_enum(values, "command_id", CommandId, invalid)
