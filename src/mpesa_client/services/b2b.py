"""
Business to Business (B2B) transfers between two short codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Type, Union

from ..core.constants import CommandId, IdentifierType
from ..core.payloads import ConversationResponse, wire_value
from .base import ServiceBuilder, check_amount, check_enum, check_text, check_url

__all__ = ["B2bBuilder", "B2bRequest", "B2bResponse"]


class B2bResponse(ConversationResponse):
    pass


@dataclass(frozen=True)
class B2bRequest:
    path: ClassVar[str] = "mpesa/b2b/v1/paymentrequest"
    requires_credential: ClassVar[bool] = True
    response_type: ClassVar[Type[Any]] = B2bResponse

    initiator_name: str
    amount: Union[int, float]
    party_a: str
    party_b: str
    result_url: str
    queue_timeout_url: str
    account_ref: str
    command_id: CommandId = CommandId.BUSINESS_TO_BUSINESS_TRANSFER
    sender_id: IdentifierType = IdentifierType.SHORT_CODE
    receiver_id: IdentifierType = IdentifierType.SHORT_CODE
    remarks: Optional[str] = None
    security_credential: Optional[str] = field(default=None, repr=False)

    def to_wire(self) -> Dict[str, Any]:
        # "Reciever" is the gateway's spelling
        return {
            "Initiator": self.initiator_name,
            "SecurityCredential": self.security_credential,
            "CommandID": wire_value(self.command_id),
            "Amount": self.amount,
            "PartyA": self.party_a,
            "SenderIdentifierType": wire_value(self.sender_id),
            "PartyB": self.party_b,
            "RecieverIdentifierType": wire_value(self.receiver_id),
            "Remarks": self.remarks,
            "QueueTimeOutURL": self.queue_timeout_url,
            "ResultURL": self.result_url,
            "AccountReference": self.account_ref,
        }


class B2bBuilder(ServiceBuilder):
    request_type = B2bRequest
    required = (
        "initiator_name",
        "amount",
        "party_a",
        "party_b",
        "result_url",
        "queue_timeout_url",
        "account_ref",
    )

    def initiator_name(self, value: str) -> "B2bBuilder":
        return self._set("initiator_name", value)

    def amount(self, value: Union[int, float, str]) -> "B2bBuilder":
        return self._set("amount", value)

    def party_a(self, value: str) -> "B2bBuilder":
        """Short code sending the funds."""
        return self._set("party_a", value)

    def party_b(self, value: str) -> "B2bBuilder":
        """Short code receiving the funds."""
        return self._set("party_b", value)

    def result_url(self, value: str) -> "B2bBuilder":
        return self._set("result_url", value)

    def queue_timeout_url(self, value: str) -> "B2bBuilder":
        return self._set("queue_timeout_url", value)

    def account_ref(self, value: str) -> "B2bBuilder":
        return self._set("account_ref", value)

    def command_id(self, value: CommandId) -> "B2bBuilder":
        return self._set("command_id", value)

    def sender_id(self, value: IdentifierType) -> "B2bBuilder":
        return self._set("sender_id", value)

    def receiver_id(self, value: IdentifierType) -> "B2bBuilder":
        return self._set("receiver_id", value)

    def remarks(self, value: str) -> "B2bBuilder":
        return self._set("remarks", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "party_a")
        check_text(values, "party_b")
        check_amount(values, "amount", invalid)
        check_url(values, "result_url", invalid)
        check_url(values, "queue_timeout_url", invalid)
        check_enum(values, "command_id", CommandId, invalid)
        check_enum(values, "sender_id", IdentifierType, invalid)
        check_enum(values, "receiver_id", IdentifierType, invalid)
