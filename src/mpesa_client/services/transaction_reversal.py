"""
Transaction Reversal: undo a completed payment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Type, Union

from ..core.constants import CommandId, IdentifierType
from ..core.payloads import ConversationResponse, wire_value
from .base import ServiceBuilder, check_amount, check_enum, check_text, check_url

__all__ = [
    "TransactionReversalBuilder",
    "TransactionReversalRequest",
    "TransactionReversalResponse",
]


class TransactionReversalResponse(ConversationResponse):
    pass


@dataclass(frozen=True)
class TransactionReversalRequest:
    path: ClassVar[str] = "mpesa/reversal/v1/request"
    requires_credential: ClassVar[bool] = True
    response_type: ClassVar[Type[Any]] = TransactionReversalResponse

    initiator: str
    transaction_id: str
    receiver_party: str
    amount: Union[int, float]
    result_url: str
    timeout_url: str
    command_id: CommandId = CommandId.TRANSACTION_REVERSAL
    receiver_identifier_type: IdentifierType = IdentifierType.REVERSAL
    remarks: str = "None"
    occasion: str = "None"
    security_credential: Optional[str] = field(default=None, repr=False)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "Initiator": self.initiator,
            "SecurityCredential": self.security_credential,
            "CommandID": wire_value(self.command_id),
            "TransactionID": self.transaction_id,
            "ReceiverParty": self.receiver_party,
            "RecieverIdentifierType": wire_value(self.receiver_identifier_type),
            "ResultURL": self.result_url,
            "QueueTimeOutURL": self.timeout_url,
            "Remarks": self.remarks,
            "Occasion": self.occasion,
            "Amount": self.amount,
        }


class TransactionReversalBuilder(ServiceBuilder):
    request_type = TransactionReversalRequest
    required = (
        "initiator",
        "transaction_id",
        "receiver_party",
        "amount",
        "result_url",
        "timeout_url",
    )

    def initiator(self, value: str) -> "TransactionReversalBuilder":
        return self._set("initiator", value)

    def transaction_id(self, value: str) -> "TransactionReversalBuilder":
        return self._set("transaction_id", value)

    def receiver_party(self, value: str) -> "TransactionReversalBuilder":
        """The organization that received the original payment."""
        return self._set("receiver_party", value)

    def amount(self, value: Union[int, float, str]) -> "TransactionReversalBuilder":
        return self._set("amount", value)

    def result_url(self, value: str) -> "TransactionReversalBuilder":
        return self._set("result_url", value)

    def timeout_url(self, value: str) -> "TransactionReversalBuilder":
        return self._set("timeout_url", value)

    def command_id(self, value: CommandId) -> "TransactionReversalBuilder":
        return self._set("command_id", value)

    def receiver_identifier_type(
        self, value: IdentifierType
    ) -> "TransactionReversalBuilder":
        return self._set("receiver_identifier_type", value)

    def remarks(self, value: str) -> "TransactionReversalBuilder":
        return self._set("remarks", value)

    def occasion(self, value: str) -> "TransactionReversalBuilder":
        return self._set("occasion", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "receiver_party")
        check_amount(values, "amount", invalid)
        check_url(values, "result_url", invalid)
        check_url(values, "timeout_url", invalid)
        check_enum(values, "command_id", CommandId, invalid)
        check_enum(values, "receiver_identifier_type", IdentifierType, invalid)
