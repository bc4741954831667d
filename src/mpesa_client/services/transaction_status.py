"""
Transaction Status: ask the gateway about a previous transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Type

from ..core.constants import CommandId, IdentifierType
from ..core.payloads import ConversationResponse, wire_value
from .base import ServiceBuilder, check_enum, check_text, check_url

__all__ = [
    "TransactionStatusBuilder",
    "TransactionStatusRequest",
    "TransactionStatusResponse",
]


class TransactionStatusResponse(ConversationResponse):
    pass


@dataclass(frozen=True)
class TransactionStatusRequest:
    path: ClassVar[str] = "mpesa/transactionstatus/v1/query"
    requires_credential: ClassVar[bool] = True
    response_type: ClassVar[Type[Any]] = TransactionStatusResponse

    initiator_name: str
    transaction_id: str
    party_a: str
    result_url: str
    queue_timeout_url: str
    command_id: CommandId = CommandId.TRANSACTION_STATUS_QUERY
    identifier_type: IdentifierType = IdentifierType.SHORT_CODE
    remarks: str = "None"
    occasion: str = "None"
    security_credential: Optional[str] = field(default=None, repr=False)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "Initiator": self.initiator_name,
            "SecurityCredential": self.security_credential,
            "CommandID": wire_value(self.command_id),
            "TransactionID": self.transaction_id,
            "PartyA": self.party_a,
            "IdentifierType": wire_value(self.identifier_type),
            "ResultURL": self.result_url,
            "QueueTimeOutURL": self.queue_timeout_url,
            "Remarks": self.remarks,
            "Occasion": self.occasion,
        }


class TransactionStatusBuilder(ServiceBuilder):
    request_type = TransactionStatusRequest
    required = (
        "initiator_name",
        "transaction_id",
        "party_a",
        "result_url",
        "queue_timeout_url",
    )

    def initiator_name(self, value: str) -> "TransactionStatusBuilder":
        return self._set("initiator_name", value)

    def transaction_id(self, value: str) -> "TransactionStatusBuilder":
        """The M-Pesa receipt number of the transaction being queried."""
        return self._set("transaction_id", value)

    def party_a(self, value: str) -> "TransactionStatusBuilder":
        return self._set("party_a", value)

    def result_url(self, value: str) -> "TransactionStatusBuilder":
        return self._set("result_url", value)

    def queue_timeout_url(self, value: str) -> "TransactionStatusBuilder":
        return self._set("queue_timeout_url", value)

    def command_id(self, value: CommandId) -> "TransactionStatusBuilder":
        return self._set("command_id", value)

    def identifier_type(self, value: IdentifierType) -> "TransactionStatusBuilder":
        return self._set("identifier_type", value)

    def remarks(self, value: str) -> "TransactionStatusBuilder":
        return self._set("remarks", value)

    def occasion(self, value: str) -> "TransactionStatusBuilder":
        return self._set("occasion", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "party_a")
        check_url(values, "result_url", invalid)
        check_url(values, "queue_timeout_url", invalid)
        check_enum(values, "command_id", CommandId, invalid)
        check_enum(values, "identifier_type", IdentifierType, invalid)
