"""
Account Balance: query the balance of a short code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Type

from ..core.constants import CommandId, IdentifierType
from ..core.payloads import ConversationResponse, wire_value
from .base import ServiceBuilder, check_enum, check_text, check_url

__all__ = [
    "AccountBalanceBuilder",
    "AccountBalanceRequest",
    "AccountBalanceResponse",
]


class AccountBalanceResponse(ConversationResponse):
    pass


@dataclass(frozen=True)
class AccountBalanceRequest:
    path: ClassVar[str] = "mpesa/accountbalance/v1/query"
    requires_credential: ClassVar[bool] = True
    response_type: ClassVar[Type[Any]] = AccountBalanceResponse

    initiator_name: str
    party_a: str
    result_url: str
    queue_timeout_url: str
    command_id: CommandId = CommandId.ACCOUNT_BALANCE
    identifier_type: IdentifierType = IdentifierType.SHORT_CODE
    remarks: str = "None"
    security_credential: Optional[str] = field(default=None, repr=False)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "Initiator": self.initiator_name,
            "SecurityCredential": self.security_credential,
            "CommandID": wire_value(self.command_id),
            "PartyA": self.party_a,
            "IdentifierType": wire_value(self.identifier_type),
            "Remarks": self.remarks,
            "QueueTimeOutURL": self.queue_timeout_url,
            "ResultURL": self.result_url,
        }


class AccountBalanceBuilder(ServiceBuilder):
    request_type = AccountBalanceRequest
    required = ("initiator_name", "party_a", "result_url", "queue_timeout_url")

    def initiator_name(self, value: str) -> "AccountBalanceBuilder":
        return self._set("initiator_name", value)

    def party_a(self, value: str) -> "AccountBalanceBuilder":
        """The short code whose balance is queried."""
        return self._set("party_a", value)

    def result_url(self, value: str) -> "AccountBalanceBuilder":
        return self._set("result_url", value)

    def queue_timeout_url(self, value: str) -> "AccountBalanceBuilder":
        return self._set("queue_timeout_url", value)

    def command_id(self, value: CommandId) -> "AccountBalanceBuilder":
        return self._set("command_id", value)

    def identifier_type(self, value: IdentifierType) -> "AccountBalanceBuilder":
        return self._set("identifier_type", value)

    def remarks(self, value: str) -> "AccountBalanceBuilder":
        return self._set("remarks", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "party_a")
        check_url(values, "result_url", invalid)
        check_url(values, "queue_timeout_url", invalid)
        check_enum(values, "command_id", CommandId, invalid)
        check_enum(values, "identifier_type", IdentifierType, invalid)
