"""
C2B Simulate: fake a customer payment to a short code (sandbox only).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Optional, Type, Union

from ..core.constants import CommandId
from ..core.payloads import first_present, wire_value
from .base import ServiceBuilder, check_amount, check_enum, check_text

__all__ = ["C2bSimulateBuilder", "C2bSimulateRequest", "C2bSimulateResponse"]


@dataclass(frozen=True)
class C2bSimulateResponse:
    originator_conversation_id: str
    response_description: str
    conversation_id: Optional[str] = None
    response_code: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "C2bSimulateResponse":
        conversation_id = payload.get("ConversationID")
        response_code = payload.get("ResponseCode")
        return cls(
            originator_conversation_id=str(
                first_present(
                    payload, "OriginatorCoversationID", "OriginatorConversationID"
                )
            ),
            response_description=str(payload["ResponseDescription"]),
            conversation_id=None if conversation_id is None else str(conversation_id),
            response_code=None if response_code is None else str(response_code),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class C2bSimulateRequest:
    path: ClassVar[str] = "mpesa/c2b/v1/simulate"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = C2bSimulateResponse

    short_code: str
    msisdn: str
    amount: Union[int, float]
    command_id: CommandId = CommandId.CUSTOMER_PAY_BILL_ONLINE
    bill_ref_number: str = "None"

    def to_wire(self) -> Dict[str, Any]:
        return {
            "CommandID": wire_value(self.command_id),
            "Amount": self.amount,
            "Msisdn": self.msisdn,
            "BillRefNumber": self.bill_ref_number,
            "ShortCode": self.short_code,
        }


class C2bSimulateBuilder(ServiceBuilder):
    request_type = C2bSimulateRequest
    required = ("short_code", "msisdn", "amount")

    def short_code(self, value: str) -> "C2bSimulateBuilder":
        return self._set("short_code", value)

    def msisdn(self, value: str) -> "C2bSimulateBuilder":
        """Phone number the simulated payment comes from."""
        return self._set("msisdn", value)

    def amount(self, value: Union[int, float, str]) -> "C2bSimulateBuilder":
        return self._set("amount", value)

    def command_id(self, value: CommandId) -> "C2bSimulateBuilder":
        return self._set("command_id", value)

    def bill_ref_number(self, value: str) -> "C2bSimulateBuilder":
        return self._set("bill_ref_number", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "short_code")
        check_text(values, "msisdn")
        check_amount(values, "amount", invalid)
        check_enum(values, "command_id", CommandId, invalid)
        if values.get("command_id") not in (
            None,
            CommandId.CUSTOMER_PAY_BILL_ONLINE,
            CommandId.CUSTOMER_BUY_GOODS_ONLINE,
        ) and "command_id" not in invalid:
            invalid["command_id"] = (
                "must be CustomerPayBillOnline or CustomerBuyGoodsOnline"
            )
