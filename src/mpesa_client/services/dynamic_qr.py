"""
Dynamic QR: generate a QR code customers scan to pay a merchant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Type, Union

from ..core.constants import QrTransactionCode
from ..core.payloads import wire_value
from .base import ServiceBuilder, check_amount, check_enum, check_text

__all__ = ["DynamicQrBuilder", "DynamicQrRequest", "DynamicQrResponse"]


@dataclass(frozen=True)
class DynamicQrResponse:
    response_code: str
    request_id: str
    response_description: str
    qr_code: str = field(repr=False)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "DynamicQrResponse":
        return cls(
            response_code=str(payload["ResponseCode"]),
            request_id=str(payload["RequestID"]),
            response_description=str(payload["ResponseDescription"]),
            qr_code=str(payload["QRCode"]),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class DynamicQrRequest:
    path: ClassVar[str] = "mpesa/qrcode/v1/generate"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = DynamicQrResponse

    merchant_name: str
    ref_no: str
    amount: Union[int, float]
    transaction_type: QrTransactionCode
    credit_party_identifier: str
    size: str = "300"

    def to_wire(self) -> Dict[str, Any]:
        return {
            "MerchantName": self.merchant_name,
            "RefNo": self.ref_no,
            "Amount": self.amount,
            "TrxCode": wire_value(self.transaction_type),
            "CPI": self.credit_party_identifier,
            "Size": self.size,
        }


class DynamicQrBuilder(ServiceBuilder):
    request_type = DynamicQrRequest
    required = (
        "merchant_name",
        "ref_no",
        "amount",
        "transaction_type",
        "credit_party_identifier",
    )
    defaults = {"size": "300"}

    def merchant_name(self, value: str) -> "DynamicQrBuilder":
        return self._set("merchant_name", value)

    def ref_no(self, value: str) -> "DynamicQrBuilder":
        return self._set("ref_no", value)

    def amount(self, value: Union[int, float, str]) -> "DynamicQrBuilder":
        return self._set("amount", value)

    def transaction_type(self, value: QrTransactionCode) -> "DynamicQrBuilder":
        return self._set("transaction_type", value)

    def credit_party_identifier(self, value: str) -> "DynamicQrBuilder":
        """Till number, paybill, agent number or phone number being paid."""
        return self._set("credit_party_identifier", value)

    def size(self, value: Union[int, str]) -> "DynamicQrBuilder":
        """Edge length of the QR image in pixels."""
        return self._set("size", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "credit_party_identifier")
        check_text(values, "ref_no")
        check_amount(values, "amount", invalid)
        check_enum(values, "transaction_type", QrTransactionCode, invalid)
        size = str(values.get("size", ""))
        if not size.isdigit() or int(size) <= 0:
            invalid["size"] = "must be a positive number of pixels"
        else:
            values["size"] = size
