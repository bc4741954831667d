"""
M-Pesa Express (Lipa na M-Pesa Online / STK push) and its status query.

Both requests carry a ``Password`` derived from the short code, the pass key
and the request timestamp instead of an encrypted security credential.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Dict, Mapping, Optional, Type, Union

from ..core.constants import TransactionType
from ..core.payloads import wire_value
from .base import ServiceBuilder, check_amount, check_enum, check_text, check_url

__all__ = [
    "DEFAULT_PASSKEY",
    "MpesaExpressBuilder",
    "MpesaExpressQueryBuilder",
    "MpesaExpressQueryRequest",
    "MpesaExpressQueryResponse",
    "MpesaExpressRequest",
    "MpesaExpressResponse",
    "express_password",
    "express_timestamp",
]

# Lipa na M-Pesa Online pass key of the sandbox short code 174379
DEFAULT_PASSKEY = "bfb279f9aa9bdbcf158e97dd71a467cd2e0c893059b10f78e6b72ada1ed2c919"

_GATEWAY_TIMEZONE = timezone(timedelta(hours=3), "EAT")
_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def express_timestamp(now: Optional[datetime] = None) -> str:
    """Format ``now`` (default: current gateway time) as ``YYYYMMDDHHMMSS``."""
    now = datetime.now(_GATEWAY_TIMEZONE) if now is None else now
    return now.strftime(_TIMESTAMP_FORMAT)


def express_password(business_short_code: str, pass_key: str, timestamp: str) -> str:
    raw = f"{business_short_code}{pass_key}{timestamp}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def _check_timestamp(values: Dict[str, Any], invalid: Dict[str, str]) -> None:
    timestamp = values.get("timestamp")
    if timestamp is None:
        values["timestamp"] = express_timestamp()
        return
    if isinstance(timestamp, datetime):
        values["timestamp"] = express_timestamp(timestamp)
        return
    try:
        datetime.strptime(str(timestamp), _TIMESTAMP_FORMAT)
    except ValueError:
        invalid["timestamp"] = f"'{timestamp}' is not in YYYYMMDDHHMMSS format"
    else:
        values["timestamp"] = str(timestamp)


@dataclass(frozen=True)
class MpesaExpressResponse:
    merchant_request_id: str
    checkout_request_id: str
    response_code: str
    response_description: str
    customer_message: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "MpesaExpressResponse":
        return cls(
            merchant_request_id=str(payload["MerchantRequestID"]),
            checkout_request_id=str(payload["CheckoutRequestID"]),
            response_code=str(payload["ResponseCode"]),
            response_description=str(payload["ResponseDescription"]),
            customer_message=str(payload["CustomerMessage"]),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class MpesaExpressRequest:
    path: ClassVar[str] = "mpesa/stkpush/v1/processrequest"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = MpesaExpressResponse

    business_short_code: str
    phone_number: str
    amount: Union[int, float]
    callback_url: str
    account_ref: str
    timestamp: str
    party_a: str
    party_b: str
    pass_key: str = field(default=DEFAULT_PASSKEY, repr=False)
    transaction_type: TransactionType = TransactionType.CUSTOMER_PAY_BILL_ONLINE
    transaction_desc: str = "None"

    @property
    def password(self) -> str:
        return express_password(self.business_short_code, self.pass_key, self.timestamp)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "BusinessShortCode": self.business_short_code,
            "Password": self.password,
            "Timestamp": self.timestamp,
            "TransactionType": wire_value(self.transaction_type),
            "Amount": self.amount,
            "PartyA": self.party_a,
            "PartyB": self.party_b,
            "PhoneNumber": self.phone_number,
            "CallBackURL": self.callback_url,
            "AccountReference": self.account_ref,
            "TransactionDesc": self.transaction_desc,
        }


class MpesaExpressBuilder(ServiceBuilder):
    request_type = MpesaExpressRequest
    required = (
        "business_short_code",
        "phone_number",
        "amount",
        "callback_url",
        "account_ref",
    )
    defaults = {
        "pass_key": DEFAULT_PASSKEY,
        "transaction_type": TransactionType.CUSTOMER_PAY_BILL_ONLINE,
        "transaction_desc": "None",
    }

    def business_short_code(self, value: str) -> "MpesaExpressBuilder":
        return self._set("business_short_code", value)

    def phone_number(self, value: str) -> "MpesaExpressBuilder":
        """Phone number that receives the STK prompt."""
        return self._set("phone_number", value)

    def amount(self, value: Union[int, float, str]) -> "MpesaExpressBuilder":
        return self._set("amount", value)

    def callback_url(self, value: str) -> "MpesaExpressBuilder":
        return self._set("callback_url", value)

    def account_ref(self, value: str) -> "MpesaExpressBuilder":
        return self._set("account_ref", value)

    def party_a(self, value: str) -> "MpesaExpressBuilder":
        """Paying phone number; defaults to ``phone_number``."""
        return self._set("party_a", value)

    def party_b(self, value: str) -> "MpesaExpressBuilder":
        """Receiving short code; defaults to ``business_short_code``."""
        return self._set("party_b", value)

    def pass_key(self, value: str) -> "MpesaExpressBuilder":
        return self._set("pass_key", value)

    def transaction_type(self, value: TransactionType) -> "MpesaExpressBuilder":
        return self._set("transaction_type", value)

    def transaction_desc(self, value: str) -> "MpesaExpressBuilder":
        return self._set("transaction_desc", value)

    def timestamp(self, value: Union[str, datetime]) -> "MpesaExpressBuilder":
        return self._set("timestamp", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "business_short_code")
        check_text(values, "phone_number")
        values.setdefault("party_a", values.get("phone_number"))
        values.setdefault("party_b", values.get("business_short_code"))
        check_text(values, "party_a")
        check_text(values, "party_b")
        check_amount(values, "amount", invalid)
        check_url(values, "callback_url", invalid)
        check_enum(values, "transaction_type", TransactionType, invalid)
        _check_timestamp(values, invalid)


@dataclass(frozen=True)
class MpesaExpressQueryResponse:
    merchant_request_id: str
    checkout_request_id: str
    response_code: str
    response_description: str
    result_code: str
    result_desc: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "MpesaExpressQueryResponse":
        return cls(
            merchant_request_id=str(payload["MerchantRequestID"]),
            checkout_request_id=str(payload["CheckoutRequestID"]),
            response_code=str(payload["ResponseCode"]),
            response_description=str(payload["ResponseDescription"]),
            result_code=str(payload["ResultCode"]),
            result_desc=str(payload["ResultDesc"]),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class MpesaExpressQueryRequest:
    path: ClassVar[str] = "mpesa/stkpushquery/v1/query"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = MpesaExpressQueryResponse

    business_short_code: str
    checkout_request_id: str
    timestamp: str
    pass_key: str = field(default=DEFAULT_PASSKEY, repr=False)

    @property
    def password(self) -> str:
        return express_password(self.business_short_code, self.pass_key, self.timestamp)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "BusinessShortCode": self.business_short_code,
            "Password": self.password,
            "Timestamp": self.timestamp,
            "CheckoutRequestID": self.checkout_request_id,
        }


class MpesaExpressQueryBuilder(ServiceBuilder):
    request_type = MpesaExpressQueryRequest
    required = ("business_short_code", "checkout_request_id")
    defaults = {"pass_key": DEFAULT_PASSKEY}

    def business_short_code(self, value: str) -> "MpesaExpressQueryBuilder":
        return self._set("business_short_code", value)

    def checkout_request_id(self, value: str) -> "MpesaExpressQueryBuilder":
        """The ``CheckoutRequestID`` returned by the original STK push."""
        return self._set("checkout_request_id", value)

    def pass_key(self, value: str) -> "MpesaExpressQueryBuilder":
        return self._set("pass_key", value)

    def timestamp(self, value: Union[str, datetime]) -> "MpesaExpressQueryBuilder":
        return self._set("timestamp", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "business_short_code")
        _check_timestamp(values, invalid)
