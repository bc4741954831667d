"""
Enumerations shared by the gateway payloads.

Values are the exact strings the gateway expects on the wire.
"""

from __future__ import annotations

import enum

__all__ = [
    "CommandId",
    "IdentifierType",
    "QrTransactionCode",
    "ResponseType",
    "SendRemindersTypes",
    "TransactionType",
]


class CommandId(str, enum.Enum):
    TRANSACTION_REVERSAL = "TransactionReversal"
    SALARY_PAYMENT = "SalaryPayment"
    BUSINESS_PAYMENT = "BusinessPayment"
    PROMOTION_PAYMENT = "PromotionPayment"
    ACCOUNT_BALANCE = "AccountBalance"
    CUSTOMER_PAY_BILL_ONLINE = "CustomerPayBillOnline"
    CUSTOMER_BUY_GOODS_ONLINE = "CustomerBuyGoodsOnline"
    TRANSACTION_STATUS_QUERY = "TransactionStatusQuery"
    CHECK_IDENTITY = "CheckIdentity"
    BUSINESS_PAY_BILL = "BusinessPayBill"
    BUSINESS_BUY_GOODS = "BusinessBuyGoods"
    DISBURSE_FUNDS_TO_BUSINESS = "DisburseFundsToBusiness"
    BUSINESS_TO_BUSINESS_TRANSFER = "BusinessToBusinessTransfer"
    BUSINESS_TRANSFER_FROM_MMF_TO_UTILITY = "BusinessTransferFromMMFToUtility"

    def __str__(self) -> str:
        return self.value


class IdentifierType(str, enum.Enum):
    MSISDN = "1"
    TILL_NUMBER = "2"
    SHORT_CODE = "4"
    REVERSAL = "11"

    def __str__(self) -> str:
        return self.value


class TransactionType(str, enum.Enum):
    """Transaction types accepted by M-Pesa Express (STK push)."""

    CUSTOMER_PAY_BILL_ONLINE = "CustomerPayBillOnline"
    CUSTOMER_BUY_GOODS_ONLINE = "CustomerBuyGoodsOnline"

    def __str__(self) -> str:
        return self.value


class QrTransactionCode(str, enum.Enum):
    """``TrxCode`` values for dynamic QR generation."""

    BUY_GOODS = "BG"
    WITHDRAW_AT_AGENT = "WA"
    PAY_BILL = "PB"
    SEND_MONEY = "SM"
    SEND_TO_BUSINESS = "SB"

    def __str__(self) -> str:
        return self.value


class ResponseType(str, enum.Enum):
    """What the gateway does when a C2B validation URL is unreachable."""

    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    def __str__(self) -> str:
        return self.value


class SendRemindersTypes(str, enum.Enum):
    """Whether the bill manager texts customers about upcoming invoices."""

    ENABLE = "1"
    DISABLE = "0"

    def __str__(self) -> str:
        return self.value
