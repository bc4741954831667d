"""
One builder per gateway operation.

Builders are normally obtained from the client (``client.b2c("initiator")``)
rather than instantiated directly.
"""

from .account_balance import (
    AccountBalanceBuilder,
    AccountBalanceRequest,
    AccountBalanceResponse,
)
from .b2b import B2bBuilder, B2bRequest, B2bResponse
from .b2c import B2cBuilder, B2cRequest, B2cResponse
from .base import ServiceBuilder
from .bill_manager import (
    BillManagerResponse,
    BulkInvoiceBuilder,
    BulkInvoiceRequest,
    CancelInvoiceBuilder,
    CancelInvoiceRequest,
    Invoice,
    InvoiceItem,
    OnboardBuilder,
    OnboardModifyBuilder,
    OnboardModifyRequest,
    OnboardRequest,
    OnboardResponse,
    ReconciliationBuilder,
    ReconciliationRequest,
    SingleInvoiceBuilder,
    SingleInvoiceRequest,
)
from .c2b_register import C2bRegisterBuilder, C2bRegisterRequest, C2bRegisterResponse
from .c2b_simulate import C2bSimulateBuilder, C2bSimulateRequest, C2bSimulateResponse
from .dynamic_qr import DynamicQrBuilder, DynamicQrRequest, DynamicQrResponse
from .express import (
    MpesaExpressBuilder,
    MpesaExpressQueryBuilder,
    MpesaExpressQueryRequest,
    MpesaExpressQueryResponse,
    MpesaExpressRequest,
    MpesaExpressResponse,
)
from .transaction_reversal import (
    TransactionReversalBuilder,
    TransactionReversalRequest,
    TransactionReversalResponse,
)
from .transaction_status import (
    TransactionStatusBuilder,
    TransactionStatusRequest,
    TransactionStatusResponse,
)

__all__ = [
    "AccountBalanceBuilder",
    "AccountBalanceRequest",
    "AccountBalanceResponse",
    "B2bBuilder",
    "B2bRequest",
    "B2bResponse",
    "B2cBuilder",
    "B2cRequest",
    "B2cResponse",
    "BillManagerResponse",
    "BulkInvoiceBuilder",
    "BulkInvoiceRequest",
    "C2bRegisterBuilder",
    "C2bRegisterRequest",
    "C2bRegisterResponse",
    "C2bSimulateBuilder",
    "C2bSimulateRequest",
    "C2bSimulateResponse",
    "CancelInvoiceBuilder",
    "CancelInvoiceRequest",
    "DynamicQrBuilder",
    "DynamicQrRequest",
    "DynamicQrResponse",
    "Invoice",
    "InvoiceItem",
    "MpesaExpressBuilder",
    "MpesaExpressQueryBuilder",
    "MpesaExpressQueryRequest",
    "MpesaExpressQueryResponse",
    "MpesaExpressRequest",
    "MpesaExpressResponse",
    "OnboardBuilder",
    "OnboardModifyBuilder",
    "OnboardModifyRequest",
    "OnboardRequest",
    "OnboardResponse",
    "ReconciliationBuilder",
    "ReconciliationRequest",
    "ServiceBuilder",
    "SingleInvoiceBuilder",
    "SingleInvoiceRequest",
    "TransactionReversalBuilder",
    "TransactionReversalRequest",
    "TransactionReversalResponse",
    "TransactionStatusBuilder",
    "TransactionStatusRequest",
    "TransactionStatusResponse",
]
