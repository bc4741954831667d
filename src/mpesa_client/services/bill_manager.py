"""
Bill manager: invoice customers and reconcile the payments against them.

None of these calls carries a security credential. Onboarding returns an
``app_key`` for the short code; the invoicing calls then reference invoices
by the merchant's own ``external_reference``.

Amounts follow the same rules as the payment services. Dates may be given
as :class:`datetime.date`, :class:`datetime.datetime` or a preformatted
string.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import (
    Any,
    ClassVar,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    Union,
)

from ..core.constants import SendRemindersTypes
from ..core.payloads import wire_value
from .base import (
    ServiceBuilder,
    _is_blank,
    check_amount,
    check_enum,
    check_text,
    check_url,
)

__all__ = [
    "BillManagerResponse",
    "BulkInvoiceBuilder",
    "BulkInvoiceRequest",
    "CancelInvoiceBuilder",
    "CancelInvoiceRequest",
    "Invoice",
    "InvoiceItem",
    "OnboardBuilder",
    "OnboardModifyBuilder",
    "OnboardModifyRequest",
    "OnboardRequest",
    "OnboardResponse",
    "ReconciliationBuilder",
    "ReconciliationRequest",
    "SingleInvoiceBuilder",
    "SingleInvoiceRequest",
]

DateLike = Union[datetime.date, str]
Amount = Union[int, float]


def format_date(value: DateLike) -> str:
    """Datetimes keep their time of day, plain dates do not."""
    if isinstance(value, datetime.datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S.00")
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class BillManagerResponse:
    response_code: str
    response_message: str
    status_message: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "BillManagerResponse":
        status = payload.get("Status_Message")
        return cls(
            response_code=str(payload["rescode"]),
            response_message=str(payload["resmsg"]),
            status_message=None if status is None else str(status),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class OnboardResponse:
    app_key: str
    response_code: str
    response_message: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "OnboardResponse":
        return cls(
            app_key=str(payload["app_key"]),
            response_code=str(payload["rescode"]),
            response_message=str(payload["resmsg"]),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class InvoiceItem:
    item_name: str
    amount: Amount

    def to_wire(self) -> Dict[str, Any]:
        return {"itemName": self.item_name, "amount": self.amount}


@dataclass(frozen=True)
class Invoice:
    """One invoice as sent to a customer's phone."""

    amount: Amount
    account_reference: str
    billed_full_name: str
    billed_period: str
    billed_phone_number: str
    due_date: DateLike
    external_reference: str
    invoice_name: str
    invoice_items: Optional[Tuple[InvoiceItem, ...]] = None

    def to_wire(self) -> Dict[str, Any]:
        wire: Dict[str, Any] = {
            "amount": self.amount,
            "accountReference": self.account_reference,
            "billedFullName": self.billed_full_name,
            "billedPeriod": self.billed_period,
            "billedPhoneNumber": self.billed_phone_number,
            "dueDate": format_date(self.due_date),
            "externalReference": self.external_reference,
            "invoiceName": self.invoice_name,
        }
        if self.invoice_items is not None:
            wire["invoiceItems"] = [item.to_wire() for item in self.invoice_items]
        return wire


_INVOICE_FIELDS = (
    "amount",
    "account_reference",
    "billed_full_name",
    "billed_period",
    "billed_phone_number",
    "due_date",
    "external_reference",
    "invoice_name",
)


def _check_date(values: Dict[str, Any], name: str, invalid: Dict[str, str]) -> None:
    value = values.get(name)
    if _is_blank(value):
        return
    if not isinstance(value, (datetime.date, str)):
        invalid[name] = "must be a date, a datetime or a string"


def _check_invoice_items(
    values: Dict[str, Any], name: str, invalid: Dict[str, str]
) -> None:
    items = values.get(name)
    if items is None:
        return
    normalised: List[InvoiceItem] = []
    for index, item in enumerate(items):
        label = f"{name}[{index}]"
        if not isinstance(item, InvoiceItem):
            invalid[label] = "must be an InvoiceItem"
            continue
        if _is_blank(item.item_name):
            invalid[f"{label}.item_name"] = "must not be empty"
            continue
        amount = {"amount": item.amount}
        problems: Dict[str, str] = {}
        check_amount(amount, "amount", problems)
        if _is_blank(item.amount):
            problems["amount"] = "must not be empty"
        if problems:
            invalid[f"{label}.amount"] = problems["amount"]
            continue
        normalised.append(InvoiceItem(item.item_name, amount["amount"]))
    values[name] = tuple(normalised)


def _validate_invoice(values: Dict[str, Any], invalid: Dict[str, str]) -> None:
    for name in ("account_reference", "billed_phone_number", "external_reference"):
        check_text(values, name)
    check_amount(values, "amount", invalid)
    _check_date(values, "due_date", invalid)
    _check_invoice_items(values, "invoice_items", invalid)


def _invoice_fields(invoice: Invoice) -> Dict[str, Any]:
    values = {name: getattr(invoice, name) for name in _INVOICE_FIELDS}
    values["invoice_items"] = invoice.invoice_items
    return values


@dataclass(frozen=True)
class OnboardRequest:
    path: ClassVar[str] = "v1/billmanager-invoice/optin"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = OnboardResponse

    short_code: str
    email: str
    official_contact: str
    send_reminders: SendRemindersTypes
    callback_url: str
    logo: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        wire = {
            "shortcode": self.short_code,
            "email": self.email,
            "officialContact": self.official_contact,
            "sendReminders": wire_value(self.send_reminders),
            "callbackurl": self.callback_url,
        }
        if self.logo is not None:
            wire["logo"] = self.logo
        return wire


@dataclass(frozen=True)
class OnboardModifyRequest:
    path: ClassVar[str] = "v1/billmanager-invoice/change-optin-details"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = BillManagerResponse

    short_code: str
    email: Optional[str] = None
    official_contact: Optional[str] = None
    send_reminders: Optional[SendRemindersTypes] = None
    callback_url: Optional[str] = None
    logo: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        wire = {
            "shortcode": self.short_code,
            "email": self.email,
            "officialContact": self.official_contact,
            "sendReminders": wire_value(self.send_reminders),
            "callbackurl": self.callback_url,
            "logo": self.logo,
        }
        return {key: value for key, value in wire.items() if value is not None}


class _OptInBuilder(ServiceBuilder):
    def short_code(self, value: str):
        return self._set("short_code", value)

    def email(self, value: str):
        return self._set("email", value)

    def official_contact(self, value: str):
        """Phone number customers see as the merchant's contact."""
        return self._set("official_contact", value)

    def send_reminders(self, value: Union[SendRemindersTypes, bool, str]):
        if isinstance(value, bool):
            value = SendRemindersTypes.ENABLE if value else SendRemindersTypes.DISABLE
        return self._set("send_reminders", value)

    def callback_url(self, value: str):
        """Where the gateway posts payment notifications for invoices."""
        return self._set("callback_url", value)

    def logo(self, value: str):
        return self._set("logo", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        check_text(values, "short_code")
        check_text(values, "official_contact")
        check_url(values, "callback_url", invalid)
        check_enum(values, "send_reminders", SendRemindersTypes, invalid)
        email = values.get("email")
        if not _is_blank(email) and "@" not in str(email):
            invalid["email"] = f"'{email}' is not an email address"


class OnboardBuilder(_OptInBuilder):
    """Opt a short code in to the bill manager."""

    request_type = OnboardRequest
    required = (
        "short_code",
        "email",
        "official_contact",
        "send_reminders",
        "callback_url",
    )


class OnboardModifyBuilder(_OptInBuilder):
    """Change the opt-in details of a short code; unset fields are left alone."""

    request_type = OnboardModifyRequest
    required = ("short_code",)


@dataclass(frozen=True)
class SingleInvoiceRequest:
    path: ClassVar[str] = "v1/billmanager-invoice/single-invoicing"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = BillManagerResponse

    amount: Amount
    account_reference: str
    billed_full_name: str
    billed_period: str
    billed_phone_number: str
    due_date: DateLike
    external_reference: str
    invoice_name: str
    invoice_items: Optional[Tuple[InvoiceItem, ...]] = None

    @property
    def invoice(self) -> Invoice:
        return Invoice(
            amount=self.amount,
            account_reference=self.account_reference,
            billed_full_name=self.billed_full_name,
            billed_period=self.billed_period,
            billed_phone_number=self.billed_phone_number,
            due_date=self.due_date,
            external_reference=self.external_reference,
            invoice_name=self.invoice_name,
            invoice_items=self.invoice_items,
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.invoice.to_wire()


class SingleInvoiceBuilder(ServiceBuilder):
    request_type = SingleInvoiceRequest
    required = _INVOICE_FIELDS

    def invoice(self, invoice: Invoice) -> "SingleInvoiceBuilder":
        """Copy every field from an existing :class:`Invoice`."""
        self._values.update(_invoice_fields(invoice))
        return self

    def amount(self, value: Union[int, float, str]) -> "SingleInvoiceBuilder":
        return self._set("amount", value)

    def account_reference(self, value: str) -> "SingleInvoiceBuilder":
        return self._set("account_reference", value)

    def billed_full_name(self, value: str) -> "SingleInvoiceBuilder":
        return self._set("billed_full_name", value)

    def billed_period(self, value: str) -> "SingleInvoiceBuilder":
        """Free text, e.g. ``"August 2021"``."""
        return self._set("billed_period", value)

    def billed_phone_number(self, value: str) -> "SingleInvoiceBuilder":
        return self._set("billed_phone_number", value)

    def due_date(self, value: DateLike) -> "SingleInvoiceBuilder":
        return self._set("due_date", value)

    def external_reference(self, value: str) -> "SingleInvoiceBuilder":
        return self._set("external_reference", value)

    def invoice_name(self, value: str) -> "SingleInvoiceBuilder":
        return self._set("invoice_name", value)

    def invoice_items(self, value: Iterable[InvoiceItem]) -> "SingleInvoiceBuilder":
        return self._set("invoice_items", list(value))

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        _validate_invoice(values, invalid)


@dataclass(frozen=True)
class BulkInvoiceRequest:
    path: ClassVar[str] = "v1/billmanager-invoice/bulk-invoicing"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = BillManagerResponse

    invoices: Tuple[Invoice, ...]

    def to_wire(self) -> List[Dict[str, Any]]:
        return [invoice.to_wire() for invoice in self.invoices]


class BulkInvoiceBuilder(ServiceBuilder):
    request_type = BulkInvoiceRequest
    required = ("invoices",)

    def invoice(self, value: Invoice) -> "BulkInvoiceBuilder":
        self._values.setdefault("invoices", []).append(value)
        return self

    def invoices(self, value: Iterable[Invoice]) -> "BulkInvoiceBuilder":
        return self._set("invoices", list(value))

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        invoices = values.get("invoices")
        if invoices is None:
            return
        if not invoices:
            invalid["invoices"] = "must contain at least one invoice"
            return
        normalised: List[Invoice] = []
        for index, invoice in enumerate(invoices):
            label = f"invoices[{index}]"
            if not isinstance(invoice, Invoice):
                invalid[label] = "must be an Invoice"
                continue
            fields = _invoice_fields(invoice)
            problems: Dict[str, str] = {
                name: "must not be empty"
                for name in _INVOICE_FIELDS
                if _is_blank(fields[name])
            }
            _validate_invoice(fields, problems)
            for name, reason in problems.items():
                invalid[f"{label}.{name}"] = reason
            if not problems:
                normalised.append(Invoice(**fields))
        values["invoices"] = tuple(normalised)


@dataclass(frozen=True)
class CancelInvoiceRequest:
    path: ClassVar[str] = "v1/billmanager-invoice/cancel-bulk-invoice"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = BillManagerResponse

    external_references: Tuple[str, ...]

    def to_wire(self) -> List[Dict[str, str]]:
        return [
            {"externalReference": reference} for reference in self.external_references
        ]


class CancelInvoiceBuilder(ServiceBuilder):
    """Withdraw unpaid invoices by their external references."""

    request_type = CancelInvoiceRequest
    required = ("external_references",)

    def external_reference(self, value: str) -> "CancelInvoiceBuilder":
        self._values.setdefault("external_references", []).append(value)
        return self

    def external_references(self, value: Iterable[str]) -> "CancelInvoiceBuilder":
        return self._set("external_references", list(value))

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        references = values.get("external_references")
        if references is None:
            return
        if not references:
            invalid["external_references"] = "must contain at least one reference"
            return
        for index, reference in enumerate(references):
            if _is_blank(reference):
                invalid[f"external_references[{index}]"] = "must not be empty"
        values["external_references"] = tuple(str(ref) for ref in references)


@dataclass(frozen=True)
class ReconciliationRequest:
    path: ClassVar[str] = "v1/billmanager-invoice/reconciliation"
    requires_credential: ClassVar[bool] = False
    response_type: ClassVar[Type[Any]] = BillManagerResponse

    account_reference: str
    external_reference: str
    full_name: str
    invoice_name: str
    paid_amount: Amount
    payment_date: DateLike
    phone_number: str
    transaction_id: str

    def to_wire(self) -> Dict[str, Any]:
        return {
            "accountReference": self.account_reference,
            "externalReference": self.external_reference,
            "fullName": self.full_name,
            "invoiceName": self.invoice_name,
            "paidAmount": self.paid_amount,
            "paymentDate": format_date(self.payment_date),
            "phoneNumber": self.phone_number,
            "transactionId": self.transaction_id,
        }


class ReconciliationBuilder(ServiceBuilder):
    """Acknowledge a payment received against an invoice."""

    request_type = ReconciliationRequest
    required = (
        "account_reference",
        "external_reference",
        "full_name",
        "invoice_name",
        "paid_amount",
        "payment_date",
        "phone_number",
        "transaction_id",
    )

    def account_reference(self, value: str) -> "ReconciliationBuilder":
        return self._set("account_reference", value)

    def external_reference(self, value: str) -> "ReconciliationBuilder":
        return self._set("external_reference", value)

    def full_name(self, value: str) -> "ReconciliationBuilder":
        return self._set("full_name", value)

    def invoice_name(self, value: str) -> "ReconciliationBuilder":
        return self._set("invoice_name", value)

    def paid_amount(self, value: Union[int, float, str]) -> "ReconciliationBuilder":
        return self._set("paid_amount", value)

    def payment_date(self, value: DateLike) -> "ReconciliationBuilder":
        return self._set("payment_date", value)

    def phone_number(self, value: str) -> "ReconciliationBuilder":
        return self._set("phone_number", value)

    def transaction_id(self, value: str) -> "ReconciliationBuilder":
        """The M-Pesa receipt number of the payment."""
        return self._set("transaction_id", value)

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        for name in ("account_reference", "external_reference", "phone_number"):
            check_text(values, name)
        check_amount(values, "paid_amount", invalid)
        _check_date(values, "payment_date", invalid)
