"""Tests for the bill manager builders: onboarding, invoicing and reconciliation."""

from datetime import date, datetime

import pytest

from conftest import make_response
from mpesa_client import Invoice, InvoiceItem, SendRemindersTypes, ValidationFailed
from mpesa_client.services import BillManagerResponse, OnboardResponse

CALLBACK_URL = "https://example.com/bill-manager"

SUCCESS_BODY = {
    "Status_Message": "Invoice sent successfully",
    "resmsg": "Success",
    "rescode": "200",
}


def _invoice(reference: str = "#9932340", **changes) -> Invoice:
    fields = dict(
        amount=800,
        account_reference="1ASD678H",
        billed_full_name="John Doe",
        billed_period="August 2021",
        billed_phone_number="0722000000",
        due_date=date(2021, 10, 12),
        external_reference=reference,
        invoice_name="Jentrys",
    )
    fields.update(changes)
    return Invoice(**fields)


@pytest.fixture
def bill_session(session):
    session.post.return_value = make_response(200, SUCCESS_BODY)
    return session


def _posted_body(session):
    return session.post.call_args.kwargs["json"]


@pytest.mark.parametrize(
    ("factory", "missing"),
    [
        (
            lambda c: c.onboard(),
            ["short_code", "email", "official_contact", "send_reminders", "callback_url"],
        ),
        (lambda c: c.onboard_modify(), ["short_code"]),
        (lambda c: c.bulk_invoice(), ["invoices"]),
        (
            lambda c: c.single_invoice(),
            [
                "amount",
                "account_reference",
                "billed_full_name",
                "billed_period",
                "billed_phone_number",
                "due_date",
                "external_reference",
                "invoice_name",
            ],
        ),
        (lambda c: c.cancel_invoice(), ["external_references"]),
        (
            lambda c: c.reconciliation(),
            [
                "account_reference",
                "external_reference",
                "full_name",
                "invoice_name",
                "paid_amount",
                "payment_date",
                "phone_number",
                "transaction_id",
            ],
        ),
    ],
)
def test_missing_fields_fail_before_network(client, session, factory, missing) -> None:
    with pytest.raises(ValidationFailed) as excinfo:
        factory(client).send()

    assert excinfo.value.missing_fields == tuple(missing)
    assert session.method_calls == []


class TestOnboard:
    def test_wire_and_response(self, client, session) -> None:
        session.post.return_value = make_response(
            200,
            {"app_key": "AG_2376487236_126732989KJ", "resmsg": "Success", "rescode": "200"},
        )

        response = (
            client.onboard()
            .short_code(718003)
            .email("billing@example.com")
            .official_contact("0710000000")
            .send_reminders(SendRemindersTypes.ENABLE)
            .logo("https://example.com/logo.png")
            .callback_url(CALLBACK_URL)
            .send()
        )

        url = session.post.call_args.args[0]
        assert url.endswith("/v1/billmanager-invoice/optin")
        assert _posted_body(session) == {
            "shortcode": "718003",
            "email": "billing@example.com",
            "officialContact": "0710000000",
            "sendReminders": "1",
            "callbackurl": CALLBACK_URL,
            "logo": "https://example.com/logo.png",
        }
        assert isinstance(response, OnboardResponse)
        assert response.app_key == "AG_2376487236_126732989KJ"
        assert response.response_code == "200"

    def test_no_security_credential_needed(self, client, session, monkeypatch) -> None:
        session.post.return_value = make_response(
            200, {"app_key": "key", "resmsg": "Success", "rescode": "200"}
        )
        monkeypatch.setattr(
            type(client),
            "security_credential",
            lambda self: pytest.fail("bill manager calls must not encrypt"),
        )

        (
            client.onboard()
            .short_code("718003")
            .email("a@b.co")
            .official_contact("0710000000")
            .send_reminders(False)
            .callback_url(CALLBACK_URL)
            .send()
        )

        assert _posted_body(session)["sendReminders"] == "0"
        assert "logo" not in _posted_body(session)

    def test_rejects_bad_fields(self, client) -> None:
        builder = (
            client.onboard()
            .short_code("718003")
            .email("not-an-email")
            .official_contact("0710000000")
            .send_reminders("2")
            .callback_url("callback")
        )

        with pytest.raises(ValidationFailed) as excinfo:
            builder.build()

        assert set(excinfo.value.invalid_fields) == {
            "email",
            "send_reminders",
            "callback_url",
        }

    def test_modify_sends_only_changed_fields(self, client, bill_session) -> None:
        response = (
            client.onboard_modify()
            .short_code("718003")
            .send_reminders(SendRemindersTypes.DISABLE)
            .send()
        )

        url = bill_session.post.call_args.args[0]
        assert url.endswith("/v1/billmanager-invoice/change-optin-details")
        assert _posted_body(bill_session) == {"shortcode": "718003", "sendReminders": "0"}
        assert isinstance(response, BillManagerResponse)
        assert response.response_message == "Success"


class TestSingleInvoice:
    def test_wire_format(self, client, bill_session) -> None:
        response = (
            client.single_invoice()
            .amount("800")
            .account_reference("1ASD678H")
            .billed_full_name("John Doe")
            .billed_period("August 2021")
            .billed_phone_number("0722000000")
            .due_date(datetime(2021, 10, 12, 9, 30))
            .external_reference("#9932340")
            .invoice_name("Jentrys")
            .invoice_items(
                [InvoiceItem("food", "700"), InvoiceItem("water", 100)]
            )
            .send()
        )

        url = bill_session.post.call_args.args[0]
        assert url.endswith("/v1/billmanager-invoice/single-invoicing")
        assert _posted_body(bill_session) == {
            "amount": 800,
            "accountReference": "1ASD678H",
            "billedFullName": "John Doe",
            "billedPeriod": "August 2021",
            "billedPhoneNumber": "0722000000",
            "dueDate": "2021-10-12 09:30:00.00",
            "externalReference": "#9932340",
            "invoiceName": "Jentrys",
            "invoiceItems": [
                {"itemName": "food", "amount": 700},
                {"itemName": "water", "amount": 100},
            ],
        }
        assert response.status_message == "Invoice sent successfully"

    def test_from_invoice_omits_absent_items(self, client) -> None:
        request = client.single_invoice().invoice(_invoice()).build()

        wire = request.to_wire()
        assert "invoiceItems" not in wire
        assert wire["dueDate"] == "2021-10-12"
        assert request.invoice == _invoice()

    def test_rejects_bad_items(self, client) -> None:
        builder = (
            client.single_invoice()
            .invoice(_invoice(amount=0))
            .invoice_items([InvoiceItem("food", -1), InvoiceItem(" ", 5), "water"])
        )

        with pytest.raises(ValidationFailed) as excinfo:
            builder.build()

        assert excinfo.value.invalid_fields == {
            "amount": "must be greater than zero",
            "invoice_items[0].amount": "must be greater than zero",
            "invoice_items[1].item_name": "must not be empty",
            "invoice_items[2]": "must be an InvoiceItem",
        }


class TestBulkInvoice:
    def test_posts_a_list(self, client, bill_session) -> None:
        client.bulk_invoice().invoice(_invoice("A1")).invoice(
            _invoice("A2", invoice_items=(InvoiceItem("rent", 800.0),))
        ).send()

        url = bill_session.post.call_args.args[0]
        assert url.endswith("/v1/billmanager-invoice/bulk-invoicing")
        body = _posted_body(bill_session)
        assert [entry["externalReference"] for entry in body] == ["A1", "A2"]
        assert body[1]["invoiceItems"] == [{"itemName": "rent", "amount": 800}]

    def test_reports_problems_per_invoice(self, client, session) -> None:
        builder = client.bulk_invoice().invoices(
            [_invoice("A1"), _invoice("", amount="lots"), "not an invoice"]
        )

        with pytest.raises(ValidationFailed) as excinfo:
            builder.send()

        assert set(excinfo.value.invalid_fields) == {
            "invoices[1].external_reference",
            "invoices[1].amount",
            "invoices[2]",
        }
        assert session.method_calls == []

    def test_empty_list_is_invalid(self, client) -> None:
        with pytest.raises(ValidationFailed) as excinfo:
            client.bulk_invoice().invoices([]).build()

        assert excinfo.value.fields == ("invoices",)


class TestCancelInvoice:
    def test_posts_references(self, client, session) -> None:
        session.post.return_value = make_response(
            200,
            {
                "Status_Message": "Invoice cancelled successfully.",
                "resmsg": "Success",
                "rescode": "200",
                "errors": [],
            },
        )

        response = (
            client.cancel_invoice()
            .external_reference("113")
            .external_reference(114)
            .send()
        )

        url = session.post.call_args.args[0]
        assert url.endswith("/v1/billmanager-invoice/cancel-bulk-invoice")
        assert _posted_body(session) == [
            {"externalReference": "113"},
            {"externalReference": "114"},
        ]
        assert response.status_message == "Invoice cancelled successfully."
        assert response.raw["errors"] == []

    def test_blank_reference_is_invalid(self, client) -> None:
        with pytest.raises(ValidationFailed) as excinfo:
            client.cancel_invoice().external_references(["113", " "]).build()

        assert excinfo.value.fields == ("external_references[1]",)


class TestReconciliation:
    def test_wire_format(self, client, session) -> None:
        session.post.return_value = make_response(
            200, {"resmsg": "Success", "rescode": "200"}
        )

        response = (
            client.reconciliation()
            .account_reference("Balboa95")
            .external_reference(955)
            .full_name("John Doe")
            .invoice_name("School Fees")
            .paid_amount(800)
            .payment_date(date(2021, 10, 1))
            .phone_number("0722000000")
            .transaction_id("PJB53MYR1N")
            .send()
        )

        url = session.post.call_args.args[0]
        assert url.endswith("/v1/billmanager-invoice/reconciliation")
        assert _posted_body(session) == {
            "accountReference": "Balboa95",
            "externalReference": "955",
            "fullName": "John Doe",
            "invoiceName": "School Fees",
            "paidAmount": 800,
            "paymentDate": "2021-10-01",
            "phoneNumber": "0722000000",
            "transactionId": "PJB53MYR1N",
        }
        assert response.response_code == "200"
        assert response.status_message is None

    def test_rejects_unusable_date(self, client) -> None:
        builder = (
            client.reconciliation()
            .account_reference("Balboa95")
            .external_reference("955")
            .full_name("John Doe")
            .invoice_name("School Fees")
            .paid_amount(800)
            .payment_date(20211001)
            .phone_number("0722000000")
            .transaction_id("PJB53MYR1N")
        )

        with pytest.raises(ValidationFailed) as excinfo:
            builder.build()

        assert excinfo.value.fields == ("payment_date",)
