import uuid
from datetime import date
from decimal import Decimal

import pytest

from core import pdf
from customers.models import Customer
from sales.invoice import render_invoice
from sales.models import Order, PaymentType


@pytest.fixture
def document():
    customer = Customer(name="Kavita Rao", shop_name="Rao Provisions", phone="+91-9810000007")
    order = Order(
        id=uuid.UUID("a1b2c3d4-0000-4000-8000-000000000000"),
        customer_id=customer.pk,
        total_amount=Decimal("3200.00"),
        payment_type=PaymentType.CREDIT,
        is_paid=False,
        order_date=date(2024, 2, 1),
    )
    return render_invoice(order, customer, [])


def test_invoice_html_contains_every_block(document):
    html = pdf.render_invoice_html(document)
    assert "INVOICE" in html
    assert "Invoice #: A1B2C3D4" in html
    assert "Kavita Rao" in html
    assert "UNPAID" in html
    assert "8/2/2024" in html
    assert "Generated by M7 Distribution Platform" in html


def test_download_invoice_is_attachment(document, monkeypatch):
    monkeypatch.setattr(pdf, "html_to_pdf", lambda html: b"%PDF-1.7")
    response = pdf.download_invoice(document)
    assert response["Content-Type"] == "application/pdf"
    assert response["Content-Disposition"] == 'attachment; filename="M7_Invoice_A1B2C3D4_Kavita_Rao.pdf"'
    assert response.content == b"%PDF-1.7"


def test_preview_invoice_is_inline(document, monkeypatch):
    monkeypatch.setattr(pdf, "html_to_pdf", lambda html: b"%PDF-1.7")
    response = pdf.preview_invoice(document)
    assert response["Content-Disposition"].startswith("inline;")


def test_unsafe_characters_are_replaced():
    assert pdf._safe_pdf_filename('M7_Invoice_X_A/B:"C"') == "M7_Invoice_X_A-B-C-.pdf"
