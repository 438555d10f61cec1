"""PDF generation utilities using WeasyPrint."""
import logging
import re
from io import BytesIO

from django.conf import settings
from django.http import HttpResponse
from django.template.loader import render_to_string

logger = logging.getLogger("m7")

INVOICE_TEMPLATE = "pdf/invoice_a4.html"


def _safe_pdf_filename(stem: str, fallback: str = "document") -> str:
    """Build a safe PDF filename from a human-readable stem."""
    safe = re.sub(r'[\\/:*?"<>|]+', "-", (stem or "").strip())
    safe = safe.strip(" .")
    if not safe:
        safe = fallback
    return f"{safe}.pdf"


def html_to_pdf(html_string) -> bytes:
    """Convert rendered HTML to PDF bytes."""
    try:
        from weasyprint import HTML
    except Exception as exc:
        logger.exception("WeasyPrint is unavailable for PDF rendering.")
        raise RuntimeError("PDF rendering backend unavailable") from exc

    pdf_file = BytesIO()
    HTML(string=html_string, base_url=str(settings.BASE_DIR)).write_pdf(pdf_file)
    return pdf_file.getvalue()


def render_pdf(template_name, context, filename="document.pdf", disposition="inline"):
    """Render a Django template to PDF and return an HttpResponse."""
    html_string = render_to_string(template_name, context)
    response = HttpResponse(html_to_pdf(html_string), content_type="application/pdf")
    response["Content-Disposition"] = f'{disposition}; filename="{filename}"'
    return response


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------

def invoice_context(document):
    """Template context for an ``sales.invoice.InvoiceDocument``."""
    return {
        "document": document,
        "blocks": document.blocks,
        "primary_color": getattr(settings, "INVOICE_PRIMARY_COLOR", "#A855F7"),
    }


def render_invoice_html(document) -> str:
    return render_to_string(INVOICE_TEMPLATE, invoice_context(document))


def _invoice_response(document, disposition):
    stem = document.filename[:-4] if document.filename.endswith(".pdf") else document.filename
    filename = _safe_pdf_filename(stem, fallback=f"M7_Invoice_{document.number}")
    logger.info("Rendering invoice %s (%s)", document.number, disposition)
    return render_pdf(INVOICE_TEMPLATE, invoice_context(document), filename, disposition)


def download_invoice(document):
    """PDF response the browser saves under the invoice file name."""
    return _invoice_response(document, "attachment")


def preview_invoice(document):
    """PDF response displayed inline by the browser's viewer."""
    return _invoice_response(document, "inline")
