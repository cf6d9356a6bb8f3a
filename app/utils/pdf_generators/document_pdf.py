# app/utils/pdf_generators/document_pdf.py
import os
import tempfile
from decimal import Decimal

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from app.core.config import PDF_OUTPUT_DIR
from app.models.billing.document_models import Document


def _money(value) -> str:
    return f"{float(value or Decimal('0.00')):.2f}"


def document_pdf_filename(document: Document) -> str:
    kind = document.document_type.value.capitalize()
    return f"{kind}_{document.number or document.id}.pdf"


def generate_document_pdf(document: Document, contact=None) -> str:
    """
    Render a quote or invoice to PDF and return the file path.

    When a contact is given the PDF is addressed to that contact,
    otherwise to the client itself. Every call writes its own file; callers
    own it afterwards and present it under `document_pdf_filename`.
    """
    os.makedirs(PDF_OUTPUT_DIR, exist_ok=True)
    stem = document_pdf_filename(document)[:-len(".pdf")]
    with tempfile.NamedTemporaryFile(delete=False, dir=PDF_OUTPUT_DIR, prefix=f"{stem}_", suffix=".pdf") as fh:
        file_path = fh.name

    doc = SimpleDocTemplate(
        file_path,
        pagesize=A4,
        rightMargin=30,
        leftMargin=30,
        topMargin=30,
        bottomMargin=30,
    )
    styles = getSampleStyleSheet()
    elements = []

    # -------------------------------
    # Header
    # -------------------------------
    title = document.document_type.value.upper()
    elements.append(Paragraph(f"<b>{title} #{document.number}</b>", styles["Title"]))
    elements.append(Paragraph(f"Status: {document.status.value.upper()}", styles["Normal"]))
    if document.created_at:
        elements.append(Paragraph(f"Date: {document.created_at.strftime('%d-%m-%Y')}", styles["Normal"]))
    if document.valid_until:
        elements.append(Paragraph(f"Valid until: {document.valid_until.strftime('%d-%m-%Y')}", styles["Normal"]))
    if document.po_number:
        elements.append(Paragraph(f"PO Number: {document.po_number}", styles["Normal"]))
    elements.append(Spacer(1, 12))

    # -------------------------------
    # Recipient
    # -------------------------------
    client = document.client
    if client is not None:
        elements.append(Paragraph("<b>Bill To</b>", styles["Heading3"]))
        elements.append(Paragraph(f"Name: {client.name}", styles["Normal"]))
        if contact is not None:
            elements.append(Paragraph(f"Attention: {contact.full_name}", styles["Normal"]))
            elements.append(Paragraph(f"Email: {contact.email}", styles["Normal"]))
        elif client.email:
            elements.append(Paragraph(f"Email: {client.email}", styles["Normal"]))
        elements.append(Paragraph(f"Address: {client.address or '-'}", styles["Normal"]))
        elements.append(Spacer(1, 12))

    # -------------------------------
    # Line items
    # -------------------------------
    data = [["#", "Item", "Qty", "Cost", "Tax %", "Total"]]
    for i, item in enumerate(document.items, start=1):
        data.append([
            i,
            item.product_key,
            str(item.quantity),
            _money(item.cost),
            str(item.tax_rate),
            _money(item.line_total),
        ])

    data.append(["", "", "", "", "Subtotal", _money(document.subtotal_amount)])
    data.append(["", "", "", "", "Tax", _money(document.tax_amount)])
    data.append(["", "", "", "", "Total", _money(document.total_amount)])
    data.append(["", "", "", "", "Balance", _money(document.balance)])

    table = Table(data, colWidths=[25, 190, 50, 80, 60, 80])
    table.setStyle(
        TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ])
    )
    elements.append(table)
    elements.append(Spacer(1, 20))

    # -------------------------------
    # Notes
    # -------------------------------
    if document.public_notes:
        elements.append(Paragraph("<b>Notes:</b>", styles["Heading3"]))
        elements.append(Paragraph(document.public_notes, styles["Normal"]))
        elements.append(Spacer(1, 12))

    elements.append(Paragraph("Thank you for your business!", styles["Italic"]))

    doc.build(elements)
    return file_path
