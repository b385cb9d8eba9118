"""ReportLab PDF Generation Service Implementation

Implements invoice rendering using ReportLab platypus.
"""

from io import BytesIO
from datetime import datetime
from decimal import Decimal
from typing import List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.invoice import Invoice
from src.domain.invoice_item import InvoiceItem

ITEM_COL_WIDTHS = [52 * mm, 32 * mm, 14 * mm, 24 * mm, 22 * mm, 26 * mm]


def _value(enum_or_str) -> str:
    if enum_or_str is None:
        return ""
    return enum_or_str.value if hasattr(enum_or_str, "value") else str(enum_or_str)


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Layout: company header with invoice number and dates, bill-to block
    next to payment method and status, item table, totals with paid and
    balance lines, notes and footer.
    """

    def generate_invoice(
        self,
        invoice: Invoice,
        items: List[InvoiceItem],
        company_name: str = "MEDICAL INVENTORY SYSTEM",
        company_address: str = "",
        currency_symbol: str = "Rs.",
    ) -> bytes:
        """
        Generate an invoice PDF

        Args:
            invoice: Invoice header with customer snapshot and totals
            items: Invoice items in line order
            company_name: Company name printed in the header
            company_address: Company address printed under the name
            currency_symbol: Prefix for money amounts

        Returns:
            PDF document as bytes
        """

        def money(amount) -> str:
            return f"{currency_symbol} {Decimal(amount or 0):,.2f}"

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=18 * mm,
            leftMargin=18 * mm,
            topMargin=18 * mm,
            bottomMargin=18 * mm,
            title=f"Invoice {invoice.invoice_number}",
        )

        styles = getSampleStyleSheet()
        elements = []

        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=20,
            spaceAfter=4,
            textColor=colors.HexColor("#2C3E50"),
        )
        header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.HexColor("#7F8C8D"),
        )
        normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=10,
        )
        bold_style = ParagraphStyle(
            "BoldStyle",
            parent=styles["Normal"],
            fontSize=11,
            fontName="Helvetica-Bold",
        )
        cell_style = ParagraphStyle(
            "CellStyle",
            parent=styles["Normal"],
            fontSize=9,
            leading=11,
        )

        # Header - company on the left, invoice number and dates on the right
        company_block = [Paragraph(company_name, title_style)]
        if company_address:
            company_block.append(Paragraph(company_address, header_style))
        company_block.append(Paragraph("Invoice", header_style))

        dates = [
            Paragraph(f"<b>Invoice #: {invoice.invoice_number}</b>", normal_style),
            Paragraph(f"Date: {invoice.invoice_date.strftime('%d/%m/%Y')}", normal_style),
        ]
        if invoice.due_date:
            dates.append(Paragraph(f"Due Date: {invoice.due_date.strftime('%d/%m/%Y')}", normal_style))

        header_table = Table([[company_block, dates]], colWidths=[110 * mm, 64 * mm])
        header_table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        elements.append(header_table)
        elements.append(Spacer(1, 8 * mm))

        # Bill to / payment
        bill_to = [Paragraph("Bill To:", bold_style), Paragraph(invoice.customer_name, normal_style)]
        if invoice.customer_phone:
            bill_to.append(Paragraph(f"Phone: {invoice.customer_phone}", normal_style))
        if invoice.customer_email:
            bill_to.append(Paragraph(f"Email: {invoice.customer_email}", normal_style))
        if invoice.customer_address:
            bill_to.append(Paragraph(f"Address: {invoice.customer_address}", normal_style))

        payment = [
            Paragraph(
                f"Payment Method: {_value(invoice.payment_method) or 'Not specified'}",
                normal_style,
            ),
            Paragraph(f"Status: {_value(invoice.payment_status)}", normal_style),
        ]

        party_table = Table([[bill_to, payment]], colWidths=[110 * mm, 64 * mm])
        party_table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        elements.append(party_table)
        elements.append(Spacer(1, 8 * mm))

        # Items
        item_data = [["Item", "Barcode", "Qty", "Unit Price", "Discount", "Total"]]
        for item in items:
            name = item.product_name or "Unknown Product"
            if item.batch_number:
                name = f"{name}<br/><font size=7>Batch: {item.batch_number}</font>"
            item_data.append(
                [
                    Paragraph(name, cell_style),
                    item.product_barcode or "N/A",
                    str(item.quantity),
                    money(item.unit_price),
                    money(item.discount_amount),
                    money(item.total_amount),
                ]
            )
        if not items:
            item_data.append(["No items found", "", "", "", "", ""])

        item_table = Table(item_data, colWidths=ITEM_COL_WIDTHS, repeatRows=1)
        item_table.setStyle(
            TableStyle(
                [
                    # Header row
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    # Data rows
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
                    ("VALIGN", (0, 1), (-1, -1), "TOP"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
                    ("TOPPADDING", (0, 0), (-1, -1), 5),
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#F8F9F9")],
                    ),
                ]
            )
        )
        elements.append(item_table)
        elements.append(Spacer(1, 5 * mm))

        # Totals
        totals = [["Subtotal:", money(invoice.subtotal)]]
        if Decimal(invoice.discount_amount or 0) > 0:
            totals.append(["Discount:", f"-{money(invoice.discount_amount)}"])
        if Decimal(invoice.tax_amount or 0) > 0:
            totals.append(["Tax:", money(invoice.tax_amount)])
        total_row = len(totals)
        totals.append(["Total:", money(invoice.total_amount)])
        if Decimal(invoice.paid_amount or 0) > 0:
            totals.append(["Paid:", money(invoice.paid_amount)])
            if invoice.balance_due > 0:
                totals.append(["Balance:", money(invoice.balance_due)])

        totals_table = Table(totals, colWidths=[30 * mm, 36 * mm], hAlign="RIGHT")
        totals_table.setStyle(
            TableStyle(
                [
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
                    ("FONTNAME", (0, total_row), (-1, total_row), "Helvetica-Bold"),
                    ("FONTSIZE", (0, total_row), (-1, total_row), 12),
                    ("LINEABOVE", (0, total_row), (-1, total_row), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(totals_table)
        elements.append(Spacer(1, 10 * mm))

        if invoice.notes:
            elements.append(Paragraph("Notes:", bold_style))
            elements.append(Paragraph(invoice.notes, normal_style))
            elements.append(Spacer(1, 8 * mm))

        footer_style = ParagraphStyle(
            "FooterNote",
            parent=styles["Normal"],
            fontSize=8,
            textColor=colors.HexColor("#95A5A6"),
        )
        elements.append(Paragraph("Thank you for your business!", footer_style))
        elements.append(
            Paragraph(
                f"Generated on: {datetime.utcnow().strftime('%d/%m/%Y %H:%M:%S')} UTC",
                footer_style,
            )
        )

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes
