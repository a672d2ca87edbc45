import io
import logging
import os
from typing import Any, List

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Image, Table, TableStyle
from xml.sax.saxutils import escape

from quotebuilder.pdf.config import PDFSettings
from quotebuilder.pdf.exceptions import PDFGenerationException
from quotebuilder.pdf.generator import AbstractPDFGenerator
from quotebuilder.rendering.price_table import NO_DATA_TEXT, build_price_table, currency_symbol_for

logger = logging.getLogger(__name__)

# Above this many columns the table no longer fits a portrait page
PORTRAIT_MAX_COLUMNS = 6


class ReportLabPDFGenerator(AbstractPDFGenerator):
    """PDF generator backed by ReportLab."""

    def __init__(self, settings: PDFSettings):
        self.settings = settings
        self.primary_color = colors.HexColor(settings.PRIMARY_COLOR_HEX)
        logger.info("[ReportLabPDFGenerator] Initialised.")

    def _price_table_flowable(self, quotation: Any, normal_style, header_style):
        currency = getattr(quotation.currency, "value", quotation.currency)
        table = build_price_table(quotation.parts, currency_symbol_for(currency))
        if table.is_empty:
            return Paragraph(NO_DATA_TEXT, normal_style), table.column_count

        table_data: List[list] = [[Paragraph(escape(label), header_style) for label in table.header]]
        for row in table.rows:
            part_name, moq, *prices = row
            table_data.append([Paragraph(escape(part_name), normal_style), moq, *prices])

        flowable = Table(table_data, repeatRows=1)
        flowable.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), self.primary_color),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.darkgrey),
            ('FONTSIZE', (0, 1), (-1, -1), 9),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor("#f2f2f2")]),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('TOPPADDING', (0, 0), (-1, 0), 8),
        ]))
        return flowable, table.column_count

    async def generate_quotation_pdf(self, quotation: Any) -> bytes:
        """Builds the quotation PDF in memory.

        Layout: logo or company name, company block, title with reference and
        quote number, client details, the price-by-quantity table and a footer
        on every page.
        """
        reference = quotation.reference
        logger.info(f"[PDFGen] Generating PDF for quotation {reference}")

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(name="QuoteTitle", parent=styles["Heading1"], textColor=self.primary_color)
        normal_style = styles["Normal"]
        header_style = ParagraphStyle(
            name="TableHeader", parent=normal_style, fontName="Helvetica-Bold", textColor=colors.whitesmoke
        )
        company_info_style = ParagraphStyle(name="CompanyInfo", parent=normal_style, alignment=2)
        footer_style = ParagraphStyle(name="Footer", fontSize=9, textColor=colors.gray, alignment=1)

        elements = []

        # 1. Logo, or the company name when there is none
        if os.path.exists(self.settings.LOGO_PATH):
            logo = Image(self.settings.LOGO_PATH, width=1.5 * inch, height=0.75 * inch)
            logo.hAlign = 'LEFT'
            elements.append(logo)
        else:
            logger.debug(f"[PDFGen] Logo not found: {self.settings.LOGO_PATH}")
            elements.append(Paragraph(escape(self.settings.COMPANY_NAME), title_style))
        elements.append(Spacer(1, 0.1 * inch))

        # 2. Company block
        elements.append(Paragraph(self.settings.COMPANY_INFO_HTML, company_info_style))
        elements.append(Spacer(1, 0.2 * inch))

        # 3. Title and client details
        elements.append(Paragraph(f"Quotation {escape(reference)}", styles["h2"]))
        status = getattr(quotation.status, "value", quotation.status)
        currency = getattr(quotation.currency, "value", quotation.currency)
        details = [
            f"<b>Quote number:</b> {escape(quotation.quote_number)}",
            f"<b>Client:</b> {escape(quotation.client_name)}",
            f"<b>Currency:</b> {escape(currency)}",
            f"<b>Valid until:</b> {escape(quotation.valid_until)}",
            f"<b>Status:</b> {escape(status)}",
        ]
        for line in details:
            elements.append(Paragraph(line, normal_style))
        elements.append(Spacer(1, 0.25 * inch))

        # 4. Price table
        price_table, column_count = self._price_table_flowable(quotation, normal_style, header_style)
        elements.append(price_table)
        elements.append(Spacer(1, 0.4 * inch))

        elements.append(Paragraph(
            "Prices are unit prices per quantity tier. A dash means no price is quoted for that quantity.",
            normal_style,
        ))

        def add_footer(canvas, doc):
            canvas.saveState()
            footer = Paragraph(escape(self.settings.FOOTER_TEXT), footer_style)
            w, h = footer.wrap(doc.width, doc.bottomMargin)
            footer.drawOn(canvas, doc.leftMargin, h)
            canvas.restoreState()

        pagesize = landscape(letter) if column_count > PORTRAIT_MAX_COLUMNS else letter
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=pagesize, title=f"Quotation {reference}")
        try:
            doc.build(elements, onFirstPage=add_footer, onLaterPages=add_footer)
        except Exception as e:
            logger.error(f"[PDFGen] ReportLab build() failed for quotation {reference}: {e}", exc_info=True)
            raise PDFGenerationException(f"could not build the document for quotation {reference}", original_exception=e)

        pdf_bytes = buffer.getvalue()
        buffer.close()
        logger.info(f"[PDFGen] PDF for quotation {reference} generated in memory ({len(pdf_bytes)} bytes).")
        return pdf_bytes
