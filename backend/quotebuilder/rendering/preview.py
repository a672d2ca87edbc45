"""
Preview documents for a quotation: the price table spliced into a text or
HTML template.
"""
import logging
from typing import Any

from quotebuilder.rendering.price_table import currency_symbol_for, render_html_table, render_text_table
from quotebuilder.rendering.templates import render_template

logger = logging.getLogger(__name__)

PREVIEW_TEMPLATES = {
    "text": ("quotation_preview.txt", render_text_table),
    "html": ("quotation_preview.html", render_html_table),
}


class QuotationPreviewRenderer:
    """Renders quotation previews from the Jinja2 templates."""

    def render(self, quotation: Any, preview_format: str = "text") -> str:
        """Renders a preview of `quotation` in the requested format.

        Args:
            quotation: object exposing reference, quote_number, client_name,
                       currency, valid_until, status and parts.
            preview_format: "text" or "html".

        Raises:
            ValueError: on an unknown format.
        """
        fmt = getattr(preview_format, "value", preview_format)
        if fmt not in PREVIEW_TEMPLATES:
            raise ValueError(f"Unknown preview format '{fmt}'. Expected one of {', '.join(PREVIEW_TEMPLATES)}")

        template_name, render_table = PREVIEW_TEMPLATES[fmt]
        currency = getattr(quotation.currency, "value", quotation.currency)
        status = getattr(quotation.status, "value", quotation.status)
        price_table = render_table(quotation.parts, currency_symbol_for(currency))

        logger.debug(f"[Preview] Rendering {fmt} preview for quotation {quotation.reference}")
        return render_template(
            template_name,
            quotation=quotation,
            currency=currency,
            status=status,
            price_table=price_table,
        )
