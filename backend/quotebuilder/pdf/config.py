"""PDF generation settings.

Pydantic BaseSettings so that each value can be overridden from the
environment (PDF_ prefix).
"""

from pydantic_settings import BaseSettings


class PDFSettings(BaseSettings):
    """Configuration of the quotation PDF layout."""

    COMPANY_NAME: str = "Quote Builder"
    LOGO_PATH: str = "static/logo.png"
    COMPANY_INFO_HTML: str = (
        "<b>Quote Builder</b><br/>"
        "Sales &amp; Quotations<br/>"
        "Email : support@quotebuilder.local"
    )
    FOOTER_TEXT: str = "Quote Builder - prices valid until the date shown on the quotation"
    PRIMARY_COLOR_HEX: str = "#1f4e79"

    class Config:
        env_prefix = "PDF_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


pdf_settings = PDFSettings()
