"""
Dependencies of the PDF module.
"""
from typing import Annotated

from fastapi import Depends

from quotebuilder.pdf.config import PDFSettings, pdf_settings
from quotebuilder.pdf.generator import AbstractPDFGenerator
from quotebuilder.pdf.reportlab_generator import ReportLabPDFGenerator


def get_pdf_settings() -> PDFSettings:
    """Returns the global PDF settings instance."""
    return pdf_settings

PDFSettingsDep = Annotated[PDFSettings, Depends(get_pdf_settings)]


def get_pdf_generator(settings: PDFSettingsDep) -> AbstractPDFGenerator:
    """Provides the concrete PDF generator, configured with the PDF settings."""
    return ReportLabPDFGenerator(settings=settings)

PDFGeneratorDep = Annotated[AbstractPDFGenerator, Depends(get_pdf_generator)]
