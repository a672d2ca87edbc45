import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quotebuilder.database import get_db_session
from quotebuilder.pdf.dependencies import PDFGeneratorDep
from quotebuilder.quotations.interfaces.repositories import AbstractQuotationRepository
from quotebuilder.quotations.repositories import SQLAlchemyQuotationRepository
from quotebuilder.quotations.service import QuotationService
from quotebuilder.rendering.preview import QuotationPreviewRenderer

logger = logging.getLogger(__name__)

# --- Repository ---

def get_quotation_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> AbstractQuotationRepository:
    """Provides the SQLAlchemy implementation of the quotation repository."""
    logger.debug("Providing SQLAlchemyQuotationRepository")
    return SQLAlchemyQuotationRepository(db_session=session)

QuotationRepositoryDep = Annotated[AbstractQuotationRepository, Depends(get_quotation_repository)]


def get_preview_renderer() -> QuotationPreviewRenderer:
    return QuotationPreviewRenderer()

PreviewRendererDep = Annotated[QuotationPreviewRenderer, Depends(get_preview_renderer)]


# --- Service ---

def get_quotation_service(
    quotation_repo: QuotationRepositoryDep,
    preview_renderer: PreviewRendererDep,
    pdf_generator: PDFGeneratorDep,
) -> QuotationService:
    """
    Provides the quotation service.

    Args:
        quotation_repo: quotation repository.
        preview_renderer: renderer for text and HTML previews.
        pdf_generator: PDF generator used by the /pdf route.
    """
    return QuotationService(
        quotation_repo=quotation_repo,
        preview_renderer=preview_renderer,
        pdf_generator=pdf_generator,
    )

QuotationServiceDep = Annotated[QuotationService, Depends(get_quotation_service)]
