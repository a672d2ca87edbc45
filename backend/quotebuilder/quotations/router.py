import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query, Path, Response

from quotebuilder.auth.dependencies import require_token
from quotebuilder.config import settings
from quotebuilder.pdf.exceptions import PDFGenerationException
from quotebuilder.quotations.dependencies import QuotationServiceDep
from quotebuilder.quotations.exceptions import (
    DuplicateQuoteNumberException,
    InvalidQuoteStatusException,
    InvalidStatusTransitionException,
    QuotationNotFoundException,
    QuotationPersistenceException,
    QuoteDeletionForbiddenException,
    QuoteUpdateForbiddenException,
)
from quotebuilder.quotations.models import (
    PaginatedQuotationRead,
    PDFGenerationRequest,
    PreviewFormat,
    QuotationCreate,
    QuotationMessage,
    QuotationPreviewRead,
    QuotationRead,
    QuotationStatusUpdate,
    QuotationUpdate,
)
from quotebuilder.quotations.service import content_disposition

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/quotations",
    tags=["Quotations"],
    dependencies=[Depends(require_token)],
)

BAD_REQUEST_EXCEPTIONS = (
    InvalidQuoteStatusException,
    InvalidStatusTransitionException,
    QuoteUpdateForbiddenException,
    QuoteDeletionForbiddenException,
    DuplicateQuoteNumberException,
)


def _to_http_exception(exc: Exception, action: str) -> HTTPException:
    """Maps a domain exception raised while doing `action` to an HTTPException."""
    if isinstance(exc, QuotationNotFoundException):
        logger.info(f"[QuotationsAPI] {action}: {exc.message}")
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, BAD_REQUEST_EXCEPTIONS):
        logger.warning(f"[QuotationsAPI] {action} rejected: {exc.message}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    if isinstance(exc, (QuotationPersistenceException, PDFGenerationException)):
        logger.error(f"[QuotationsAPI] {action} failed: {exc.message}", exc_info=True)
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)
    logger.error(f"[QuotationsAPI] Unexpected error during {action}: {exc}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.INTERNAL_ERROR_MSG)


QuotationIdPath = Annotated[str, Path(title="Storage id, or reference starting with Q-", min_length=1)]


@router.get("/", response_model=PaginatedQuotationRead)
async def list_quotations(
    quotation_service: QuotationServiceDep,
    response: Response,
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
    status_filter: Optional[str] = Query(None, alias="status", description="Only quotations in this status"),
    client_name: Optional[str] = Query(None, description="Case-insensitive substring of the client name"),
):
    """Lists quotations, newest first."""
    logger.info(f"API list_quotations page={page} limit={limit} status={status_filter} client_name={client_name}")
    try:
        result = await quotation_service.list_quotations(
            page=page, limit=limit, status=status_filter, client_name=client_name
        )
    except Exception as e:
        raise _to_http_exception(e, "list quotations")

    offset = (page - 1) * limit
    end_range = offset + len(result.items) - 1 if result.items else offset
    response.headers["Content-Range"] = f"quotations {offset}-{end_range}/{result.total}"
    return result


@router.post("/", response_model=QuotationRead, status_code=status.HTTP_201_CREATED)
async def create_quotation(
    quotation_service: QuotationServiceDep,
    quotation_request: QuotationCreate,
):
    """Creates a quotation. It always starts in DRAFT."""
    logger.info(f"API create_quotation quote_number={quotation_request.quote_number}")
    try:
        return await quotation_service.create_quotation(quotation_request)
    except Exception as e:
        raise _to_http_exception(e, "create quotation")


@router.post("/pdf", response_class=Response)
async def generate_quotation_pdf(
    quotation_service: QuotationServiceDep,
    pdf_request: PDFGenerationRequest,
):
    """Returns the quotation as a downloadable PDF."""
    logger.info(f"API generate_quotation_pdf quotation_id={pdf_request.quotation_id}")
    try:
        pdf_bytes, filename = await quotation_service.generate_pdf(pdf_request.quotation_id)
    except Exception as e:
        raise _to_http_exception(e, "generate PDF")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.get("/{quotation_id}", response_model=QuotationRead)
async def read_quotation(
    quotation_service: QuotationServiceDep,
    quotation_id: QuotationIdPath,
):
    logger.info(f"API read_quotation: {quotation_id}")
    try:
        return await quotation_service.get_quotation(quotation_id)
    except Exception as e:
        raise _to_http_exception(e, f"read quotation {quotation_id}")


@router.get("/{quotation_id}/preview", response_model=QuotationPreviewRead)
async def preview_quotation(
    quotation_service: QuotationServiceDep,
    quotation_id: QuotationIdPath,
    preview_format: PreviewFormat = Query(PreviewFormat.TEXT, alias="format"),
):
    """Renders the quotation with its price table as text or HTML."""
    logger.info(f"API preview_quotation: {quotation_id} format={preview_format.value}")
    try:
        return await quotation_service.preview_quotation(quotation_id, preview_format)
    except Exception as e:
        raise _to_http_exception(e, f"preview quotation {quotation_id}")


@router.put("/{quotation_id}", response_model=QuotationRead)
async def update_quotation(
    quotation_service: QuotationServiceDep,
    update_request: QuotationUpdate,
    quotation_id: QuotationIdPath,
):
    """Full-field update, allowed in DRAFT and REJECTED. quote_number is never changed."""
    logger.info(f"API update_quotation: {quotation_id}")
    try:
        return await quotation_service.update_quotation(quotation_id, update_request)
    except Exception as e:
        raise _to_http_exception(e, f"update quotation {quotation_id}")


@router.delete("/{quotation_id}", response_model=QuotationMessage)
async def delete_quotation(
    quotation_service: QuotationServiceDep,
    quotation_id: QuotationIdPath,
):
    logger.info(f"API delete_quotation: {quotation_id}")
    try:
        await quotation_service.delete_quotation(quotation_id)
    except Exception as e:
        raise _to_http_exception(e, f"delete quotation {quotation_id}")
    return QuotationMessage(message="Quotation deleted successfully")


@router.patch("/{quotation_id}/status", response_model=QuotationRead)
async def update_quotation_status(
    quotation_service: QuotationServiceDep,
    status_update: QuotationStatusUpdate,
    quotation_id: QuotationIdPath,
):
    logger.info(f"API update_quotation_status: {quotation_id} -> '{status_update.status}'")
    try:
        return await quotation_service.change_status(quotation_id, status_update.status)
    except Exception as e:
        raise _to_http_exception(e, f"change status of quotation {quotation_id}")
