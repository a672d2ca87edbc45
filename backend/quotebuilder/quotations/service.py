import logging
import math
import unicodedata
from typing import Any, Optional, Tuple, Union
from urllib.parse import quote

from quotebuilder.pdf.exceptions import PDFGenerationException
from quotebuilder.pdf.generator import AbstractPDFGenerator
from quotebuilder.quotations.exceptions import (
    DuplicateQuoteNumberException,
    QuotationNotFoundException,
)
from quotebuilder.quotations.interfaces.repositories import AbstractQuotationRepository
from quotebuilder.quotations.lifecycle import (
    ensure_deletable,
    ensure_transition,
    ensure_updatable,
    parse_status,
    strip_immutable_fields,
)
from quotebuilder.quotations.models import (
    PaginatedQuotationRead,
    PreviewFormat,
    Quotation,
    QuotationCreate,
    QuotationPreviewRead,
    QuotationRead,
    QuotationUpdate,
)
from quotebuilder.rendering.preview import QuotationPreviewRenderer

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "Q-"


def pdf_filename(quotation: Quotation) -> str:
    """Download name of a quotation PDF: <reference>_<client_name>.pdf"""
    name = f"{quotation.reference}_{quotation.client_name}.pdf"
    # Keeps the Content-Disposition header well formed
    return name.replace('"', "").replace("\r", "").replace("\n", "")


def content_disposition(filename: str) -> str:
    """Attachment header for a download name.

    Header values travel as latin-1, so non-ASCII names get an ASCII
    fallback in ``filename`` and the exact name in ``filename*`` (RFC 5987).
    """
    ascii_name = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    header = f'attachment; filename="{ascii_name}"'
    if ascii_name != filename:
        header += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return header


class QuotationService:
    """Application service for quotations, built on the repository pattern.

    Every status-gated operation goes through the lifecycle functions before
    the repository is touched.
    """

    def __init__(
        self,
        quotation_repo: AbstractQuotationRepository,
        preview_renderer: Optional[QuotationPreviewRenderer] = None,
        pdf_generator: Optional[AbstractPDFGenerator] = None,
    ):
        self.quotation_repo = quotation_repo
        self.preview_renderer = preview_renderer or QuotationPreviewRenderer()
        self.pdf_generator = pdf_generator

    # --- Lookup ---

    async def _get_quotation(self, identifier: Union[int, str]) -> Quotation:
        """Finds a quotation by storage id, or by reference for "Q-" values."""
        quotation = None
        if isinstance(identifier, int):
            quotation = await self.quotation_repo.get_by_id(identifier)
        else:
            identifier = identifier.strip()
            if identifier.startswith(REFERENCE_PREFIX):
                quotation = await self.quotation_repo.get_by_reference(identifier)
            elif identifier.isdigit():
                quotation = await self.quotation_repo.get_by_id(int(identifier))

        if quotation is None:
            logger.warning(f"[QuotationService] Quotation {identifier} not found.")
            raise QuotationNotFoundException(identifier)
        return quotation

    async def get_quotation(self, identifier: Union[int, str]) -> QuotationRead:
        logger.debug(f"[QuotationService] Getting quotation {identifier}")
        quotation = await self._get_quotation(identifier)
        return QuotationRead.model_validate(quotation)

    async def list_quotations(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        client_name: Optional[str] = None,
    ) -> PaginatedQuotationRead:
        """Lists quotations newest first, one page at a time.

        Raises:
            InvalidQuoteStatusException: if `status` is not a known status.
        """
        status_filter = parse_status(status) if status else None
        offset = (page - 1) * limit
        logger.debug(
            f"[QuotationService] Listing quotations page={page} limit={limit} "
            f"status={status_filter} client_name={client_name}"
        )
        quotations, total = await self.quotation_repo.list_quotations(
            offset=offset, limit=limit, status=status_filter, client_name=client_name
        )
        return PaginatedQuotationRead(
            items=[QuotationRead.model_validate(q) for q in quotations],
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit) if total else 0,
        )

    # --- Writes ---

    async def create_quotation(self, quotation_data: QuotationCreate) -> QuotationRead:
        logger.info(
            f"[QuotationService] Creating quotation {quotation_data.quote_number} "
            f"for client '{quotation_data.client_name}'"
        )
        if await self.quotation_repo.quote_number_exists(quotation_data.quote_number):
            logger.warning(f"[QuotationService] Duplicate quote_number {quotation_data.quote_number}")
            raise DuplicateQuoteNumberException(quote_number=quotation_data.quote_number)

        created = await self.quotation_repo.create(quotation_data)
        logger.info(f"[QuotationService] Quotation ID {created.id} created ({created.reference}).")
        return QuotationRead.model_validate(created)

    async def update_quotation(self, identifier: Union[int, str], update_data: QuotationUpdate) -> QuotationRead:
        """Applies a full-field update; quote_number changes are dropped.

        Raises:
            QuotationNotFoundException, QuoteUpdateForbiddenException
        """
        quotation = await self._get_quotation(identifier)
        ensure_updatable(quotation.status)

        changes = {
            key: value
            for key, value in update_data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        changes = strip_immutable_fields(changes)
        logger.info(f"[QuotationService] Updating quotation ID {quotation.id}: fields {sorted(changes)}")

        updated = await self.quotation_repo.update(quotation, changes)
        return QuotationRead.model_validate(updated)

    async def change_status(self, identifier: Union[int, str], requested_status: Any) -> QuotationRead:
        """Moves a quotation to `requested_status` if the lifecycle allows it.

        Raises:
            QuotationNotFoundException, InvalidQuoteStatusException,
            InvalidStatusTransitionException
        """
        quotation = await self._get_quotation(identifier)
        current = quotation.status
        new_status = ensure_transition(current, requested_status)

        updated = await self.quotation_repo.update_status(quotation, new_status)
        logger.info(
            f"[QuotationService] Quotation ID {updated.id} status changed "
            f"from {getattr(current, 'value', current)} to {new_status.value}"
        )
        return QuotationRead.model_validate(updated)

    async def delete_quotation(self, identifier: Union[int, str]) -> None:
        """Deletes a DRAFT quotation with its parts and tiers.

        Raises:
            QuotationNotFoundException, QuoteDeletionForbiddenException
        """
        quotation = await self._get_quotation(identifier)
        ensure_deletable(quotation.status)
        quotation_id = quotation.id
        await self.quotation_repo.delete(quotation)
        logger.info(f"[QuotationService] Quotation ID {quotation_id} deleted.")

    # --- Documents ---

    async def preview_quotation(
        self, identifier: Union[int, str], preview_format: PreviewFormat = PreviewFormat.TEXT
    ) -> QuotationPreviewRead:
        quotation = await self._get_quotation(identifier)
        content = self.preview_renderer.render(quotation, preview_format.value)
        return QuotationPreviewRead(quotation_id=quotation.id, format=preview_format, content=content)

    async def generate_pdf(self, identifier: Union[int, str]) -> Tuple[bytes, str]:
        """Returns the PDF bytes of a quotation and its download file name.

        Raises:
            QuotationNotFoundException, PDFGenerationException
        """
        if self.pdf_generator is None:
            raise PDFGenerationException("no PDF generator is configured")

        quotation = await self._get_quotation(identifier)
        logger.info(f"[QuotationService] Generating PDF for quotation ID {quotation.id}")
        pdf_bytes = await self.pdf_generator.generate_quotation_pdf(quotation)
        return pdf_bytes, pdf_filename(quotation)
