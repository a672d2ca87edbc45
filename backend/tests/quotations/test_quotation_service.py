from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from quotebuilder.quotations.exceptions import (
    DuplicateQuoteNumberException,
    InvalidStatusTransitionException,
    QuotationNotFoundException,
    QuoteDeletionForbiddenException,
)
from quotebuilder.quotations.interfaces.repositories import AbstractQuotationRepository
from quotebuilder.quotations.lifecycle import QuoteStatus
from quotebuilder.quotations.models import (
    Currency,
    PriceTier,
    Quotation,
    QuotationCreate,
    QuotationPart,
    QuotationUpdate,
)
from quotebuilder.quotations.service import QuotationService, content_disposition, pdf_filename


def _quotation(status: QuoteStatus = QuoteStatus.DRAFT, **overrides) -> Quotation:
    now = datetime.now(timezone.utc)
    values = dict(
        id=1,
        reference="Q-001",
        client_name="Acme",
        quote_number="QN-1",
        currency=Currency.USD,
        valid_until="2026-12-31",
        status=status,
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    quotation = Quotation(**values)
    part = QuotationPart(part_name="Bracket", moq=10, position=0)
    part.price_tiers = [PriceTier(quantity=10, price=2.5, position=0)]
    quotation.parts = [part]
    return quotation


@pytest.fixture
def repo(mocker):
    return mocker.create_autospec(AbstractQuotationRepository, instance=True)


@pytest.fixture
def service(repo):
    return QuotationService(quotation_repo=repo)


@pytest.mark.asyncio
async def test_lookup_dispatches_on_reference_prefix(service, repo):
    repo.get_by_reference.return_value = _quotation()

    result = await service.get_quotation("Q-001")

    repo.get_by_reference.assert_awaited_once_with("Q-001")
    repo.get_by_id.assert_not_called()
    assert result.reference == "Q-001"


@pytest.mark.asyncio
async def test_lookup_by_numeric_string(service, repo):
    repo.get_by_id.return_value = _quotation()
    await service.get_quotation("1")
    repo.get_by_id.assert_awaited_once_with(1)


@pytest.mark.asyncio
async def test_lookup_of_garbage_identifier_is_not_found(service, repo):
    with pytest.raises(QuotationNotFoundException):
        await service.get_quotation("abc")
    repo.get_by_id.assert_not_called()
    repo.get_by_reference.assert_not_called()


@pytest.mark.asyncio
async def test_create_checks_quote_number_first(service, repo):
    repo.quote_number_exists.return_value = True
    data = QuotationCreate(
        reference="Q-1", client_name="Acme", quote_number="QN-1", currency="USD", valid_until="2026-12-31"
    )

    with pytest.raises(DuplicateQuoteNumberException):
        await service.create_quotation(data)
    repo.create.assert_not_called()


@pytest.mark.asyncio
async def test_update_drops_quote_number_and_none_values(service, repo):
    quotation = _quotation()
    repo.get_by_id.return_value = quotation
    repo.update.return_value = quotation

    await service.update_quotation(1, QuotationUpdate(quote_number="QN-NEW", client_name="Globex", reference=None))

    repo.update.assert_awaited_once_with(quotation, {"client_name": "Globex"})


@pytest.mark.asyncio
async def test_change_status_does_not_touch_repo_when_rejected(service, repo):
    repo.get_by_id.return_value = _quotation(status=QuoteStatus.APPROVED)

    with pytest.raises(InvalidStatusTransitionException):
        await service.change_status(1, "DRAFT")
    repo.update_status.assert_not_called()


@pytest.mark.asyncio
async def test_change_status_passes_parsed_status(service, repo):
    quotation = _quotation()
    repo.get_by_id.return_value = quotation
    repo.update_status.return_value = _quotation(status=QuoteStatus.SENT)

    result = await service.change_status(1, "SENT")

    repo.update_status.assert_awaited_once_with(quotation, QuoteStatus.SENT)
    assert result.status == QuoteStatus.SENT


@pytest.mark.asyncio
async def test_delete_outside_draft_is_forbidden(service, repo):
    repo.get_by_id.return_value = _quotation(status=QuoteStatus.EXPIRED)

    with pytest.raises(QuoteDeletionForbiddenException):
        await service.delete_quotation(1)
    repo.delete.assert_not_called()


@pytest.mark.asyncio
async def test_list_computes_offset_and_pages(service, repo):
    repo.list_quotations.return_value = ([_quotation()], 21)

    page = await service.list_quotations(page=3, limit=10, status="SENT", client_name="ac")

    repo.list_quotations.assert_awaited_once_with(
        offset=20, limit=10, status=QuoteStatus.SENT, client_name="ac"
    )
    assert page.pages == 3
    assert page.total == 21


@pytest.mark.asyncio
async def test_generate_pdf_uses_generator(repo):
    generator = AsyncMock()
    generator.generate_quotation_pdf.return_value = b"%PDF-1.4"
    repo.get_by_reference.return_value = _quotation()
    service = QuotationService(quotation_repo=repo, pdf_generator=generator)

    pdf_bytes, filename = await service.generate_pdf("Q-001")

    assert pdf_bytes == b"%PDF-1.4"
    assert filename == "Q-001_Acme.pdf"


def test_pdf_filename_strips_header_breaking_characters():
    quotation = _quotation(client_name='Acme "Tools"\r\n')
    assert pdf_filename(quotation) == "Q-001_Acme Tools.pdf"


def test_content_disposition_keeps_plain_names_unchanged():
    assert content_disposition("Q-001_Acme.pdf") == 'attachment; filename="Q-001_Acme.pdf"'


def test_content_disposition_encodes_non_latin_names():
    header = content_disposition("Q-001_Łódź.pdf")

    assert header == "attachment; filename=\"Q-001_odz.pdf\"; filename*=UTF-8''Q-001_%C5%81%C3%B3d%C5%BA.pdf"
    header.encode("latin-1")
