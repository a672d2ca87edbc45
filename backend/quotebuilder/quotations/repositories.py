import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from fastcrud import FastCRUD
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from quotebuilder.quotations.exceptions import DuplicateQuoteNumberException, QuotationPersistenceException
from quotebuilder.quotations.interfaces.repositories import AbstractQuotationRepository
from quotebuilder.quotations.lifecycle import QuoteStatus
from quotebuilder.quotations.models import (
    PriceTier,
    Quotation,
    QuotationCreate,
    QuotationPart,
    QuotationPartCreate,
    utc_now,
)

logger = logging.getLogger(__name__)

PartInput = Union[QuotationPartCreate, Dict[str, Any]]


class SQLAlchemyQuotationRepository(AbstractQuotationRepository):
    """SQLAlchemy implementation of the quotation repository."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        # FastCRUD for the flat queries (count, exists); nested loads use select()
        self.crud = FastCRUD(Quotation)

    # --- Helpers ---

    @staticmethod
    def _with_parts(statement):
        return statement.options(
            selectinload(Quotation.parts).selectinload(QuotationPart.price_tiers)
        ).execution_options(populate_existing=True)

    @staticmethod
    def _build_parts(parts_data: Iterable[PartInput]) -> List[QuotationPart]:
        parts = []
        for position, raw_part in enumerate(parts_data):
            part_in = raw_part if isinstance(raw_part, QuotationPartCreate) else QuotationPartCreate.model_validate(raw_part)
            part = QuotationPart(part_name=part_in.part_name, moq=part_in.moq, position=position)
            part.price_tiers = [
                PriceTier(quantity=tier.quantity, price=tier.price, position=tier_position)
                for tier_position, tier in enumerate(part_in.price_tiers)
            ]
            parts.append(part)
        return parts

    async def _commit(self, operation: str, quote_number: Optional[str] = None) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if "unique" in str(e).lower():
                logger.warning(f"[QuotationRepository] Unique constraint violated during {operation}: {e}")
                raise DuplicateQuoteNumberException(quote_number=quote_number)
            logger.error(f"[QuotationRepository] Integrity error during {operation}: {e}", exc_info=True)
            raise QuotationPersistenceException(operation=operation, detail=str(e))
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"[QuotationRepository] Database error during {operation}: {e}", exc_info=True)
            raise QuotationPersistenceException(operation=operation, detail=str(e))

    # --- Reads ---

    async def get_by_id(self, quotation_id: int) -> Optional[Quotation]:
        logger.debug(f"[QuotationRepository] Getting quotation by ID: {quotation_id}")
        statement = self._with_parts(select(Quotation).where(Quotation.id == quotation_id))
        result = await self.db.execute(statement)
        return result.scalars().one_or_none()

    async def get_by_reference(self, reference: str) -> Optional[Quotation]:
        logger.debug(f"[QuotationRepository] Getting quotation by reference: {reference}")
        statement = self._with_parts(
            select(Quotation).where(Quotation.reference == reference).order_by(Quotation.id).limit(1)
        )
        result = await self.db.execute(statement)
        return result.scalars().first()

    async def list_quotations(
        self,
        *,
        offset: int = 0,
        limit: int = 10,
        status: Optional[QuoteStatus] = None,
        client_name: Optional[str] = None,
    ) -> Tuple[List[Quotation], int]:
        logger.debug(
            f"[QuotationRepository] Listing quotations offset={offset} limit={limit} "
            f"status={status} client_name={client_name}"
        )
        filters: Dict[str, Any] = {}
        statement = select(Quotation)
        if status is not None:
            filters["status"] = status
            statement = statement.where(Quotation.status == status)
        if client_name:
            pattern = f"%{client_name}%"
            filters["client_name__ilike"] = pattern
            statement = statement.where(Quotation.client_name.ilike(pattern))

        statement = self._with_parts(
            statement.order_by(Quotation.created_at.desc(), Quotation.id.desc()).offset(offset).limit(limit)
        )
        try:
            result = await self.db.execute(statement)
            quotations = list(result.scalars().all())
            total = await self.crud.count(db=self.db, **filters)
        except SQLAlchemyError as e:
            logger.error(f"[QuotationRepository] Error listing quotations: {e}", exc_info=True)
            raise QuotationPersistenceException(operation="listing", detail=str(e))
        return quotations, total

    async def quote_number_exists(self, quote_number: str) -> bool:
        return await self.crud.exists(db=self.db, quote_number=quote_number)

    # --- Writes ---

    async def create(self, quotation_data: QuotationCreate) -> Quotation:
        logger.debug(f"[QuotationRepository] Creating quotation {quotation_data.quote_number}")
        quotation = Quotation(
            reference=quotation_data.reference,
            client_name=quotation_data.client_name,
            quote_number=quotation_data.quote_number,
            currency=quotation_data.currency,
            valid_until=quotation_data.valid_until,
            status=QuoteStatus.DRAFT,
        )
        quotation.parts = self._build_parts(quotation_data.parts)
        self.db.add(quotation)
        await self._commit("creation", quote_number=quotation_data.quote_number)

        logger.info(f"[QuotationRepository] Quotation ID {quotation.id} created with {len(quotation_data.parts)} parts.")
        return await self.get_by_id(quotation.id)

    async def update(self, quotation: Quotation, changes: Dict[str, Any]) -> Quotation:
        logger.debug(f"[QuotationRepository] Updating quotation {quotation.id} fields {sorted(changes)}")
        for field, value in changes.items():
            if field == "parts":
                quotation.parts = self._build_parts(value)
            else:
                setattr(quotation, field, value)
        quotation.updated_at = utc_now()
        await self._commit("update")
        return await self.get_by_id(quotation.id)

    async def update_status(self, quotation: Quotation, status: QuoteStatus) -> Quotation:
        logger.debug(f"[QuotationRepository] Setting status of quotation {quotation.id} to {status.value}")
        quotation.status = status
        quotation.updated_at = utc_now()
        await self._commit("status update")
        return await self.get_by_id(quotation.id)

    async def delete(self, quotation: Quotation) -> None:
        logger.debug(f"[QuotationRepository] Deleting quotation {quotation.id}")
        await self.db.delete(quotation)
        await self._commit("deletion")
