from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from quotebuilder.quotations.lifecycle import QuoteStatus
from quotebuilder.quotations.models import Quotation, QuotationCreate


class AbstractQuotationRepository(ABC):
    """Abstract interface of the quotation repository."""

    @abstractmethod
    async def get_by_id(self, quotation_id: int) -> Optional[Quotation]:
        """Returns a quotation with its parts and price tiers loaded."""
        pass

    @abstractmethod
    async def get_by_reference(self, reference: str) -> Optional[Quotation]:
        """Returns the first quotation carrying this business reference."""
        pass

    @abstractmethod
    async def list_quotations(
        self,
        *,
        offset: int = 0,
        limit: int = 10,
        status: Optional[QuoteStatus] = None,
        client_name: Optional[str] = None,
    ) -> Tuple[List[Quotation], int]:
        """Lists quotations, newest first, with the total matching count."""
        pass

    @abstractmethod
    async def quote_number_exists(self, quote_number: str) -> bool:
        pass

    @abstractmethod
    async def create(self, quotation_data: QuotationCreate) -> Quotation:
        """Creates a DRAFT quotation with its parts."""
        pass

    @abstractmethod
    async def update(self, quotation: Quotation, changes: Dict[str, Any]) -> Quotation:
        """Applies already-validated field changes to a quotation."""
        pass

    @abstractmethod
    async def update_status(self, quotation: Quotation, status: QuoteStatus) -> Quotation:
        pass

    @abstractmethod
    async def delete(self, quotation: Quotation) -> None:
        """Permanently removes a quotation and everything it owns."""
        pass
