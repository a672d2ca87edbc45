from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, List

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field, Relationship

from quotebuilder.quotations.lifecycle import QuoteStatus


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Currency(str, Enum):
    INR = "INR"
    USD = "USD"


# --- PriceTier models ---

class PriceTierBase(SQLModel):
    """Unit price for a given order quantity."""
    quantity: float = Field(..., gt=0)
    price: float = Field(..., gt=0)


class PriceTier(PriceTierBase, table=True):
    """Table model for a price tier, owned by one part."""
    id: Optional[int] = Field(default=None, primary_key=True)
    part_id: Optional[int] = Field(default=None, foreign_key="quotation_parts.id", index=True)
    position: int = Field(default=0)

    part: Optional["QuotationPart"] = Relationship(back_populates="price_tiers")

    __tablename__ = "price_tiers"


class PriceTierCreate(PriceTierBase):
    pass


class PriceTierRead(PriceTierBase):
    model_config = ConfigDict(from_attributes=True)


# --- Part models ---

class QuotationPartBase(SQLModel):
    """A line item of a quotation."""
    part_name: str = Field(..., min_length=1, max_length=255)
    moq: int = Field(..., gt=0)


class QuotationPart(QuotationPartBase, table=True):
    """Table model for a part, owned by one quotation."""
    id: Optional[int] = Field(default=None, primary_key=True)
    quotation_id: Optional[int] = Field(default=None, foreign_key="quotations.id", index=True)
    position: int = Field(default=0)

    quotation: Optional["Quotation"] = Relationship(back_populates="parts")
    price_tiers: List["PriceTier"] = Relationship(
        back_populates="part",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "PriceTier.position"},
    )

    __tablename__ = "quotation_parts"


class QuotationPartCreate(QuotationPartBase):
    model_config = ConfigDict(str_strip_whitespace=True)

    price_tiers: List[PriceTierCreate] = []


class QuotationPartRead(QuotationPartBase):
    model_config = ConfigDict(from_attributes=True)

    price_tiers: List[PriceTierRead] = []


# --- Quotation models ---

class QuotationBase(SQLModel):
    """Fields shared by the quotation table and its API schemas."""
    reference: str = Field(..., min_length=1, max_length=100, index=True)
    client_name: str = Field(..., min_length=1, max_length=255)
    quote_number: str = Field(..., min_length=1, max_length=100, unique=True, index=True)
    currency: Currency
    valid_until: str = Field(..., min_length=1, max_length=50)


class Quotation(QuotationBase, table=True):
    """Table model for a quotation."""
    id: Optional[int] = Field(default=None, primary_key=True)
    status: QuoteStatus = Field(default=QuoteStatus.DRAFT, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    parts: List["QuotationPart"] = Relationship(
        back_populates="quotation",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "QuotationPart.position"},
    )

    __tablename__ = "quotations"


class QuotationCreate(QuotationBase):
    """Payload for creating a quotation. The status is always DRAFT on creation."""
    model_config = ConfigDict(str_strip_whitespace=True)

    parts: List[QuotationPartCreate] = []


class QuotationUpdate(SQLModel):
    """Payload for a full-field update.

    quote_number is accepted so that clients can send back a whole record, but
    it is dropped before the changes are applied.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    reference: Optional[str] = Field(default=None, min_length=1, max_length=100)
    client_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    quote_number: Optional[str] = None
    currency: Optional[Currency] = None
    valid_until: Optional[str] = Field(default=None, min_length=1, max_length=50)
    parts: Optional[List[QuotationPartCreate]] = None


class QuotationStatusUpdate(SQLModel):
    """Payload for a status change. Any JSON value is accepted so that unknown
    statuses, numbers included, reach the lifecycle check and get a 400."""
    status: Any


class QuotationRead(QuotationBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: QuoteStatus
    created_at: datetime
    updated_at: datetime
    parts: List[QuotationPartRead] = []


class PaginatedQuotationRead(SQLModel):
    items: List[QuotationRead]
    total: int
    page: int
    limit: int
    pages: int


class QuotationMessage(SQLModel):
    message: str


class PDFGenerationRequest(SQLModel):
    """Body of POST /pdf: storage id or Q- reference of the quotation."""
    quotation_id: str = Field(..., min_length=1)


class PreviewFormat(str, Enum):
    TEXT = "text"
    HTML = "html"


class QuotationPreviewRead(SQLModel):
    quotation_id: int
    format: PreviewFormat
    content: str
