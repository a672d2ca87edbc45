"""
Quotation status lifecycle.

Holds the status enum, the transition table and the permission rules that gate
updates and deletions. Everything here is pure: the functions look at the
statuses they are given and either answer or raise a domain exception.
"""
import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Union

from quotebuilder.quotations.exceptions import (
    InvalidQuoteStatusException,
    InvalidStatusTransitionException,
    QuoteUpdateForbiddenException,
    QuoteDeletionForbiddenException,
)

logger = logging.getLogger(__name__)


class QuoteStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


# Every status must have a row, even when nothing is reachable from it
ALLOWED_TRANSITIONS: Dict[QuoteStatus, FrozenSet[QuoteStatus]] = {
    QuoteStatus.DRAFT: frozenset({QuoteStatus.SENT, QuoteStatus.EXPIRED}),
    QuoteStatus.SENT: frozenset({QuoteStatus.APPROVED, QuoteStatus.REJECTED, QuoteStatus.EXPIRED}),
    QuoteStatus.APPROVED: frozenset({QuoteStatus.EXPIRED}),
    QuoteStatus.REJECTED: frozenset({QuoteStatus.DRAFT, QuoteStatus.EXPIRED}),
    QuoteStatus.EXPIRED: frozenset({QuoteStatus.DRAFT}),
}

UPDATABLE_STATUSES: FrozenSet[QuoteStatus] = frozenset({QuoteStatus.DRAFT, QuoteStatus.REJECTED})
DELETABLE_STATUSES: FrozenSet[QuoteStatus] = frozenset({QuoteStatus.DRAFT})

# Fields that can never be changed once the quotation exists
IMMUTABLE_FIELDS: FrozenSet[str] = frozenset({"quote_number"})

StatusLike = Union[QuoteStatus, str]


def status_values() -> list:
    return [s.value for s in QuoteStatus]


def parse_status(value: Any) -> QuoteStatus:
    """Turns a raw value into a QuoteStatus.

    Raises:
        InvalidQuoteStatusException: if the value is not one of the five statuses.
    """
    if isinstance(value, QuoteStatus):
        return value
    try:
        return QuoteStatus(value)
    except ValueError:
        raise InvalidQuoteStatusException(status=value, allowed=status_values())


def can_transition(current: StatusLike, requested: Any) -> bool:
    """Returns True when `requested` is reachable from `current` in one step."""
    try:
        current_status = parse_status(current)
        requested_status = parse_status(requested)
    except InvalidQuoteStatusException:
        return False
    return requested_status in ALLOWED_TRANSITIONS[current_status]


def ensure_transition(current: StatusLike, requested: Any) -> QuoteStatus:
    """Validates a status change and returns the parsed target status.

    The requested value is checked against the enum before the table is
    consulted, so an unknown value and an unreachable value raise different
    exceptions.

    Raises:
        InvalidQuoteStatusException: unknown requested value.
        InvalidStatusTransitionException: known value, not reachable from `current`.
    """
    requested_status = parse_status(requested)
    current_status = parse_status(current)
    if requested_status not in ALLOWED_TRANSITIONS[current_status]:
        logger.warning(f"[Lifecycle] Rejected transition {current_status.value} -> {requested_status.value}")
        raise InvalidStatusTransitionException(current=current_status.value, requested=requested_status.value)
    return requested_status


def can_update(status: StatusLike) -> bool:
    return parse_status(status) in UPDATABLE_STATUSES


def ensure_updatable(status: StatusLike) -> None:
    """Raises QuoteUpdateForbiddenException unless the quotation is DRAFT or REJECTED."""
    current_status = parse_status(status)
    if current_status not in UPDATABLE_STATUSES:
        blocking = [s.value for s in QuoteStatus if s not in UPDATABLE_STATUSES]
        raise QuoteUpdateForbiddenException(status=current_status.value, blocking=blocking)


def can_delete(status: StatusLike) -> bool:
    return parse_status(status) in DELETABLE_STATUSES


def ensure_deletable(status: StatusLike) -> None:
    """Raises QuoteDeletionForbiddenException unless the quotation is DRAFT."""
    current_status = parse_status(status)
    if current_status not in DELETABLE_STATUSES:
        raise QuoteDeletionForbiddenException(status=current_status.value)


def strip_immutable_fields(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Returns a copy of an update payload without the immutable fields."""
    return {key: value for key, value in changes.items() if key not in IMMUTABLE_FIELDS}
