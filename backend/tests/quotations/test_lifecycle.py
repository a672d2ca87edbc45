import itertools

import pytest

from quotebuilder.quotations.exceptions import (
    InvalidQuoteStatusException,
    InvalidStatusTransitionException,
    QuoteDeletionForbiddenException,
    QuoteUpdateForbiddenException,
)
from quotebuilder.quotations.lifecycle import (
    ALLOWED_TRANSITIONS,
    QuoteStatus,
    can_delete,
    can_transition,
    can_update,
    ensure_deletable,
    ensure_transition,
    ensure_updatable,
    parse_status,
    strip_immutable_fields,
)

EXPECTED_ALLOWED = {
    ("DRAFT", "SENT"),
    ("DRAFT", "EXPIRED"),
    ("SENT", "APPROVED"),
    ("SENT", "REJECTED"),
    ("SENT", "EXPIRED"),
    ("APPROVED", "EXPIRED"),
    ("REJECTED", "DRAFT"),
    ("REJECTED", "EXPIRED"),
    ("EXPIRED", "DRAFT"),
}

ALL_PAIRS = list(itertools.product([s.value for s in QuoteStatus], repeat=2))


def test_every_status_has_a_transition_row():
    assert set(ALLOWED_TRANSITIONS) == set(QuoteStatus)


@pytest.mark.parametrize("current,requested", ALL_PAIRS)
def test_can_transition_matches_table(current, requested):
    assert can_transition(current, requested) is ((current, requested) in EXPECTED_ALLOWED)


@pytest.mark.parametrize("current,requested", ALL_PAIRS)
def test_ensure_transition_raises_for_disallowed_pairs(current, requested):
    if (current, requested) in EXPECTED_ALLOWED:
        assert ensure_transition(current, requested) == QuoteStatus(requested)
    else:
        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            ensure_transition(current, requested)
        assert exc_info.value.message == f"Cannot change status from {current} to {requested}"


@pytest.mark.parametrize("status", list(QuoteStatus))
def test_self_transition_is_never_allowed(status):
    assert can_transition(status, status) is False


def test_approved_can_only_expire():
    assert [s for s in QuoteStatus if can_transition("APPROVED", s)] == [QuoteStatus.EXPIRED]


@pytest.mark.parametrize("value", ["draft", "PENDING", "", None, 3])
def test_parse_status_rejects_unknown_values(value):
    with pytest.raises(InvalidQuoteStatusException) as exc_info:
        parse_status(value)
    assert "DRAFT, SENT, APPROVED, REJECTED, EXPIRED" in exc_info.value.message


def test_can_transition_is_false_for_unknown_values():
    assert can_transition("DRAFT", "ARCHIVED") is False
    assert can_transition("ARCHIVED", "DRAFT") is False


def test_ensure_transition_reports_invalid_value_before_transition():
    with pytest.raises(InvalidQuoteStatusException):
        ensure_transition("APPROVED", "ARCHIVED")


@pytest.mark.parametrize("status,allowed", [
    ("DRAFT", True),
    ("REJECTED", True),
    ("SENT", False),
    ("APPROVED", False),
    ("EXPIRED", False),
])
def test_update_permission(status, allowed):
    assert can_update(status) is allowed
    if allowed:
        ensure_updatable(status)
    else:
        with pytest.raises(QuoteUpdateForbiddenException) as exc_info:
            ensure_updatable(status)
        assert exc_info.value.message == "Quotations in SENT, APPROVED, or EXPIRED status cannot be updated"


@pytest.mark.parametrize("status", [s.value for s in QuoteStatus])
def test_only_draft_can_be_deleted(status):
    assert can_delete(status) is (status == "DRAFT")
    if status == "DRAFT":
        ensure_deletable(status)
    else:
        with pytest.raises(QuoteDeletionForbiddenException) as exc_info:
            ensure_deletable(status)
        assert exc_info.value.message == "Only DRAFT quotations can be deleted"


def test_strip_immutable_fields_drops_quote_number_only():
    changes = {"quote_number": "QN-NEW", "client_name": "New Client", "parts": []}
    stripped = strip_immutable_fields(changes)
    assert stripped == {"client_name": "New Client", "parts": []}
    # Input is left untouched
    assert "quote_number" in changes
