"""Tests for log scrubbing of customer contact details."""

from __future__ import annotations

import logging

from rental_pricing.security.logging_filters import SensitiveFilter, mask_emails


def test_mask_emails_keeps_initial_and_domain() -> None:
    assert mask_emails("booked by jane.doe@example.com") == "booked by j***@example.com"
    assert mask_emails("no address here") == "no address here"


def test_filter_masks_message_and_arguments() -> None:
    record = logging.LogRecord(
        name="rental_pricing",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Recorded redemption of coupon %s by %s",
        args=("SUMMER10", "guest@example.com"),
        exc_info=None,
    )
    assert SensitiveFilter().filter(record) is True
    assert record.getMessage() == "Recorded redemption of coupon SUMMER10 by g***@example.com"
