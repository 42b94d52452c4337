"""Logging filters that scrub customer contact details."""

from __future__ import annotations

import logging
import re

_EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")


def mask_emails(text: str) -> str:
    """Keep the first character and domain of each address: ``j***@example.com``."""
    return _EMAIL_PATTERN.sub(r"\1***@\2", text)


class SensitiveFilter(logging.Filter):
    """Mask e-mail addresses in log messages and their string arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = mask_emails(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                mask_emails(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


__all__ = ["SensitiveFilter", "mask_emails"]
