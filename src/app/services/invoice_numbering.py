"""Invoice Numbering

Invoice numbers are a fixed prefix followed by a zero padded sequence,
e.g. INV000042. The next number is derived from the most recently created
invoice; the unique index on invoice_number turns a concurrent race into a
failed insert instead of a duplicate.
"""

import logging
import re
from typing import Optional
from src.app.repositories.invoice_repository import InvoiceRepository

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "INV"
DEFAULT_WIDTH = 6

_TRAILING_DIGITS = re.compile(r"(\d+)$")


def next_invoice_number(
    last_number: Optional[str],
    prefix: str = DEFAULT_PREFIX,
    width: int = DEFAULT_WIDTH,
) -> str:
    """
    Compute the number that follows ``last_number``

    Args:
        last_number: Latest issued invoice number, or None
        prefix: Literal prefix
        width: Minimum number of digits (zero padded)

    Returns:
        Next invoice number. Starts at 1 when there is no previous number
        or its suffix is not numeric.

    Examples:
        >>> next_invoice_number(None)
        'INV000001'
        >>> next_invoice_number("INV000041")
        'INV000042'
    """
    sequence = 1
    if last_number:
        match = _TRAILING_DIGITS.search(last_number)
        if match:
            sequence = int(match.group(1)) + 1
    return f"{prefix}{str(sequence).zfill(width)}"


class InvoiceNumberGenerator:
    """Issues invoice numbers from the invoice repository"""

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        prefix: str = DEFAULT_PREFIX,
        width: int = DEFAULT_WIDTH,
    ):
        self.invoice_repo = invoice_repo
        self.prefix = prefix
        self.width = width

    async def next_number(self) -> str:
        last_number = await self.invoice_repo.get_latest_invoice_number()
        number = next_invoice_number(last_number, self.prefix, self.width)
        logger.debug(f"Next invoice number after {last_number}: {number}")
        return number
