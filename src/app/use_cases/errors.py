"""Conversion of domain errors into Result errors"""

from src.domain.errors import InvoicingError
from src.libs.result import Error


def error_from(exc: InvoicingError) -> Error:
    return Error(
        code=exc.code,
        message=exc.message,
        reason=exc.reason,
        details=exc.details or None,
    )
