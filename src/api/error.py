"""HTTP error mapping

Use cases return an ``Error``; routes raise it as a ``ClientError`` and the
handler renders ``{"error": {"code", "message", "reason"}}``.
"""

import logging
from typing import Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from src.libs.result import Error

logger = logging.getLogger(__name__)

# Default HTTP status per error code
STATUS_BY_CODE = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "PRODUCT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INSUFFICIENT_STOCK": status.HTTP_409_CONFLICT,
    "INVOICE_IMMUTABLE": status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        if status_code is None:
            status_code = STATUS_BY_CODE.get(error.code)
        if status_code is None and error.code.endswith("_FAILED"):
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        self.status_code = status_code or status.HTTP_400_BAD_REQUEST

    def to_response(self) -> dict:
        body = {"code": self.error.code, "message": self.error.message}
        if self.error.reason:
            body["reason"] = self.error.reason
        if self.error.details:
            body["details"] = self.error.details
        return {"error": body}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error.code} {exc.error.reason}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())
