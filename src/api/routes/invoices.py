"""Invoice API Routes

FastAPI routes for the invoice lifecycle: create, list, get, edit, cancel,
status overwrite, delete, PDF download and dashboard statistics.
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.services.invoice_numbering import InvoiceNumberGenerator
from src.app.services.stock_ledger import StockLedger
from src.app.use_cases.invoicing import (
    CancelInvoice,
    CreateInvoice,
    DeleteInvoice,
    GenerateInvoicePdf,
    GetInvoice,
    GetInvoiceSummary,
    ListInvoices,
    ListRecentInvoices,
    ListTopProducts,
    UpdateInvoice,
    UpdateInvoiceStatus,
)
from src.app.use_cases.invoicing.dtos import (
    CreateInvoiceCommandDTO,
    DeletedInvoiceDTO,
    InvoiceItemCommandDTO,
    InvoiceListResponseDTO,
    InvoiceResponseDTO,
    InvoiceStatsQueryDTO,
    InvoiceSummaryDTO,
    ListInvoicesQueryDTO,
    UpdateInvoiceCommandDTO,
    UpdateInvoiceStatusCommandDTO,
    TopProductDTO,
)
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_item_repository import SqlAlchemyInvoiceItemRepository
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.services.pdf_service import ReportLabPdfService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.schemas.invoice_request import InvoiceRequestSchema, InvoiceStatusRequestSchema
from src.depends import get_session
from src.domain.invoice import PaymentStatus

router = APIRouter(prefix="/invoices", tags=["Invoices"])


NOT_FOUND_RESPONSE = {
    "description": "Invoice not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVOICE_NOT_FOUND",
                    "message": "Invoice with ID 0a6f3c1e-2b8e-4a7d-9b0d-2f8c1f1e2d3c not found"
                }
            }
        }
    }
}

INSUFFICIENT_STOCK_RESPONSE = {
    "description": "Not enough stock for an item",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INSUFFICIENT_STOCK",
                    "message": "Insufficient stock for Paracetamol 500mg. Available: 10, Required: 15",
                    "reason": "available=10, requested=15"
                }
            }
        }
    }
}


def _command_fields(request: InvoiceRequestSchema) -> dict:
    data = request.model_dump(exclude={"items"})
    data["items"] = [InvoiceItemCommandDTO(**item.model_dump()) for item in request.items]
    return data


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Invalid totals (e.g. discount larger than the line amount)",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Invoice total cannot be negative"
                        }
                    }
                }
            }
        },
        404: {
            "description": "Product not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PRODUCT_NOT_FOUND",
                            "message": "Product not found: 5f0c1c4e-8d7a-4f39-9d43-3f0e2b8f1a11"
                        }
                    }
                }
            }
        },
        409: INSUFFICIENT_STOCK_RESPONSE,
    }
)
async def create_invoice(
    request: InvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Create an invoice and reserve stock for its items.

    Cash, card, UPI and netbanking invoices are marked paid in full unless
    `paid_amount` is given.

    **Returns:**
    - 201: Invoice created
    - 400: Invalid totals
    - 404: Unknown product
    - 409: Insufficient stock (nothing is reserved)
    """
    # Create repositories and services
    uow = SqlAlchemyUnitOfWork(session)
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    invoice_item_repo = SqlAlchemyInvoiceItemRepository(session)
    stock_ledger = StockLedger(SqlAlchemyProductRepository(session))
    number_generator = InvoiceNumberGenerator(
        invoice_repo,
        prefix=ApplicationConfig.INVOICE_NUMBER_PREFIX,
        width=ApplicationConfig.INVOICE_NUMBER_WIDTH,
    )

    # Execute use case
    use_case = CreateInvoice(uow, invoice_repo, invoice_item_repo, stock_ledger, number_generator)
    result = await use_case.execute(CreateInvoiceCommandDTO(**_command_fields(request)))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "",
    response_model=InvoiceListResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    customer_id: Optional[str] = Query(default=None),
    payment_status: Optional[PaymentStatus] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    search: Optional[str] = Query(default=None, description="Invoice number or customer name"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_session)
):
    """
    List invoices, newest first.

    **Query parameters:**
    - `customer_id`, `payment_status`: exact filters
    - `start_date` + `end_date`: invoice date range (both required to apply)
    - `search`: matches invoice number or customer name
    - `page`, `limit`: pagination
    """
    query = ListInvoicesQueryDTO(
        customer_id=customer_id,
        payment_status=payment_status,
        start_date=start_date,
        end_date=end_date,
        search=search,
        page=page,
        limit=limit,
    )
    result = await ListInvoices(SqlAlchemyInvoiceRepository(session)).execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/stats/summary",
    response_model=InvoiceSummaryDTO,
    status_code=status.HTTP_200_OK,
)
async def get_invoice_summary(
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    session: AsyncSession = Depends(get_session)
):
    """
    Invoice counts per status, revenue and payment rate.

    Revenue and the average only include active invoices. The date range
    applies when both `start_date` and `end_date` are given.
    """
    query = InvoiceStatsQueryDTO(start_date=start_date, end_date=end_date)
    result = await GetInvoiceSummary(SqlAlchemyInvoiceRepository(session)).execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/stats/recent",
    response_model=List[InvoiceResponseDTO],
    status_code=status.HTTP_200_OK,
)
async def list_recent_invoices(
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_session)
):
    """Newest invoices first, without items."""
    result = await ListRecentInvoices(SqlAlchemyInvoiceRepository(session)).execute(limit=limit)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/stats/top-products",
    response_model=List[TopProductDTO],
    status_code=status.HTTP_200_OK,
)
async def list_top_products(
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_session)
):
    """Best selling products by units sold on active invoices."""
    query = InvoiceStatsQueryDTO(start_date=start_date, end_date=end_date, limit=limit)
    result = await ListTopProducts(SqlAlchemyInvoiceItemRepository(session)).execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE}
)
async def get_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Get one invoice with its items."""
    use_case = GetInvoice(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceItemRepository(session),
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: NOT_FOUND_RESPONSE,
        409: {
            "description": "Invoice is paid (or cancelled with reactivation disabled), or stock is insufficient",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_IMMUTABLE",
                            "message": "Cannot edit paid invoices. Please cancel the invoice first."
                        }
                    }
                }
            }
        }
    }
)
async def update_invoice(
    invoice_id: str,
    request: InvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Replace the header and items of an unpaid invoice.

    Stock held by the current items is released and the new items are
    reserved. Editing a cancelled invoice reactivates it.

    **Returns:**
    - 200: Invoice updated
    - 404: Invoice or product not found
    - 409: Invoice is paid, or insufficient stock
    """
    uow = SqlAlchemyUnitOfWork(session)
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    invoice_item_repo = SqlAlchemyInvoiceItemRepository(session)
    stock_ledger = StockLedger(SqlAlchemyProductRepository(session))

    use_case = UpdateInvoice(
        uow,
        invoice_repo,
        invoice_item_repo,
        stock_ledger,
        reactivate_cancelled=ApplicationConfig.REACTIVATE_CANCELLED_ON_EDIT,
    )
    result = await use_case.execute(
        UpdateInvoiceCommandDTO(invoice_id=invoice_id, **_command_fields(request))
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete(
    "/{invoice_id}",
    response_model=DeletedInvoiceDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: NOT_FOUND_RESPONSE,
        409: {
            "description": "Invoice is paid",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_IMMUTABLE",
                            "message": "Cannot delete paid invoices. Please cancel the invoice instead."
                        }
                    }
                }
            }
        }
    }
)
async def delete_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Delete an unpaid invoice and its items.

    Stock still held by the invoice is returned first. A cancelled invoice
    already gave its stock back, so nothing more is released.
    """
    use_case = DeleteInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceItemRepository(session),
        StockLedger(SqlAlchemyProductRepository(session)),
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{invoice_id}/cancel",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE}
)
async def cancel_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Cancel an invoice and return its stock.

    Cancelling an already cancelled invoice returns it unchanged.
    """
    use_case = CancelInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceItemRepository(session),
        StockLedger(SqlAlchemyProductRepository(session)),
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch(
    "/{invoice_id}/status",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE}
)
async def update_invoice_status(
    invoice_id: str,
    request: InvoiceStatusRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Overwrite payment status and optionally the paid amount.

    No stock is moved; use `POST /invoices/{invoice_id}/cancel` to cancel.
    """
    use_case = UpdateInvoiceStatus(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceItemRepository(session),
    )
    result = await use_case.execute(
        UpdateInvoiceStatusCommandDTO(
            invoice_id=invoice_id,
            payment_status=request.payment_status,
            paid_amount=request.paid_amount,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{invoice_id}/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        404: NOT_FOUND_RESPONSE,
    }
)
async def download_invoice_pdf(
    invoice_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Download the invoice as a PDF file."""
    use_case = GenerateInvoicePdf(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceItemRepository(session),
        ReportLabPdfService(),
        company_name=ApplicationConfig.COMPANY_NAME,
        company_address=ApplicationConfig.COMPANY_ADDRESS,
        currency_symbol=ApplicationConfig.CURRENCY_SYMBOL,
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise ClientError(result.error)

    return Response(
        content=result.value.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename={result.value.filename}"
        }
    )
