"""Invoice routes: /api/invoices."""

from uuid import UUID

from fastapi import APIRouter, Query

from api.base import deleted_response, list_response, success_response
from core.exceptions import NotFoundError
from core.models import InvoiceCreate, PaymentStatusUpdate
from core.services.invoice_service import InvoiceService


def create_invoices_router(invoice_service: InvoiceService) -> APIRouter:
    router = APIRouter(prefix="/invoices", tags=["invoices"])

    @router.get("")
    async def list_invoices(limit: int | None = Query(None, ge=1, le=1000)):
        invoices = invoice_service.list_all(limit)
        return list_response(invoices).model_dump(mode="json")

    @router.post("", status_code=201)
    async def create_invoice(body: InvoiceCreate):
        invoice = invoice_service.create(body)
        return success_response(invoice.model_dump(mode="json")).model_dump(mode="json")

    # Registered before /{invoice_id} so "party" is not parsed as an id
    @router.get("/party/{party_id}")
    async def list_party_invoices(party_id: UUID):
        invoices = invoice_service.list_for_party(party_id)
        return list_response(invoices).model_dump(mode="json")

    @router.get("/{invoice_id}")
    async def get_invoice(invoice_id: UUID):
        invoice = invoice_service.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice", invoice_id)
        return success_response(invoice.model_dump(mode="json")).model_dump(mode="json")

    @router.get("/{invoice_id}/history")
    async def get_invoice_history(invoice_id: UUID):
        history = invoice_service.get_history(invoice_id)
        return success_response(history, count=len(history)).model_dump(mode="json")

    @router.put("/{invoice_id}/payment")
    async def update_payment_status(invoice_id: UUID, body: PaymentStatusUpdate):
        invoice = invoice_service.update_payment_status(invoice_id, body.payment_status)
        return success_response(invoice.model_dump(mode="json")).model_dump(mode="json")

    @router.delete("/{invoice_id}")
    async def delete_invoice(invoice_id: UUID):
        if not invoice_service.delete(invoice_id):
            raise NotFoundError("Invoice", invoice_id)
        return deleted_response(invoice_id).model_dump(mode="json")

    return router
