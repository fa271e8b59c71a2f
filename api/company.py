"""Company routes: /api/company."""

from uuid import UUID

from fastapi import APIRouter, Request

from api.base import success_response
from core.exceptions import NotFoundError
from core.models import CompanyUpdate
from core.services.company_service import CompanyService


def create_company_router(company_service: CompanyService) -> APIRouter:
    router = APIRouter(prefix="/company", tags=["company"])

    @router.get("")
    async def get_company():
        company = company_service.get()
        if company is None:
            raise NotFoundError("Company", "record")
        return success_response(company.model_dump(mode="json")).model_dump(mode="json")

    @router.put("/{company_id}")
    async def update_company(request: Request, company_id: UUID, body: CompanyUpdate):
        # A session may only edit the company it belongs to
        if company_id != request.state.company_id:
            raise NotFoundError("Company", company_id)
        company = company_service.update(company_id, body)
        return success_response(company.model_dump(mode="json")).model_dump(mode="json")

    return router
