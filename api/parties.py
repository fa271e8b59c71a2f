"""Party routes: /api/parties."""

from uuid import UUID

from fastapi import APIRouter

from api.base import deleted_response, list_response, success_response
from core.exceptions import NotFoundError
from core.models import PartyCreate
from core.services.party_service import PartyService


def create_parties_router(party_service: PartyService) -> APIRouter:
    router = APIRouter(prefix="/parties", tags=["parties"])

    @router.get("")
    async def list_parties():
        parties = party_service.list_all()
        return list_response(parties).model_dump(mode="json")

    @router.post("", status_code=201)
    async def create_party(body: PartyCreate):
        party = party_service.create(body)
        return success_response(party.model_dump(mode="json")).model_dump(mode="json")

    @router.get("/{party_id}")
    async def get_party(party_id: UUID):
        party = party_service.require(party_id)
        return success_response(party.model_dump(mode="json")).model_dump(mode="json")

    @router.put("/{party_id}")
    async def replace_party(party_id: UUID, body: PartyCreate):
        party = party_service.replace(party_id, body)
        return success_response(party.model_dump(mode="json")).model_dump(mode="json")

    @router.delete("/{party_id}")
    async def delete_party(party_id: UUID):
        if not party_service.delete(party_id):
            raise NotFoundError("Party", party_id)
        return deleted_response(party_id).model_dump(mode="json")

    return router
