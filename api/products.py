"""Product routes: /api/products."""

from uuid import UUID

from fastapi import APIRouter

from api.base import deleted_response, success_response
from core.exceptions import NotFoundError
from core.models import Product, ProductCreate, ProductReplace
from core.services.product_service import ProductService


def _product_data(product: Product) -> dict:
    data = product.model_dump(mode="json")
    data["weight_label"] = product.weight_label
    return data


def create_products_router(product_service: ProductService) -> APIRouter:
    router = APIRouter(prefix="/products", tags=["products"])

    @router.get("")
    async def list_products():
        products = product_service.list_all()
        return success_response(
            [_product_data(p) for p in products], count=len(products)
        ).model_dump(mode="json")

    @router.post("", status_code=201)
    async def create_product(body: ProductCreate):
        product = product_service.create(body)
        return success_response(_product_data(product)).model_dump(mode="json")

    @router.get("/getById/{product_id}")
    async def get_product(product_id: UUID):
        product = product_service.require(product_id)
        return success_response(_product_data(product)).model_dump(mode="json")

    @router.put("/{product_id}")
    async def replace_product(product_id: UUID, body: ProductReplace):
        product = product_service.replace(product_id, body)
        return success_response(_product_data(product)).model_dump(mode="json")

    @router.delete("/{product_id}")
    async def delete_product(product_id: UUID):
        if not product_service.delete(product_id):
            raise NotFoundError("Product", product_id)
        return deleted_response(product_id).model_dump(mode="json")

    return router
