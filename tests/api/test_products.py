"""Tests for /api/products routes."""

from uuid import uuid4

from core.exceptions import ConflictError, NotFoundError


class TestListProducts:

    def test_includes_weight_label(self, client, product_service, product):
        product_service.list_all.return_value = [product]

        response = client.get("/api/products")

        data = response.json()["data"][0]
        assert data["sku"] == "SVAB12"
        assert data["price"] == "100.00"
        assert data["weight_label"] == "500g"


class TestCreateProduct:

    def test_created_without_sku(self, client, product_service, product):
        product_service.create.return_value = product

        response = client.post("/api/products", json={"name": "Product A", "price": "100", "weight": "500"})

        assert response.status_code == 201
        assert product_service.create.call_args[0][0].sku is None

    def test_duplicate_sku_409(self, client, product_service):
        product_service.create.side_effect = ConflictError("SKU SVAB12 already exists")

        response = client.post("/api/products", json={"name": "A", "sku": "SVAB12", "price": "1"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    def test_negative_price_422(self, client, product_service):
        response = client.post("/api/products", json={"name": "A", "price": "-1"})

        assert response.status_code == 422
        product_service.create.assert_not_called()


class TestGetProduct:

    def test_get_by_id_route(self, client, product_service, product):
        product_service.require.return_value = product

        response = client.get(f"/api/products/getById/{product.id}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == str(product.id)

    def test_not_found(self, client, product_service):
        product_service.require.side_effect = NotFoundError("Product", "x")

        assert client.get(f"/api/products/getById/{uuid4()}").status_code == 404


class TestReplaceAndDelete:

    def test_replace(self, client, product_service, product):
        product_service.replace.return_value = product

        response = client.put(f"/api/products/{product.id}", json={"name": "Product A", "price": "100"})

        assert response.status_code == 200

    def test_delete_missing_404(self, client, product_service):
        product_service.delete.return_value = False

        assert client.delete(f"/api/products/{uuid4()}").status_code == 404

    def test_delete(self, client, product_service):
        product_service.delete.return_value = True

        assert client.delete(f"/api/products/{uuid4()}").json()["data"]["deleted"] is True
