"""Integration tests for the public catalogue endpoints."""

import pytest
from catalogue.api import category_router, product_router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shared.exceptions import register_error_handlers


@pytest.fixture()
def client(catalog_store, object_store):
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(product_router)
    app.include_router(category_router)
    return TestClient(app)


class TestListProducts:
    def test_lists_one_category(self, client, make_product):
        make_product("p1", stock=3, category="girl_shoes", name="Glitter flats")
        make_product("p2", stock=3, category="shoes")

        response = client.get("/products", params={"category": "girl_shoes"})

        assert response.status_code == 200
        assert response.json() == [
            {
                "id": "p1",
                "name": "Glitter flats",
                "slug": None,
                "category": "girl_shoes",
                "price_ghs": 50.0,
                "stock": 3,
                "image_url": "https://cdn.baebeboo.test/storage/product-images/products/p1.jpg",
            }
        ]

    def test_unknown_category(self, client):
        response = client.get("/products", params={"category": "hats"})

        assert response.status_code == 400
        assert "Unknown category" in response.json()["error"]

    def test_missing_category(self, client):
        assert client.get("/products").status_code == 400


class TestGetProduct:
    def test_purchasable_product(self, client, make_product):
        make_product("p1", stock=1)
        assert client.get("/products/p1").json()["id"] == "p1"

    def test_sold_out_product_is_not_found(self, client, make_product):
        make_product("p1", stock=0)

        response = client.get("/products/p1")

        assert response.status_code == 404
        assert response.json() == {"error": "Product p1 not found"}


def test_categories(client):
    response = client.get("/categories")

    assert response.status_code == 200
    assert {"value": "clothes", "label": "Clothes (Boys)"} in response.json()
    assert len(response.json()) == 5
