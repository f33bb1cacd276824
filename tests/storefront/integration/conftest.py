import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import cart_router, order_router, product_router, register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def create_product(client):
    def _create(**overrides):
        body = {
            "name": "Desk Lamp",
            "image": "/images/lamp.jpg",
            "description": "Adjustable LED desk lamp",
            "brand": "Lumen",
            "category": "Home & Garden",
            "price": 42.5,
            "count_in_stock": 5,
        }
        body.update(overrides)
        response = client.post("/products", json=body)
        assert response.status_code == 201
        return response.json()["product_id"]

    return _create
