"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictBool

# --- Storefront Response Schemas ---


class StorefrontProductResponse(BaseModel):
    id: str
    name: str
    slug: str | None = None
    category: str
    price_ghs: float
    stock: int
    image_url: str


class CategoryResponse(BaseModel):
    value: str
    label: str


# --- Admin Request Schemas ---


class UpdateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "price_ghs": 149.0,
                    "stock": 4,
                    "is_active": True,
                }
            ]
        }
    }

    name: str | None = Field(None, max_length=255)
    slug: str | None = Field(None, max_length=200)
    category: str | None = None
    price_ghs: float | None = None
    stock: int | None = None
    is_active: StrictBool | None = None


class PurchaseItemRequest(BaseModel):
    product_id: str | None = None
    qty: int | None = 1


class SettleInventoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "3f6c1a9e-2d4b-4e8f-9a71-5c0b7d2e8f14", "qty": 2}],
                    "reference": "T482915037561",
                }
            ]
        }
    }

    items: list[PurchaseItemRequest] | None = None
    reference: str | None = Field(None, max_length=100)


# --- Admin Response Schemas ---


class AdminProductResponse(BaseModel):
    id: str
    name: str
    slug: str | None = None
    description: str | None = None
    category: str
    price_ghs: float
    stock: int
    is_active: bool
    image_path: str | None = None
    image_url: str
    created_at: str | None = None


class DeletionResponse(BaseModel):
    ok: bool = True
    deleted: int = 0
    duplicate: bool | None = None
    warning: str | None = None
    storage_error: str | None = None
