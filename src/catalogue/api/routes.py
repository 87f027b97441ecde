"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from catalogue.api.schemas import (
    AdminProductResponse,
    CategoryResponse,
    DeletionResponse,
    SettleInventoryRequest,
    StorefrontProductResponse,
    UpdateProductRequest,
)
from catalogue.inventory.settlement import settle_inventory
from catalogue.product.admin import (
    ImageUpload,
    delete_product,
    list_all_products,
    update_product,
    upload_product,
)
from catalogue.product.listing import get_listed_product, list_category
from catalogue.store.port import Category
from identity.admin.session import require_admin
from shared.exceptions import ProductNotFoundError

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# --- Storefront endpoints ---


@product_router.get("", response_model=list[StorefrontProductResponse])
async def list_products(category: str | None = None, limit: int | None = None) -> list[dict]:
    return list_category(category, limit=limit)


@product_router.get("/{product_id}", response_model=StorefrontProductResponse)
async def get_product(product_id: str) -> dict:
    product = get_listed_product(product_id)
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")
    return product


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    return [CategoryResponse(value=c.value, label=c.label) for c in Category]


# --- Admin endpoints ---


@admin_router.get("/products", response_model=list[AdminProductResponse])
async def admin_list_products() -> list[dict]:
    return list_all_products()


@admin_router.post("/products", status_code=201, response_model=AdminProductResponse)
async def admin_upload_product(
    name: str = Form(""),
    category: str = Form(""),
    price_ghs: str = Form("0"),
    stock: str = Form("0"),
    slug: str | None = Form(None),
    description: str | None = Form(None),
    file: UploadFile | None = File(None),
) -> dict:
    image = None
    if file is not None:
        image = ImageUpload(
            filename=file.filename or "",
            data=await file.read(),
            content_type=file.content_type,
        )
    return upload_product(
        name=name,
        category=category,
        price_ghs=price_ghs,
        stock=stock,
        image=image,
        slug=slug,
        description=description,
    )


@admin_router.patch("/products/{product_id}", response_model=AdminProductResponse)
async def admin_update_product(product_id: str, body: UpdateProductRequest) -> dict:
    return update_product(product_id, body.model_dump(exclude_unset=True))


@admin_router.delete("/products/{product_id}", response_model=DeletionResponse, response_model_exclude_none=True)
async def admin_delete_product(product_id: str) -> dict:
    return delete_product(product_id)


@admin_router.post("/inventory/settle", response_model=DeletionResponse, response_model_exclude_none=True)
async def admin_settle_inventory(body: SettleInventoryRequest) -> dict:
    items = [item.model_dump() for item in body.items] if body.items else None
    return settle_inventory(items, reference=body.reference).to_dict()
