import pytest
from catalogue.product.admin import (
    ImageUpload,
    delete_product,
    list_all_products,
    update_product,
    upload_product,
)
from catalogue.store.port import CatalogStoreError
from protean.exceptions import ValidationError
from shared.exceptions import ProductNotFoundError, StorefrontError

JPEG = ImageUpload(filename="Dress.JPG", data=b"\xff\xd8jpeg", content_type="image/jpeg")


class TestImageUpload:
    @pytest.mark.parametrize(
        "filename, extension",
        [("dress.png", "png"), ("Dress.JPG", "jpg"), ("no-extension", "jpg"), ("weird.j p", "jpg")],
    )
    def test_extension(self, filename, extension):
        assert ImageUpload(filename=filename, data=b"x").extension == extension


class TestUploadProduct:
    def test_uploads_image_then_inserts_row(self, catalog_store, object_store):
        product = upload_product(name=" Party dress ", category="girl_dresses", price_ghs="120", stock="3", image=JPEG)

        assert product["name"] == "Party dress"
        assert product["slug"] == "party-dress"
        assert product["price_ghs"] == 120.0
        assert product["image_path"] == f"products/{product['id']}.jpg"
        assert product["image_url"].endswith(f"/product-images/products/{product['id']}.jpg")
        assert product["image_path"] in object_store.objects
        assert catalog_store.get_product(product["id"]).stock == 3

    def test_image_is_required(self, catalog_store, object_store):
        with pytest.raises(ValidationError) as exc:
            upload_product(name="Dress", category="girl_dresses", price_ghs=1, stock=1, image=None)
        assert exc.value.messages == {"file": ["Missing file"]}

    def test_invalid_fields_fail_before_upload(self, catalog_store, object_store):
        with pytest.raises(ValidationError):
            upload_product(name="Dress", category="hats", price_ghs=1, stock=1, image=JPEG)
        assert object_store.objects == {}

    def test_failed_insert_removes_the_uploaded_image(self, catalog_store, object_store, monkeypatch):
        def fail(product):
            raise CatalogStoreError("insert failed")

        monkeypatch.setattr(catalog_store, "add_product", fail)

        with pytest.raises(StorefrontError):
            upload_product(name="Dress", category="girl_dresses", price_ghs=1, stock=1, image=JPEG)
        assert object_store.objects == {}


class TestUpdateProduct:
    def test_updates_selected_fields(self, make_product):
        make_product("p1", stock=2)

        product = update_product("p1", {"price_ghs": "75.5", "stock": 9, "is_active": False})

        assert product["price_ghs"] == 75.5
        assert product["stock"] == 9
        assert product["is_active"] is False

    def test_empty_patch(self, make_product):
        make_product("p1", stock=2)
        with pytest.raises(ValidationError):
            update_product("p1", {})

    def test_is_active_must_be_boolean(self, make_product):
        make_product("p1", stock=2)
        with pytest.raises(ValidationError):
            update_product("p1", {"is_active": "yes"})

    @pytest.mark.parametrize("field", ["stock", "price_ghs", "category"])
    def test_explicit_null_is_rejected_and_row_kept(self, make_product, catalog_store, field):
        make_product("p1", stock=7, price_ghs="80.00")

        with pytest.raises(ValidationError) as exc:
            update_product("p1", {field: None})

        assert field in exc.value.messages
        product = catalog_store.get_product("p1")
        assert product.stock == 7
        assert str(product.price_ghs) == "80.00"
        assert product.category == "clothes"

    def test_unknown_product(self, catalog_store):
        with pytest.raises(ProductNotFoundError):
            update_product("ghost", {"stock": 1})


class TestDeleteProduct:
    def test_deletes_row_and_image(self, make_product, catalog_store, object_store):
        make_product("p1", stock=2)

        assert delete_product("p1") == {"ok": True, "deleted": 1}
        assert catalog_store.get_product("p1") is None
        assert object_store.objects == {}

    def test_image_failure_is_reported_as_warning(self, make_product, catalog_store, object_store):
        make_product("p1", stock=2)
        object_store.configure(should_fail_remove=True)

        result = delete_product("p1")

        assert result["deleted"] == 1
        assert result["warning"] == "Product deleted but image removal failed"
        assert result["storage_error"] == "Storage unavailable"
        assert catalog_store.get_product("p1") is None

    def test_unknown_product(self, catalog_store):
        with pytest.raises(ProductNotFoundError):
            delete_product("ghost")


def test_admin_listing_includes_hidden_and_sold_out(make_product):
    make_product("p1", stock=0)
    make_product("p2", stock=3, is_active=False)
    make_product("p3", stock=3)

    assert {p["id"] for p in list_all_products()} == {"p1", "p2", "p3"}
