import os
from pathlib import Path

import pytest

ADMIN_EMAIL = "owner@baebeboo.test"
ADMIN_PASSWORD = "s3cret-pass"

_TEST_ENV = {
    "ADMIN_EMAIL": ADMIN_EMAIL,
    "ADMIN_PASSWORD": ADMIN_PASSWORD,
    "ADMIN_SESSION_SECRET": "test-session-secret",
    "NEXT_PUBLIC_SITE_URL": "https://shop.baebeboo.test/",
    "MEDIA_BASE_URL": "https://cdn.baebeboo.test/storage",
    "LOG_DIR": "",
}

# Anything that would switch an adapter to a real backend
_UNSET_ENV = ("PAYSTACK_SECRET_KEY", "CATALOG_DATABASE_URI", "MEDIA_ROOT", "SITE_URL", "LOG_LEVEL")


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.update(_TEST_ENV)
    for name in _UNSET_ENV:
        os.environ.pop(name, None)

    from payments.domain import payments

    payments.init()
    payments.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


def _reset_adapters():
    from catalogue.media import reset_object_store
    from catalogue.store import reset_catalog_store
    from payments.gateway import reset_gateway
    from shared.config import reset_settings

    reset_settings()
    reset_gateway()
    reset_catalog_store()
    reset_object_store()


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    _reset_adapters()

    yield

    _reset_adapters()

    from protean import current_domain

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()


@pytest.fixture()
def catalog_store():
    """A fresh in-memory catalog store installed as the active one."""
    from catalogue.store import set_catalog_store
    from catalogue.store.memory_adapter import MemoryCatalogStore

    store = MemoryCatalogStore()
    set_catalog_store(store)
    return store


@pytest.fixture()
def object_store():
    """A fresh in-memory object store installed as the active one."""
    from catalogue.media import set_object_store
    from catalogue.media.memory_adapter import MemoryObjectStore

    store = MemoryObjectStore("https://cdn.baebeboo.test/storage", "product-images")
    set_object_store(store)
    return store


@pytest.fixture()
def gateway():
    """A fresh FakeGateway installed as the active one."""
    from payments.gateway import set_gateway
    from payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def make_product(catalog_store, object_store):
    """Add a product (and its image) to the active stores."""
    from decimal import Decimal

    from catalogue.store.port import ProductRecord

    def _make(product_id, stock, price_ghs="50.00", category="clothes", is_active=True, with_image=True, **kwargs):
        image_path = f"products/{product_id}.jpg" if with_image else None
        if image_path:
            object_store.upload(image_path, b"\xff\xd8fake-jpeg", "image/jpeg")
        product = ProductRecord(
            id=product_id,
            name=kwargs.pop("name", f"Product {product_id}"),
            category=category,
            price_ghs=Decimal(price_ghs),
            stock=stock,
            is_active=is_active,
            image_path=image_path,
            **kwargs,
        )
        return catalog_store.add_product(product)

    return _make
