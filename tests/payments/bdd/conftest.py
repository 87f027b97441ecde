"""Shared BDD fixtures and step definitions for the Payments domain."""

import pytest
from payments.payment.payment import Payment
from protean import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def outcome():
    """Container for the last confirmation outcome or the error it raised."""
    return {"result": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the product "{product_id}" with {stock:d} in stock'))
def product_in_stock(make_product, product_id, stock):
    make_product(product_id, stock=stock)


@given("image storage is failing")
def image_storage_failing(object_store):
    object_store.configure(should_fail_remove=True)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the product "{product_id}" has {stock:d} in stock'))
def product_has_stock(catalog_store, product_id, stock):
    assert catalog_store.get_product(product_id).stock == stock


@then(parsers.cfparse('the product "{product_id}" is no longer in the catalogue'))
def product_removed(catalog_store, product_id):
    assert catalog_store.get_product(product_id) is None


@then(parsers.cfparse('payment "{reference}" is recorded as "{status}"'))
def payment_recorded(reference, status):
    payment = current_domain.repository_for(Payment).get(reference)
    assert payment.status == status
