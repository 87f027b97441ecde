"""PaystackGateway against a mocked httpx transport."""

import json

import httpx
from payments.gateway.paystack_adapter import PaystackGateway
from payments.gateway.signing import sign_payload

METADATA = {"phone": "+233551234567", "items": [{"product_id": "p1", "qty": 1}], "source": "baebe-boo-storefront"}


def _gateway(handler):
    return PaystackGateway("sk_test_123", "https://api.paystack.test/", transport=httpx.MockTransport(handler))


def _initialize(gateway, callback_url="https://shop.test/payment/success"):
    return gateway.initialize_transaction(
        email="ama@example.com",
        amount=5000,
        currency="GHS",
        channels=["mobile_money"],
        metadata=METADATA,
        callback_url=callback_url,
    )


def test_successful_initialize_sends_the_expected_request():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "status": True,
                "message": "Authorization URL created",
                "data": {"authorization_url": "https://checkout.paystack.com/abc", "access_code": "abc", "reference": "T1"},
            },
        )

    result = _initialize(_gateway(handler))

    assert result.success
    assert result.authorization_url == "https://checkout.paystack.com/abc"
    assert result.reference == "T1"
    assert result.access_code == "abc"
    assert seen["url"] == "https://api.paystack.test/transaction/initialize"
    assert seen["auth"] == "Bearer sk_test_123"
    assert seen["body"] == {
        "email": "ama@example.com",
        "amount": 5000,
        "currency": "GHS",
        "channels": ["mobile_money"],
        "metadata": METADATA,
        "callback_url": "https://shop.test/payment/success",
    }


def test_callback_url_is_omitted_when_unknown():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": True, "data": {"authorization_url": "https://x", "reference": "T2"}})

    _initialize(_gateway(handler), callback_url=None)

    assert "callback_url" not in seen["body"]


def test_provider_error_message_is_surfaced():
    def handler(request):
        return httpx.Response(400, json={"status": False, "message": "Invalid key"})

    result = _initialize(_gateway(handler))

    assert not result.success
    assert result.message == "Invalid key"
    assert result.details == {"status": False, "message": "Invalid key"}


def test_missing_authorization_url_is_a_failure():
    def handler(request):
        return httpx.Response(200, json={"status": True, "data": {"reference": "T3"}})

    result = _initialize(_gateway(handler))

    assert not result.success
    assert result.message == "Paystack initialize failed"


def test_non_json_response_is_a_failure():
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    result = _initialize(_gateway(handler))

    assert not result.success
    assert result.details == {"status_code": 502}


def test_transport_error_is_a_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused")

    result = _initialize(_gateway(handler))

    assert not result.success
    assert result.message == "Payment provider unreachable"


def test_webhook_signature_uses_the_secret_key():
    body = b'{"event":"charge.success"}'
    gateway = PaystackGateway("sk_test_123")

    assert gateway.verify_webhook_signature(body, sign_payload("sk_test_123", body))
    assert not gateway.verify_webhook_signature(body, sign_payload("another", body))
