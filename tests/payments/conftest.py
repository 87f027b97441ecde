import json

import pytest


@pytest.fixture()
def signed_event(gateway):
    """Build a gateway callback body and the signature the gateway would send with it."""

    def _build(event_type="charge.success", reference="T100", items=None, amount=5000, **data):
        metadata = {"phone": "+233551234567", "source": "baebe-boo-storefront"}
        if items is not None:
            metadata["items"] = items
        payload = {
            "event": event_type,
            "data": {
                "reference": reference,
                "amount": amount,
                "currency": "GHS",
                "channel": "mobile_money",
                "paid_at": "2026-03-14T09:30:00.000Z",
                "customer": {"email": "ama@example.com"},
                "metadata": metadata,
                **data,
            },
        }
        raw_body = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return raw_body, gateway.sign(raw_body)

    return _build
