import hashlib
import hmac

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.signing import sign_payload, signature_matches

BODY = b'{"event":"charge.success","data":{"reference":"T1"}}'


def test_signature_is_hex_hmac_sha512_of_the_raw_bytes():
    expected = hmac.new(b"sk_live_x", BODY, hashlib.sha512).hexdigest()
    assert sign_payload("sk_live_x", BODY) == expected


def test_matching_signature():
    assert signature_matches("sk", BODY, sign_payload("sk", BODY))


def test_uppercase_hex_is_accepted():
    assert signature_matches("sk", BODY, sign_payload("sk", BODY).upper())


def test_reserialized_body_does_not_match():
    reserialized = b'{"event": "charge.success", "data": {"reference": "T1"}}'
    assert not signature_matches("sk", reserialized, sign_payload("sk", BODY))


def test_missing_secret_or_signature_never_matches():
    assert not signature_matches("", BODY, sign_payload("", BODY))
    assert not signature_matches("sk", BODY, None)
    assert not signature_matches("sk", BODY, "")


def test_non_ascii_signature_is_rejected():
    assert not signature_matches("sk", BODY, "é" * 128)


def test_fake_gateway_verifies_what_it_signs():
    gateway = FakeGateway()
    assert gateway.verify_webhook_signature(BODY, gateway.sign(BODY))
    assert not gateway.verify_webhook_signature(BODY + b" ", gateway.sign(BODY))
