import time

import pytest
from identity.admin.session import check_credentials, issue_session_token, verify_session_token
from shared.config import reset_settings
from shared.exceptions import AuthenticationError, ConfigurationError

ADMIN_EMAIL = "owner@baebeboo.test"
ADMIN_PASSWORD = "s3cret-pass"


class TestSessionTokens:
    def test_round_trip(self):
        token = issue_session_token(ADMIN_EMAIL)
        assert verify_session_token(token) == ADMIN_EMAIL

    def test_expired_token(self):
        issued_at = time.time() - 28_801
        token = issue_session_token(ADMIN_EMAIL, now=issued_at)

        with pytest.raises(AuthenticationError) as exc:
            verify_session_token(token)
        assert exc.value.message == "Session expired"

    @pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c", "eyJzdWIiOiJ4In0.deadbeef", "é.é"])
    def test_malformed_tokens(self, token):
        with pytest.raises(AuthenticationError):
            verify_session_token(token)

    def test_tampered_payload(self):
        token = issue_session_token(ADMIN_EMAIL)
        _, signature = token.split(".")
        forged = issue_session_token("intruder@example.com").split(".")[0]

        with pytest.raises(AuthenticationError):
            verify_session_token(f"{forged}.{signature}")

    def test_token_signed_with_another_secret(self, monkeypatch):
        token = issue_session_token(ADMIN_EMAIL)
        monkeypatch.setenv("ADMIN_SESSION_SECRET", "rotated-secret")
        reset_settings()

        with pytest.raises(AuthenticationError):
            verify_session_token(token)

    def test_missing_secret(self, monkeypatch):
        monkeypatch.delenv("ADMIN_SESSION_SECRET")
        reset_settings()

        with pytest.raises(ConfigurationError):
            issue_session_token(ADMIN_EMAIL)


class TestCheckCredentials:
    def test_valid_credentials_are_case_insensitive_on_email(self):
        assert check_credentials(f"  {ADMIN_EMAIL.upper()} ", ADMIN_PASSWORD) == ADMIN_EMAIL

    @pytest.mark.parametrize("email, password", [(ADMIN_EMAIL, "wrong"), ("other@example.com", ADMIN_PASSWORD), ("", "")])
    def test_invalid_credentials(self, email, password):
        with pytest.raises(AuthenticationError) as exc:
            check_credentials(email, password)
        assert exc.value.message == "Invalid credentials"

    def test_unconfigured_admin(self, monkeypatch):
        monkeypatch.delenv("ADMIN_PASSWORD")
        reset_settings()

        with pytest.raises(ConfigurationError):
            check_credentials(ADMIN_EMAIL, ADMIN_PASSWORD)
