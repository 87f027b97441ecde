"""Admin sessions: signed, expiring tokens carried in a cookie.

Token layout: ``<base64url(json payload)>.<hex hmac-sha256 of that segment>``
with payload ``{"sub": <admin email>, "exp": <unix seconds>}``.
"""

import base64
import hashlib
import hmac
import json
import time

import structlog
from fastapi import Request

from shared.config import get_settings
from shared.exceptions import AuthenticationError, ConfigurationError

logger = structlog.get_logger(__name__)

SESSION_COOKIE = "bb_admin"


def _secret() -> bytes:
    secret = get_settings().admin_session_secret
    if not secret:
        raise ConfigurationError("ADMIN_SESSION_SECRET is not set in environment")
    return secret.encode("utf-8")


def _sign(segment: str) -> str:
    return hmac.new(_secret(), segment.encode("ascii"), hashlib.sha256).hexdigest()


def issue_session_token(subject: str, now: float | None = None) -> str:
    now = time.time() if now is None else now
    payload = {"sub": subject, "exp": int(now) + get_settings().admin_session_ttl}
    segment = base64.urlsafe_b64encode(json.dumps(payload, separators=(",", ":")).encode("utf-8")).decode("ascii")
    return f"{segment}.{_sign(segment)}"


def verify_session_token(token: str | None, now: float | None = None) -> str:
    """Return the session subject, or raise AuthenticationError."""
    if not token or token.count(".") != 1:
        raise AuthenticationError("Unauthorized")

    segment, signature = token.strip().split(".")
    try:
        expected = _sign(segment)
    except UnicodeEncodeError:
        raise AuthenticationError("Unauthorized") from None
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
        raise AuthenticationError("Unauthorized")

    try:
        payload = json.loads(base64.urlsafe_b64decode(segment.encode("ascii")))
        subject, expires_at = payload["sub"], int(payload["exp"])
    except (ValueError, KeyError, TypeError):
        raise AuthenticationError("Unauthorized") from None

    now = time.time() if now is None else now
    if expires_at <= now:
        raise AuthenticationError("Session expired")
    return subject


def check_credentials(email: str, password: str) -> str:
    """Compare login credentials with the configured admin account."""
    settings = get_settings()
    if not settings.admin_email or not settings.admin_password:
        raise ConfigurationError("Admin credentials are not configured")

    email_ok = hmac.compare_digest((email or "").strip().lower().encode(), settings.admin_email.lower().encode())
    password_ok = hmac.compare_digest((password or "").encode(), settings.admin_password.encode())
    if not (email_ok and password_ok):
        logger.warning("admin.login_rejected")
        raise AuthenticationError("Invalid credentials")
    return settings.admin_email


def require_admin(request: Request) -> str:
    """FastAPI dependency guarding admin endpoints."""
    return verify_session_token(request.cookies.get(SESSION_COOKIE))
