"""FastAPI endpoints for admin sessions."""

import structlog
from fastapi import APIRouter, Depends, Response

from identity.admin.session import (
    SESSION_COOKIE,
    check_credentials,
    issue_session_token,
    require_admin,
)
from identity.api.schemas import LoginRequest, OkResponse, SessionResponse
from shared.config import get_settings

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=OkResponse)
async def login(body: LoginRequest, response: Response) -> OkResponse:
    email = check_credentials(body.email, body.password)
    settings = get_settings()
    response.set_cookie(
        SESSION_COOKIE,
        issue_session_token(email),
        max_age=settings.admin_session_ttl,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
    )
    logger.info("admin.logged_in")
    return OkResponse()


@router.post("/logout", response_model=OkResponse)
async def logout(response: Response) -> OkResponse:
    response.delete_cookie(SESSION_COOKIE, path="/")
    return OkResponse()


@router.get("/session", response_model=SessionResponse)
async def session(email: str = Depends(require_admin)) -> SessionResponse:
    return SessionResponse(authenticated=True, email=email)
