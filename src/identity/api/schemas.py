"""Pydantic request/response schemas for the admin session API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "owner@baebeboo.com",
                    "password": "correct horse battery staple",
                }
            ]
        }
    }

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=256)


class OkResponse(BaseModel):
    ok: bool = True


class SessionResponse(BaseModel):
    authenticated: bool
    email: str | None = None
