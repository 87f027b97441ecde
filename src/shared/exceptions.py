"""Storefront error taxonomy and its HTTP mapping.

Input problems are raised as protean's ValidationError, like everywhere else
in the domain code. The errors below cover the remaining failure classes of
the checkout and fulfillment flow.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class StorefrontError(Exception):
    """Base class for storefront errors.

    Carries a `messages` dict in the same shape as protean's ValidationError.
    """

    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details
        self.messages = {"_entity": [message]}

    def __str__(self) -> str:
        return self.message


class AuthenticationError(StorefrontError):
    """Webhook signature mismatch or a missing/invalid admin session."""

    status_code = 401


class GatewayError(StorefrontError):
    """The payment provider rejected a request or answered with garbage."""

    status_code = 502


class MalformedEventError(StorefrontError):
    """A payment event does not carry the expected shape."""

    status_code = 400


class SettlementError(StorefrontError):
    """The atomic stock decrement failed; nothing was committed."""

    status_code = 500


class ProductNotFoundError(StorefrontError):
    status_code = 404


class ConfigurationError(StorefrontError):
    """A required secret or setting is missing."""

    status_code = 500


def _first_message(messages: dict) -> str:
    for field, errors in messages.items():
        if errors:
            text = errors[0] if isinstance(errors, list | tuple) else str(errors)
            return text if field == "_entity" else f"{field}: {text}"
    return "Invalid request"


async def _storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    content = {"error": exc.message}
    if exc.details:
        content.update(exc.details)
    if exc.status_code >= 500:
        logger.error("request.failed", path=request.url.path, error=exc.message, kind=type(exc).__name__)
    return JSONResponse(status_code=exc.status_code, content=content)


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": _first_message(exc.messages), "messages": exc.messages},
    )


async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Not found"})


def register_error_handlers(app: FastAPI) -> None:
    """Map storefront and protean errors to JSON responses of shape {"error": ...}."""
    app.add_exception_handler(StorefrontError, _storefront_error_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
