"""FastAPI routes for the Payments domain: checkout, webhook and reporting."""

import json

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from protean.utils.globals import current_domain

from identity.admin.session import require_admin
from payments.api.schemas import (
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    InitializeCheckoutRequest,
    InitializeCheckoutResponse,
    PaymentsReportResponse,
    PurchasersResponse,
    WebhookAckResponse,
)
from payments.checkout.initiation import InitiateCheckout
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.payment.confirmation import handle_payment_event
from payments.payment.reporting import monthly_totals, purchasers, recent_payments
from shared.config import get_settings

# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/initialize", response_model=InitializeCheckoutResponse)
async def initialize_checkout(body: InitializeCheckoutRequest) -> InitializeCheckoutResponse:
    """Open a payment session and return the URL the buyer must be sent to."""
    items = [item.model_dump() for item in body.items] if body.items else []
    command = InitiateCheckout(
        email=body.email,
        phone=body.phone,
        items=json.dumps(items),
    )
    result = current_domain.process(command, asynchronous=False)
    return InitializeCheckoutResponse(**result)


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/webhook", response_model=WebhookAckResponse, response_model_exclude_none=True)
async def payment_webhook(
    request: Request,
    x_paystack_signature: str | None = Header(default=None),
) -> dict:
    """Gateway callback. The signature is checked against the body exactly as received."""
    raw_body = await request.body()
    outcome = handle_payment_event(raw_body, x_paystack_signature)
    return outcome.to_dict()


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure FakeGateway behavior (development and test only)."""
    if get_settings().is_production:
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )


# ---------------------------------------------------------------------------
# Admin Reporting Router
# ---------------------------------------------------------------------------
report_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@report_router.get("/payments", response_model=PaymentsReportResponse)
async def payments_report() -> PaymentsReportResponse:
    return PaymentsReportResponse(payments=recent_payments(), monthly_totals=monthly_totals())


@report_router.get("/purchasers", response_model=PurchasersResponse)
async def purchasers_report() -> PurchasersResponse:
    return PurchasersResponse(purchasers=purchasers())
