"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CheckoutItemSchema(BaseModel):
    id: str | None = None
    name: str | None = None
    price_ghs: float | None = None
    qty: int | None = None


class InitializeCheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "ama@example.com",
                    "items": [{"id": "p1", "name": "Denim dungarees", "price_ghs": 50, "qty": 1}],
                    "phone": "055 123 4567",
                }
            ]
        }
    }

    # Optional so missing fields reach the handler and fail as one ValidationError
    email: str | None = Field(None, max_length=254)
    items: list[CheckoutItemSchema] | None = None
    phone: str | None = Field(None, max_length=50)


class InitializeCheckoutResponse(BaseModel):
    authorization_url: str
    reference: str | None = None


# ---------------------------------------------------------------------------
# Webhook
# ---------------------------------------------------------------------------
class WebhookAckResponse(BaseModel):
    ok: bool = True
    event: str | None = None
    reference: str | None = None
    settled: bool = False
    duplicate: bool | None = None
    deleted: int = 0
    warning: str | None = None


# ---------------------------------------------------------------------------
# Gateway configuration (development only)
# ---------------------------------------------------------------------------
class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Transaction could not be initialized"


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str


# ---------------------------------------------------------------------------
# Admin reporting
# ---------------------------------------------------------------------------
class PaymentRow(BaseModel):
    reference: str
    email: str | None = None
    phone: str | None = None
    amount: int
    amount_ghs: float
    currency: str
    channel: str | None = None
    status: str
    items: list[dict]
    deleted_products: int = 0
    settlement_warning: str | None = None
    paid_at: str | None = None


class MonthlyTotal(BaseModel):
    month: str
    amount_ghs: float
    payments: int


class PaymentsReportResponse(BaseModel):
    payments: list[PaymentRow]
    monthly_totals: list[MonthlyTotal]


class Purchaser(BaseModel):
    email: str
    phone: str | None = None
    orders: int
    amount_ghs: float
    last_paid_at: str | None = None


class PurchasersResponse(BaseModel):
    purchasers: list[Purchaser]
