"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- PaystackGateway when PAYSTACK_SECRET_KEY is configured
- FakeGateway for development and testing otherwise
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.paystack_adapter import PaystackGateway
from payments.gateway.port import PaymentGateway
from shared.config import get_settings

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway."""
    global _current_gateway
    if _current_gateway is None:
        settings = get_settings()
        # production never falls back to the fake; a missing key fails at checkout
        if settings.paystack_secret_key or settings.is_production:
            _current_gateway = PaystackGateway(settings.paystack_secret_key, settings.paystack_base_url)
        else:
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
