"""Payments bounded context: checkout initiation and payment confirmation.

Opens hosted payment sessions with the gateway, verifies its signed
callbacks, settles inventory for confirmed charges and keeps the payment
record the admin console reports on.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

payments = Domain(name="payments")

logger = structlog.get_logger(__name__)
