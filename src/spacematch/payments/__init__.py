"""
Pagos: checkout de conexión y webhook de Stripe.
"""

from spacematch.payments.checkout import StripeCheckoutService
from spacematch.payments.completion import PaymentCompletionService
from spacematch.payments.webhook import parse_event, verify_webhook_signature

__all__ = [
    "PaymentCompletionService",
    "StripeCheckoutService",
    "parse_event",
    "verify_webhook_signature",
]
