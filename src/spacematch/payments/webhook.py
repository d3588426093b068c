"""
Verificación de firmas de webhooks de Stripe.

Header `Stripe-Signature: t=<unix>,v1=<hex>[,v1=...]`; la firma es
HMAC-SHA256 de "<t>.<payload>" con el secreto del endpoint.
"""

import hashlib
import hmac
import json
import time
from typing import Optional

from spacematch.exceptions import WebhookSignatureError


def compute_signature(payload: bytes, secret: str, timestamp: int) -> str:
    signed = f"{timestamp}.".encode() + payload
    return hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()


def verify_webhook_signature(
    payload: bytes,
    header: Optional[str],
    secret: str,
    tolerance: int = 300,
    now: Optional[float] = None,
) -> None:
    """
    Valida la firma de un webhook.

    Args:
        tolerance: Antigüedad máxima en segundos (0 desactiva el chequeo)

    Raises:
        WebhookSignatureError: Header ausente, mal formado, firma inválida o vencida
    """
    if not header:
        raise WebhookSignatureError("Missing stripe-signature header")

    timestamp = None
    signatures = []
    for item in header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise WebhookSignatureError("Invalid signature timestamp") from None
        elif key == "v1" and value:
            signatures.append(value)

    if timestamp is None or not signatures:
        raise WebhookSignatureError("Malformed stripe-signature header")

    expected = compute_signature(payload, secret, timestamp)
    if not any(hmac.compare_digest(expected, sig) for sig in signatures):
        raise WebhookSignatureError("Invalid signature")

    now = time.time() if now is None else now
    if tolerance > 0 and abs(now - timestamp) > tolerance:
        raise WebhookSignatureError("Signature timestamp outside tolerance")


def parse_event(payload: bytes) -> dict:
    try:
        event = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise WebhookSignatureError("Invalid webhook payload") from None
    if not isinstance(event, dict):
        raise WebhookSignatureError("Invalid webhook payload")
    return event
