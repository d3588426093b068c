"""
Handlers HTTP de la API de matching y pagos.

Los mensajes de error en el body son el contrato con el frontend.
"""

import json
from typing import Optional

import structlog
from aiohttp import web

from spacematch.config import get_settings
from spacematch.database import MatchRepository, PostRepository
from spacematch.exceptions import WebhookSignatureError
from spacematch.matching import MatchEnricher, MatchFinder, MatchRecorder
from spacematch.payments import (
    PaymentCompletionService,
    StripeCheckoutService,
    parse_event,
    verify_webhook_signature,
)

logger = structlog.get_logger()


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def _read_json(request: web.Request) -> Optional[dict]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


class MatchHandler:
    """
    Endpoints de /match.

    - GET: matches de un usuario con títulos y autores
    - POST: corre el matching de un post y registra los resultados
    - PUT: alta directa de un match
    """

    def __init__(
        self,
        post_repo: Optional[PostRepository] = None,
        match_repo: Optional[MatchRepository] = None,
        finder: Optional[MatchFinder] = None,
        recorder: Optional[MatchRecorder] = None,
        enricher: Optional[MatchEnricher] = None,
    ):
        self.post_repo = post_repo or PostRepository()
        self.match_repo = match_repo or MatchRepository()
        self.finder = finder or MatchFinder(post_repo=self.post_repo)
        self.recorder = recorder or MatchRecorder(match_repo=self.match_repo)
        self.enricher = enricher or MatchEnricher(post_repo=self.post_repo)

    async def get_matches(self, request: web.Request) -> web.Response:
        user_id = request.query.get("userId")
        if not user_id:
            return _error("Missing userId parameter", 400)

        try:
            matches = self.match_repo.get_user_matches(user_id)
            enriched = self.enricher.enrich(matches)
        except Exception as e:
            logger.error("Error obteniendo matches", user_id=user_id, error=str(e))
            return _error("Failed to fetch matches", 500)

        return web.json_response({"matches": [m.to_api_dict() for m in enriched]})

    async def find_matches(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        if body is None:
            return _error("Invalid JSON body", 400)

        post_id = body.get("postId")
        user_id = body.get("userId")
        if not post_id or not user_id:
            return _error("Missing postId or userId", 400)

        try:
            post = self.post_repo.get_by_id(post_id)
            if post is None:
                return _error("Post not found", 404)
            if post.author_id != user_id:
                return _error("Unauthorized", 403)

            candidates = await self.finder.find_matches(post)
            self.recorder.record(post, candidates)
        except Exception as e:
            logger.error("Error buscando matches", post_id=post_id, error=str(e))
            return _error("Failed to find matches", 500)

        return web.json_response({"matches": [c.to_api_dict() for c in candidates]})

    async def create_match(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        if body is None:
            return _error("Invalid JSON body", 400)

        fields = ("seekerPostId", "landlordPostId", "seekerId", "landlordId")
        if not all(body.get(f) for f in fields):
            return _error("Missing required fields", 400)

        score = body.get("matchScore") or 0
        if not isinstance(score, int) or isinstance(score, bool) or score < 0:
            return _error("Invalid matchScore", 400)

        try:
            match_id = self.match_repo.create_match(
                seeker_post_id=body["seekerPostId"],
                landlord_post_id=body["landlordPostId"],
                seeker_id=body["seekerId"],
                landlord_id=body["landlordId"],
                match_score=score,
            )
        except Exception as e:
            logger.error("Error creando match", error=str(e))
            return _error("Failed to create match", 500)

        return web.json_response({"matchId": match_id})


class StripeHandler:
    """Endpoints de checkout y webhook de Stripe."""

    def __init__(
        self,
        match_repo: Optional[MatchRepository] = None,
        checkout: Optional[StripeCheckoutService] = None,
        completion: Optional[PaymentCompletionService] = None,
        webhook_secret: Optional[str] = None,
    ):
        settings = get_settings()
        self.match_repo = match_repo or MatchRepository()
        self.checkout = checkout or StripeCheckoutService()
        self.completion = completion or PaymentCompletionService(match_repo=self.match_repo)
        self.webhook_secret = webhook_secret or settings.stripe_webhook_secret
        self.tolerance = settings.stripe_webhook_tolerance_seconds

    async def create_checkout(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        if body is None:
            return _error("Invalid JSON body", 400)

        match_id = body.get("matchId")
        user_id = body.get("userId")
        if not match_id or not user_id:
            return _error("Missing matchId or userId", 400)

        try:
            match = self.match_repo.get_match(match_id)
            if match is None:
                return _error("Match not found", 404)
            if not match.involves(user_id):
                return _error("Unauthorized", 403)
            if match.status.is_paid:
                return _error("This match has already been paid for", 400)

            session = await self.checkout.create_checkout_session(match, user_id)
        except Exception as e:
            logger.error("Error creando sesión de checkout", match_id=match_id, error=str(e))
            return _error("Failed to create checkout session", 500)

        return web.json_response({"sessionId": session["session_id"], "url": session["url"]})

    async def webhook(self, request: web.Request) -> web.Response:
        if not self.webhook_secret:
            logger.error("Webhook recibido sin STRIPE_WEBHOOK_SECRET configurado")
            return _error("Webhook not configured", 500)

        payload = await request.read()
        try:
            verify_webhook_signature(
                payload,
                request.headers.get("Stripe-Signature"),
                self.webhook_secret,
                tolerance=self.tolerance,
            )
            event = parse_event(payload)
        except WebhookSignatureError as e:
            logger.warning("Firma de webhook rechazada", error=str(e))
            return _error(str(e), 400)

        try:
            self.completion.handle_event(event)
        except Exception as e:
            logger.error("Error procesando webhook", event_id=event.get("id"), error=str(e))
            return _error("Webhook handler failed", 500)

        return web.json_response({"received": True})


async def health(_: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})
