"""
Aplicación aiohttp de SpaceMatch.
"""

from typing import Optional

from aiohttp import web

from spacematch.api.handlers import MatchHandler, StripeHandler, health


def create_app(
    match_handler: Optional[MatchHandler] = None,
    stripe_handler: Optional[StripeHandler] = None,
) -> web.Application:
    """
    Construye la aplicación con sus rutas.

    Sin argumentos, los handlers crean sus repositorios contra Supabase.
    """
    match_handler = match_handler or MatchHandler()
    stripe_handler = stripe_handler or StripeHandler(match_repo=match_handler.match_repo)

    app = web.Application()
    app.router.add_get("/health", health)
    app.router.add_get("/match", match_handler.get_matches)
    app.router.add_post("/match", match_handler.find_matches)
    app.router.add_put("/match", match_handler.create_match)
    app.router.add_post("/stripe/create-checkout", stripe_handler.create_checkout)
    app.router.add_post("/stripe/webhook", stripe_handler.webhook)
    return app
