"""
API HTTP (aiohttp) y cliente de matches.
"""

from spacematch.api.app import create_app
from spacematch.api.client import SpaceMatchClient
from spacematch.api.handlers import MatchHandler, StripeHandler

__all__ = [
    "create_app",
    "MatchHandler",
    "SpaceMatchClient",
    "StripeHandler",
]
