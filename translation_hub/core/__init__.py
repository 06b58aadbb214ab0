"""Core configuration, database, password hashing and token signing."""

from translation_hub.core.config import Settings, get_settings
from translation_hub.core.tokens import TokenClaims, TokenCodec

__all__ = ["Settings", "TokenClaims", "TokenCodec", "get_settings"]
