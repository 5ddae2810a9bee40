"""Provider authentication."""

from .token_manager import AccessToken, TokenManager, TokenStore

__all__ = ["AccessToken", "TokenManager", "TokenStore"]
