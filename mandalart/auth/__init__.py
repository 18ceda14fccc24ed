"""Authentication: password login and signed session tokens."""

from mandalart.auth.service import AuthService, BaseAuthService, LocalAuthService

__all__ = ["AuthService", "BaseAuthService", "LocalAuthService"]
