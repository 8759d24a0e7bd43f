"""API-key authentication backend for Django REST Framework.

Clients send the shared key in the ``Api-Key`` header.  The expected value
comes from the ``API_KEY`` setting and is compared in constant time.

Security decisions
------------------
* **Fail Closed**: a missing header yields 401 through ``IsAuthenticated``;
  a wrong key raises ``AuthenticationFailed`` (401).
* The key itself is never logged.
"""

import hmac

import structlog
from django.conf import settings
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)

API_KEY_HEADER = "HTTP_API_KEY"


class ApiKeyUser:
    """Lightweight principal for requests authenticated with the shared key.

    There is no local ``User`` row behind it.  ``pk`` identifies the client
    for throttling purposes.
    """

    pk = "api-key"
    is_authenticated = True
    is_active = True

    def __str__(self) -> str:  # pragma: no cover
        return "api-key-client"


class ApiKeyAuthentication(BaseAuthentication):
    """DRF authentication class that validates the ``Api-Key`` header."""

    keyword = "Api-Key"

    def authenticate(self, request):
        """Return ``(ApiKeyUser, key)`` or ``None`` (no credentials)."""
        provided = request.META.get(API_KEY_HEADER, "")
        if not provided:
            return None

        if not hmac.compare_digest(provided.encode(), settings.API_KEY.encode()):
            logger.warning("api_key_rejected", path=request.path)
            raise AuthenticationFailed("Invalid API key.")

        return (ApiKeyUser(), provided)

    def authenticate_header(self, request):
        """Value for the ``WWW-Authenticate`` response header on 401."""
        return f'{self.keyword} realm="api"'
