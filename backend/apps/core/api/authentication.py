from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from rest_framework import authentication, exceptions


class ApiKeyAuthentication(authentication.BaseAuthentication):
    """Terminal-level API key; the operator behind the terminal is sent separately as X-Actor-Id."""

    header_name = "HTTP_X_API_KEY"

    def authenticate(self, request):
        api_key = request.META.get(self.header_name)
        if not api_key:
            return None

        valid_keys = set(getattr(settings, "PLANTLEDGER_API_KEYS", []))
        if api_key not in valid_keys:
            raise exceptions.AuthenticationFailed("Invalid API key.")

        return (AnonymousUser(), api_key)

    def authenticate_header(self, request):
        return "X-API-Key"


def resolve_actor_id(request, payload_actor_id: str | None = None) -> str | None:
    actor_id = (payload_actor_id or request.headers.get("X-Actor-Id") or "").strip()
    return actor_id or None
