from django.conf import settings
from django.http import HttpResponse

PREFLIGHT_MAX_AGE = 600
ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
ALLOWED_HEADERS = ("Content-Type", "X-API-Key", "X-Actor-Id", "Idempotency-Key")


def origin_allowed(origin: str | None) -> bool:
    if not origin:
        return False
    if settings.DEBUG:
        return True
    allowlist = set(getattr(settings, "CORS_ALLOWED_ORIGINS", []))
    return "*" in allowlist or origin in allowlist


class FloorTerminalCORSMiddleware:
    """CORS for the browser-based floor terminals; preflights are answered without touching the view."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        origin = request.headers.get("Origin")
        is_preflight = request.method == "OPTIONS" and "Access-Control-Request-Method" in request.headers

        response = HttpResponse(status=204) if is_preflight else self.get_response(request)
        if not origin_allowed(origin):
            return response

        response["Access-Control-Allow-Origin"] = origin
        response["Vary"] = "Origin"
        if is_preflight:
            response["Access-Control-Allow-Methods"] = ", ".join(ALLOWED_METHODS)
            response["Access-Control-Allow-Headers"] = ", ".join(ALLOWED_HEADERS)
            response["Access-Control-Max-Age"] = str(PREFLIGHT_MAX_AGE)
        return response
