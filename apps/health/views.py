"""
Health check pour la supervision : base de données et cache.
"""
import hmac
import ipaddress
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django_ratelimit.decorators import ratelimit

from apps.audits.ip_utils import extract_client_ip, ratelimit_client_ip

logger = logging.getLogger(__name__)

CACHE_PROBE_KEY = 'healthcheck:probe'


def _health_rate_limit(group, request) -> str:
    return settings.HEALTHCHECK_RATE_LIMIT


def _forbidden():
    return JsonResponse({"status": "error", "error": "Forbidden"}, status=403)


def _client_allowed(client_ip: str) -> bool:
    try:
        parsed = ipaddress.ip_address(client_ip)
    except ValueError:
        return False
    for cidr in settings.HEALTHCHECK_ALLOWLIST_CIDRS:
        try:
            if parsed in ipaddress.ip_network(cidr, strict=False):
                return True
        except ValueError:
            logger.warning("Ignoring invalid HEALTHCHECK_ALLOWLIST_CIDRS entry: %s", cidr)
    return False


def _token_valid(request) -> bool:
    valid_tokens = [token for token in getattr(settings, 'HEALTHCHECK_VALID_TOKENS', []) if token]
    if not valid_tokens:
        logger.error("HEALTHCHECK_TOKEN is not configured; refusing health endpoint access.")
        return False
    provided = request.headers.get("X-Healthcheck-Token", "")
    if not provided:
        return False
    return any(hmac.compare_digest(str(provided), str(expected)) for expected in valid_tokens)


def _check_database():
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _check_cache():
    cache.set(CACHE_PROBE_KEY, 'ok', 10)
    if cache.get(CACHE_PROBE_KEY) != 'ok':
        raise RuntimeError("cache probe mismatch")


CHECKS = (
    ('database', _check_database),
    ('cache', _check_cache),
)


@require_http_methods(["GET"])
@ratelimit(key=ratelimit_client_ip, rate=_health_rate_limit, method='GET', block=False)
def health_check(request):
    """
    Authentification : en-tête X-Healthcheck-Token et IP source dans
    HEALTHCHECK_ALLOWLIST_CIDRS.

    200 {"status": "ok"}
    403 IP non autorisée ou token invalide
    429 limite HEALTHCHECK_RATE_LIMIT atteinte
    503 {"status": "error", "error": "Service unavailable", "failed": [...]}
    """
    # Jamais de query string dans les logs pour cet endpoint (fuite de token)
    request.META['QUERY_STRING'] = ''

    if getattr(request, 'limited', False):
        response = JsonResponse({"status": "error", "error": "Too Many Requests"}, status=429)
        response["Retry-After"] = "60"
        return response

    if not _client_allowed(extract_client_ip(request)):
        return _forbidden()
    if not _token_valid(request):
        return _forbidden()

    failed = []
    for name, check in CHECKS:
        try:
            check()
        except Exception:
            logger.exception("Health check failed: %s", name)
            failed.append(name)

    if failed:
        return JsonResponse(
            {"status": "error", "error": "Service unavailable", "failed": failed},
            status=503,
        )
    return JsonResponse({"status": "ok"}, status=200)
