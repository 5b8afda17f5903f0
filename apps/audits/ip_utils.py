"""
Adresse IP du client, pour le journal d'audit et les limites de débit.

Les en-têtes posés par un proxy (X-Real-IP, X-Forwarded-For) ne sont lus que
si le pair direct appartient à TRUSTED_PROXY_CIDRS.
"""
import ipaddress
import logging

from django.conf import settings

logger = logging.getLogger(__name__)

UNKNOWN_IP = '0.0.0.0'


def _parse_ip(value: str):
    if not value:
        return None
    try:
        return ipaddress.ip_address(value.strip())
    except ValueError:
        return None


def _proxy_networks():
    networks = []
    for cidr in getattr(settings, 'TRUSTED_PROXY_CIDRS', []):
        try:
            networks.append(ipaddress.ip_network(cidr, strict=False))
        except ValueError:
            logger.warning("Ignoring invalid TRUSTED_PROXY_CIDRS entry: %s", cidr)
    return networks


def _is_trusted_proxy(ip, networks) -> bool:
    return ip is not None and any(ip in network for network in networks)


def extract_client_ip(request) -> str:
    """
    IP du client sans faire confiance aveuglément aux en-têtes.

    Derrière un proxy de confiance : X-Real-IP s'il est présent, sinon la
    première adresse de X-Forwarded-For en partant de la droite qui n'est
    pas elle-même un proxy de confiance. Sinon REMOTE_ADDR.
    """
    networks = _proxy_networks()
    remote_ip = _parse_ip(request.META.get('REMOTE_ADDR', ''))

    if _is_trusted_proxy(remote_ip, networks):
        real_ip = _parse_ip(request.META.get('HTTP_X_REAL_IP', ''))
        if real_ip is not None:
            return str(real_ip)

        forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
        for candidate in reversed([part for part in forwarded.split(',') if part.strip()]):
            ip = _parse_ip(candidate)
            if ip is None:
                break
            if not _is_trusted_proxy(ip, networks):
                return str(ip)

    if remote_ip is not None:
        return str(remote_ip)

    return UNKNOWN_IP


def ratelimit_client_ip(group, request) -> str:
    """Clé django-ratelimit : IP du client."""
    return extract_client_ip(request)


def ratelimit_user_or_ip(group, request) -> str:
    """Clé django-ratelimit : utilisateur connecté, à défaut IP du client."""
    if request.user.is_authenticated:
        return f"user:{request.user.pk}"
    return f"ip:{extract_client_ip(request)}"
