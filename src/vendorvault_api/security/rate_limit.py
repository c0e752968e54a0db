"""Request rate limiting keyed by client IP."""

from ipaddress import ip_address, ip_network

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from vendorvault_api.config import get_settings

DEVELOPMENT_PROXIES = ("127.0.0.1", "::1", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")

# Checked in order when the request comes through a trusted proxy
FORWARDED_HEADERS = ("X-Forwarded-For", "X-Real-IP")


def _trusted_proxies() -> list[str]:
    """Configured proxy addresses, falling back to private ranges in development."""
    settings = get_settings()
    if settings.trusted_proxies_list:
        return settings.trusted_proxies_list
    if settings.environment == "development":
        return list(DEVELOPMENT_PROXIES)
    return []


def _is_trusted_proxy(client_ip: str) -> bool:
    try:
        addr = ip_address(client_ip)
        return any(addr in ip_network(proxy, strict=False) for proxy in _trusted_proxies())
    except ValueError:
        return False


def get_real_client_ip(request: Request) -> str:
    """Resolve the client IP used as the rate limit key.

    Forwarding headers are honoured only when the direct peer is a trusted
    proxy, and only when they hold a well-formed address.

    Args:
        request: Incoming request

    Returns:
        Client IP address
    """
    direct_ip = get_remote_address(request)
    if not _is_trusted_proxy(direct_ip):
        return direct_ip

    for header in FORWARDED_HEADERS:
        value = request.headers.get(header)
        if not value:
            continue
        candidate = value.split(",")[0].strip()
        try:
            ip_address(candidate)
        except ValueError:
            continue
        return candidate
    return direct_ip


def _get_rate_limit_settings() -> dict[str, str]:
    """Get rate limit strings from configuration."""
    settings = get_settings()
    return {
        "default": f"{settings.rate_limit_default}/minute",
        "auth_login": f"{settings.rate_limit_auth_login}/minute",
        "auth_register": f"{settings.rate_limit_auth_register}/minute",
        "sensitive": f"{settings.rate_limit_sensitive}/minute",
    }


_rate_limits = _get_rate_limit_settings()

# In-memory storage; a single API process serves each deployment
limiter = Limiter(
    key_func=get_real_client_ip,
    default_limits=[_rate_limits["default"]],
    enabled=get_settings().rate_limit_enabled,
)

AUTH_LOGIN_LIMIT = _rate_limits["auth_login"]
AUTH_REGISTER_LIMIT = _rate_limits["auth_register"]
API_DEFAULT_LIMIT = _rate_limits["default"]
SENSITIVE_OPERATION_LIMIT = _rate_limits["sensitive"]
