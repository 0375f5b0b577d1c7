"""Per-client rate limiting for the interpret-search gateway."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from propsearch.settings import settings


def client_key(request: Request) -> str:
    """Bucket requests by caller address.

    With ``rate_limit_trust_forwarded_for`` the first X-Forwarded-For hop is
    used, since the peer is then the proxy in front of the gateway.
    """
    if settings.rate_limit_trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return get_remote_address(request)


# Limits are declared per route from settings; only enforced in production
limiter = Limiter(
    key_func=client_key,
    storage_uri="memory://",
    enabled=settings.env == "production",
)
