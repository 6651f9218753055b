"""
Simple in-memory rate limiter for API endpoints.

Clients are keyed by the first X-Forwarded-For address, so the service must
run behind a trusted proxy that overwrites that header.
"""
import logging
import time
from collections import defaultdict
from typing import Dict, Tuple
from fastapi import Request

from app.core.errors import RateLimitError

logger = logging.getLogger(__name__)

# Store for rate limit tracking: {(scope, ip): [timestamp, ...]}
rate_limit_store: Dict[Tuple[str, str], list] = defaultdict(list)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request. Trusts X-Forwarded-For."""
    # Check for forwarded IP (from proxy/load balancer)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain
        return forwarded.split(",")[0].strip()
    
    # Fallback to direct client IP
    if request.client:
        return request.client.host
    
    return "unknown"


def check_rate_limit(
    request: Request,
    scope: str,
    max_requests: int = 10,
    window_seconds: int = 60
) -> None:
    """
    Check if client has exceeded the rate limit for a scope.
    
    Args:
        request: FastAPI request object
        scope: Name of the limited operation (e.g. "send_otp")
        max_requests: Maximum number of requests allowed
        window_seconds: Time window in seconds
        
    Raises:
        RateLimitError: if the limit is exceeded
    """
    key = (scope, get_client_ip(request))
    now = time.time()
    
    cutoff = now - window_seconds
    _prune(scope, cutoff)

    request_count = len(rate_limit_store.get(key, []))
    
    if request_count >= max_requests:
        logger.warning(f"Rate limit exceeded: scope={scope}, ip={key[1]} ({request_count} requests in {window_seconds}s)")
        raise RateLimitError(
            f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds."
        )
    
    rate_limit_store[key].append(now)
    
    logger.debug(f"Rate limit check passed: scope={scope}, ip={key[1]} ({request_count + 1}/{max_requests})")


def _prune(scope: str, cutoff: float) -> None:
    """Drop expired timestamps for a scope and forget clients with none left."""
    for key in [k for k in rate_limit_store if k[0] == scope]:
        recent = [timestamp for timestamp in rate_limit_store[key] if timestamp > cutoff]
        if recent:
            rate_limit_store[key] = recent
        else:
            del rate_limit_store[key]


def reset_rate_limits() -> None:
    """Forget all recorded requests."""
    rate_limit_store.clear()
