from __future__ import annotations

import asyncio

from ..shard.enums import ServiceErrorReason

_HINTS: dict[ServiceErrorReason, str] = {
    ServiceErrorReason.AUTH: " Tip: check GEMINI_API_KEY or the Vertex credentials file and project settings.",
    ServiceErrorReason.QUOTA: " Tip: the model quota was hit; wait a minute or lower requests_per_minute.",
    ServiceErrorReason.TIMEOUT: " Tip: the model did not answer in time; retry or raise request_timeout_seconds.",
    ServiceErrorReason.NETWORK: " Tip: the model service was unreachable; check connectivity and retry.",
}

# Keyword lists are checked in this order; auth wins over quota wins over
# timeout wins over network.
_KEYWORDS: tuple[tuple[ServiceErrorReason, tuple[str, ...]], ...] = (
    (
        ServiceErrorReason.AUTH,
        (
            "api key",
            "apikey",
            "invalid key",
            "missing key",
            "unauthorized",
            "unauthenticated",
            "forbidden",
            "permission",
            "access denied",
            "credentials",
            "401",
            "403",
        ),
    ),
    (
        ServiceErrorReason.QUOTA,
        (
            "quota",
            "rate limit",
            "rate_limit",
            "too many requests",
            "resource exhausted",
            "resource_exhausted",
            "billing",
            "429",
        ),
    ),
    (ServiceErrorReason.TIMEOUT, ("timeout", "timed out", "deadline")),
    (
        ServiceErrorReason.NETWORK,
        (
            "connection",
            "network",
            "unavailable",
            "unreachable",
            "dns",
            "reset by peer",
            "503",
            "502",
        ),
    ),
)


def _status_code(exc: BaseException) -> int | None:
    for attr in ("code", "status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def classify_service_error(exc: BaseException) -> ServiceErrorReason:
    """Best-effort mapping of an SDK or transport exception to a reason."""
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return ServiceErrorReason.TIMEOUT

    status = _status_code(exc)
    if status in (401, 403):
        return ServiceErrorReason.AUTH
    if status == 429:
        return ServiceErrorReason.QUOTA
    if status in (408, 504):
        return ServiceErrorReason.TIMEOUT
    if status in (502, 503):
        return ServiceErrorReason.NETWORK

    lower = str(exc).lower()
    for reason, keywords in _KEYWORDS:
        if any(k in lower for k in keywords):
            return reason

    if isinstance(exc, (ConnectionError, OSError)):
        return ServiceErrorReason.NETWORK
    return ServiceErrorReason.UNKNOWN


def augment_with_hint(message: str, reason: ServiceErrorReason) -> str:
    """Append an actionable tip for ``reason`` unless one is already present."""
    hint = _HINTS.get(reason)
    if not message or not hint:
        return message
    if hint.strip() in message:
        return message
    return message.rstrip() + hint


__all__ = ["classify_service_error", "augment_with_hint"]
