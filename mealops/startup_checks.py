"""Startup validation — catch misconfigurations before the app serves traffic."""
from __future__ import annotations

import logging
import sys

from config.settings import DEFAULT_JWT_SECRET, settings

logger = logging.getLogger(__name__)


def validate_settings() -> list[str]:
    """Validate configuration. Returns list of warnings (empty = all good).

    Exits the process for critical misconfigurations in production.
    """
    warnings: list[str] = []
    is_prod = bool(settings.DATABASE_URL) and "sqlite" not in settings.DATABASE_URL

    if is_prod and settings.JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.critical("JWT_SECRET is still the default! Set a real secret for production.")
        sys.exit(1)

    if is_prod and "*" in settings.CORS_ORIGINS:
        warnings.append("CORS_ORIGINS is set to * — restrict in production")

    if settings.ACCESS_TOKEN_TTL_HOURS <= 0 or settings.REFRESH_TOKEN_TTL_DAYS <= 0:
        warnings.append("Token TTLs must be positive — every token will be rejected")

    for w in warnings:
        logger.warning("%s", w)

    if not warnings:
        logger.info("All startup checks passed")

    return warnings
