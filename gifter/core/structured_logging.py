"""Structured logging helpers (PII-safe)."""

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls are no-ops."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def build_log_context(
    *,
    user_id: str | None = None,
    person_id: str | None = None,
    gift_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict.

    Only identifiers go in here. Names, gift descriptions and emails stay out
    of the logs.
    """
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = str(user_id)
    if person_id:
        context["person_id"] = str(person_id)
    if gift_id:
        context["gift_id"] = str(gift_id)
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
