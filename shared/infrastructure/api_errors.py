"""DRF exception handler translating domain errors into API responses."""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.errors import DomainError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):  # type: ignore
    """Render ``DomainError`` as ``{"code", "detail", ...}``; defer the rest to DRF."""

    if isinstance(exc, DomainError):
        if exc.http_status >= 500:
            view = context.get("view")
            logger.error(
                f"Operation failed in {view.__class__.__name__ if view else 'unknown view'}: "
                f"{exc.code}",
                exc_info=exc,
            )
        else:
            logger.info(f"Request refused: {exc.code} ({exc.message})")
        return Response(exc.to_dict(), status=exc.http_status)
    return exception_handler(exc, context)
