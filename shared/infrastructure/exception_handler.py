"""DRF exception handler that renders the reservation error taxonomy."""

from __future__ import annotations

import structlog
from django.db.models import ProtectedError  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.errors import InUse, ReservationSystemError

logger = structlog.get_logger(__name__)


def reservation_exception_handler(exc, context):  # type: ignore
    """Map domain errors to ``{"error": kind, "detail": message}`` responses.

    Anything DRF already knows how to render (validation errors,
    authentication failures, 404 from ``get_object``) is left to DRF.
    """

    if isinstance(exc, ProtectedError):
        exc = InUse("Cannot delete: the record is referenced by existing reservations")

    if isinstance(exc, ReservationSystemError):
        view = context.get("view")
        log = logger.bind(
            kind=exc.kind,
            view=view.__class__.__name__ if view is not None else None,
        )
        if exc.http_status >= 500:
            log.error("request.failed", detail=exc.message)
        else:
            log.info("request.rejected", detail=exc.message)
        return Response(exc.to_dict(), status=exc.http_status)

    return drf_exception_handler(exc, context)
