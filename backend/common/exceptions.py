"""DRF exception handler rendering ride service errors."""

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from services.exceptions import RideServiceError, ServiceUnavailableError

logger = logging.getLogger(__name__)


def ride_exception_handler(exc, context):
    """
    Render RideServiceError subclasses as
    ``{"success": false, "error": <code>, "message": <text>}``.
    Everything else goes through DRF's default handler.
    """
    if isinstance(exc, RideServiceError):
        if isinstance(exc, ServiceUnavailableError):
            logger.error("Request %s failed: storage unavailable", context.get("view"))
        return Response(
            {
                "success": False,
                "error": exc.error_code,
                "message": str(exc),
            },
            status=exc.status_code,
        )

    return exception_handler(exc, context)
