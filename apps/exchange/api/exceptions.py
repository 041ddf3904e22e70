"""
Maps domain and persistence errors to API responses.
Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"].
"""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.exchange.domain.exceptions import (
    CurrencyNotFound,
    ExchangeError,
    ExchangeValidationError,
)

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, ExchangeValidationError):
        return Response(
            {"error": "Invalid exchange request", "details": exc.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, CurrencyNotFound):
        return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, ExchangeError):
        return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, DatabaseError):
        logger.error("Persistence failure in %s", context["view"].__class__.__name__, exc_info=exc)
        return Response(
            {"error": "Could not persist changes"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return None
