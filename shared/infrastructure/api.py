"""
Django REST Framework glue for the domain error taxonomy.

Registered as ``REST_FRAMEWORK['EXCEPTION_HANDLER']``; domain errors raised
by services become JSON responses, everything else falls through to DRF.
"""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain import errors

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    errors.ValidationError: status.HTTP_400_BAD_REQUEST,
    errors.PaymentRequired: status.HTTP_402_PAYMENT_REQUIRED,
    errors.PermissionDenied: status.HTTP_403_FORBIDDEN,
    errors.NotFound: status.HTTP_404_NOT_FOUND,
    errors.SlotConflict: status.HTTP_409_CONFLICT,
    errors.InvalidTransition: status.HTTP_409_CONFLICT,
}


def status_for(exc: errors.DomainError) -> int:
    for error_class in type(exc).__mro__:
        if error_class in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_class]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def domain_exception_handler(exc, context):
    if isinstance(exc, errors.DomainError):
        http_status = status_for(exc)
        if http_status >= 500:
            logger.error("Unhandled domain error in %s: %s", context.get("view"), exc, exc_info=exc)
        return Response(exc.to_dict(), status=http_status)
    return exception_handler(exc, context)
