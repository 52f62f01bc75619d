from django.db import DatabaseError
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger("club")


class ClubError(Exception):
    """
    Base class for every domain failure raised by the services.

    Services raise these; views never catch them. The DRF exception handler
    below turns them into the standard error envelope.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"
    default_message = "Request failed."

    def __init__(self, message=None, fields=None):
        self.message = message or self.default_message
        self.fields = fields or {}
        super().__init__(self.message)

    def as_errors(self):
        errors = {"detail": self.message}
        errors.update(self.fields)
        return errors


class ValidationError(ClubError):
    code = "validation_error"
    default_message = "Invalid input."


class NotFound(ClubError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found."


class Conflict(ClubError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_message = "Already exists."


class PreconditionFailed(ClubError):
    status_code = status.HTTP_412_PRECONDITION_FAILED
    code = "precondition_failed"
    default_message = "Operation not allowed in the current state."


class InvalidTransition(ClubError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"
    default_message = "Invalid status transition."


class InternalFailure(ClubError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_failure"
    default_message = "Internal server error."


class UpstreamFailure(ClubError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "upstream_failure"
    default_message = "Upstream service failed."


def _error_response(status_code, code, errors):
    return Response(
        {
            "success": False,
            "status_code": status_code,
            "code": code,
            "errors": errors,
        },
        status=status_code,
    )


def custom_exception_handler(exc, context):
    """
    Wrap domain, DRF and Django exceptions into a consistent response format.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    if isinstance(exc, ClubError):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}")
        return _error_response(exc.status_code, exc.code, exc.as_errors())

    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        code = "validation_error" if response.status_code == 400 else getattr(exc, "default_code", "error")
        return _error_response(response.status_code, code, response.data)

    # Store failures and anything unexpected -> 500 without raw diagnostics
    if isinstance(exc, DatabaseError):
        logger.exception("Database failure while handling request", exc_info=exc)
    else:
        logger.exception("Unhandled API exception", exc_info=exc)

    return _error_response(
        InternalFailure.status_code,
        InternalFailure.code,
        {"detail": InternalFailure.default_message},
    )
