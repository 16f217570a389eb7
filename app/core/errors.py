# app/core/errors.py
"""
Error taxonomy shared by services.

Every error is an HTTPException so services can raise it at the point of
detection and FastAPI renders it at the request boundary. The body is always:

    {"detail": {"message": "...", "code": "..."}}

`code` lets the admin UI tell a photographer double-booking apart from any
other failure.
"""
from typing import Any

from fastapi import HTTPException, status


class DomainError(HTTPException):
    http_status: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, message: str, **extra: Any):
        self.message = message
        detail: dict[str, Any] = {"message": message, "code": self.code}
        detail.update(extra)
        super().__init__(status_code=self.http_status, detail=detail)


class ValidationError(DomainError):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "validation_error"

    def __init__(self, message: str, field: str | None = None):
        if field is None:
            super().__init__(message)
        else:
            super().__init__(message, field=field)


class NotFound(DomainError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "not_found"


class SchedulingConflict(DomainError):
    http_status = status.HTTP_409_CONFLICT
    code = "scheduling_conflict"


class InvalidTransition(DomainError):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "invalid_transition"


class SignatureVerificationFailed(DomainError):
    http_status = status.HTTP_403_FORBIDDEN
    code = "invalid_signature"


class PaymentGatewayError(DomainError):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "payment_gateway_error"
