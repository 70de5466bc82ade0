"""Request-boundary error normalization for ASGI applications.

Unhandled failures are classified into a stable error identifier, rendered
into ``{"code": ..., "message": ...}`` and answered with a mapped status.
"""

from __future__ import annotations

from error_boundary.core.classifier import DescribesError, FailureClassifier
from error_boundary.core.context import ErrorContext, create_error_context
from error_boundary.core.descriptors import (
    PERMISSION_DENIED,
    RESOURCE_NOT_FOUND,
    UNKNOWN_ERROR,
    UNPROCESSABLE_ENTITY,
    VALIDATION_FAILED,
    DescriptorRegistry,
    ErrorDescriptor,
)
from error_boundary.core.errors import (
    DescribedError,
    DescriptorNotFoundError,
    RegistrationError,
)
from error_boundary.core.payload import ErrorPayload, ErrorResponseBuilder
from error_boundary.core.status import StatusResolver
from error_boundary.middleware import ErrorBoundaryMiddleware, install_error_boundary

__all__ = [
    "PERMISSION_DENIED",
    "RESOURCE_NOT_FOUND",
    "UNKNOWN_ERROR",
    "UNPROCESSABLE_ENTITY",
    "VALIDATION_FAILED",
    "DescribedError",
    "DescribesError",
    "DescriptorNotFoundError",
    "DescriptorRegistry",
    "ErrorBoundaryMiddleware",
    "ErrorContext",
    "ErrorDescriptor",
    "ErrorPayload",
    "ErrorResponseBuilder",
    "FailureClassifier",
    "RegistrationError",
    "StatusResolver",
    "create_error_context",
    "install_error_boundary",
]
