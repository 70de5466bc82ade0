from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from error_boundary.core.descriptors import (
    PERMISSION_DENIED,
    RESOURCE_NOT_FOUND,
    UNPROCESSABLE_ENTITY,
    VALIDATION_FAILED,
    validate_identifier,
)
from error_boundary.core.errors import RegistrationError


logger = logging.getLogger(__name__)

DEFAULT_STATUS = 500

BUILTIN_STATUSES: dict[str, int] = {
    VALIDATION_FAILED.identifier: 400,
    RESOURCE_NOT_FOUND.identifier: 404,
    PERMISSION_DENIED.identifier: 403,
    UNPROCESSABLE_ENTITY.identifier: 422,
}


def validate_status(status: object) -> int:
    # bool is an int subclass; True is not a status code.
    if isinstance(status, bool) or not isinstance(status, int):
        raise RegistrationError(f"HTTP status must be an int, got {status!r}")
    if not 100 <= status <= 599:
        raise RegistrationError(f"HTTP status out of range: {status}")
    return status


class StatusResolver:
    """Error identifier -> HTTP status; anything unmapped gets ``default_status``."""

    def __init__(self, *, default_status: int = DEFAULT_STATUS, builtins: bool = True) -> None:
        self._default_status = validate_status(default_status)
        self._lock = threading.Lock()
        self._statuses: Mapping[str, int] = dict(BUILTIN_STATUSES) if builtins else {}

    @property
    def default_status(self) -> int:
        return self._default_status

    def register_status_mapping(self, identifier: str, status: int) -> None:
        identifier = validate_identifier(identifier)
        status = validate_status(status)
        with self._lock:
            updated = dict(self._statuses)
            updated[identifier] = status
            self._statuses = updated
        logger.debug("Mapped %s -> HTTP %d", identifier, status)

    def resolve(self, identifier: str) -> int:
        return self._statuses.get(identifier, self._default_status)

    def mappings(self) -> dict[str, int]:
        return dict(self._statuses)
