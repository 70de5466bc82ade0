from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass

from error_boundary.core.errors import DescriptorNotFoundError, RegistrationError


logger = logging.getLogger(__name__)

SLOT = "%s"


@dataclass(frozen=True, slots=True)
class ErrorDescriptor:
    """Stable error identifier plus a message template with at most one slot."""

    identifier: str
    template: str

    @property
    def has_slot(self) -> bool:
        return SLOT in self.template

    def render(self, detail: str | None = None) -> str:
        if detail and self.has_slot:
            return self.template.replace(SLOT, detail, 1)
        return self.template


UNKNOWN_ERROR = ErrorDescriptor("ERR-000", "An unknown error occurred.")
VALIDATION_FAILED = ErrorDescriptor("ERR-001", "Validation failed for field: %s.")
RESOURCE_NOT_FOUND = ErrorDescriptor("ERR-002", "Resource not found: %s.")
PERMISSION_DENIED = ErrorDescriptor("ERR-003", "Permission denied for resource: %s.")
UNPROCESSABLE_ENTITY = ErrorDescriptor("ERR-004", "Unprocessable entity: %s.")

BUILTIN_DESCRIPTORS: tuple[ErrorDescriptor, ...] = (
    UNKNOWN_ERROR,
    VALIDATION_FAILED,
    RESOURCE_NOT_FOUND,
    PERMISSION_DENIED,
    UNPROCESSABLE_ENTITY,
)


def validate_identifier(identifier: object) -> str:
    if not isinstance(identifier, str) or not identifier.strip():
        raise RegistrationError(
            f"Error identifier must be a non-empty string, got {identifier!r}"
        )
    return identifier


def make_descriptor(identifier: object, template: object) -> ErrorDescriptor:
    identifier = validate_identifier(identifier)
    if not isinstance(template, str):
        raise RegistrationError(
            f"Template for {identifier!r} must be a string, got {type(template).__name__}"
        )
    if template.count(SLOT) > 1:
        raise RegistrationError(
            f"Template for {identifier!r} has more than one {SLOT!r} slot: {template!r}"
        )
    return ErrorDescriptor(identifier, template)


class DescriptorRegistry:
    """Identifier -> ErrorDescriptor table shared by all requests.

    Writes swap in a fresh dict under a lock; reads go through the current
    reference without locking and see either the old or the new table.
    """

    def __init__(self, *, builtins: bool = True) -> None:
        self._lock = threading.Lock()
        self._descriptors: Mapping[str, ErrorDescriptor] = {}
        if builtins:
            self._descriptors = {d.identifier: d for d in BUILTIN_DESCRIPTORS}

    def register(self, identifier: str, template: str) -> ErrorDescriptor:
        descriptor = make_descriptor(identifier, template)
        with self._lock:
            updated = dict(self._descriptors)
            previous = updated.get(descriptor.identifier)
            updated[descriptor.identifier] = descriptor
            self._descriptors = updated
        if previous is not None and previous != descriptor:
            logger.debug(
                "Replaced template for %s: %r -> %r",
                descriptor.identifier,
                previous.template,
                descriptor.template,
            )
        return descriptor

    def add(self, descriptor: ErrorDescriptor) -> ErrorDescriptor:
        """Register ``descriptor`` unless its identifier is taken; return the stored one."""

        if not isinstance(descriptor, ErrorDescriptor):
            raise RegistrationError(
                f"Expected an ErrorDescriptor, got {type(descriptor).__name__}"
            )
        make_descriptor(descriptor.identifier, descriptor.template)
        with self._lock:
            existing = self._descriptors.get(descriptor.identifier)
            if existing is not None:
                return existing
            updated = dict(self._descriptors)
            updated[descriptor.identifier] = descriptor
            self._descriptors = updated
        return descriptor

    def get(self, identifier: str) -> ErrorDescriptor:
        descriptor = self._descriptors.get(identifier)
        if descriptor is None:
            raise DescriptorNotFoundError(identifier)
        return descriptor

    def find(self, identifier: str) -> ErrorDescriptor | None:
        return self._descriptors.get(identifier)

    def all(self) -> list[ErrorDescriptor]:
        return sorted(self._descriptors.values(), key=lambda d: d.identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)
