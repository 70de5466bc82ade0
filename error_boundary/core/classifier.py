from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from error_boundary.core.descriptors import (
    PERMISSION_DENIED,
    UNKNOWN_ERROR,
    VALIDATION_FAILED,
    DescriptorRegistry,
    ErrorDescriptor,
    validate_identifier,
)
from error_boundary.core.errors import DescriptorNotFoundError, RegistrationError


logger = logging.getLogger(__name__)


@runtime_checkable
class DescribesError(Protocol):
    """A failure that already knows which descriptor it belongs to."""

    error_descriptor: ErrorDescriptor


BUILTIN_MAPPINGS: tuple[tuple[type[BaseException], ErrorDescriptor], ...] = (
    (ValueError, VALIDATION_FAILED),
    (AttributeError, UNKNOWN_ERROR),
    (PermissionError, PERMISSION_DENIED),
)


def _declared_descriptor(failure: BaseException) -> ErrorDescriptor | None:
    declared = getattr(failure, "error_descriptor", None)
    if isinstance(declared, ErrorDescriptor):
        return declared
    return None


class FailureClassifier:
    """Resolves a failure to an ErrorDescriptor.

    Lookup is by the failure's exact type. A subclass of a mapped type is
    unknown unless it is registered itself or carries ``error_descriptor``.
    The table stores identifiers; templates are read from the registry at
    classification time so template overrides apply to every mapped type
    and to self-declared descriptors whose identifier is registered.
    """

    def __init__(self, registry: DescriptorRegistry, *, builtins: bool = True) -> None:
        self._registry = registry
        self._lock = threading.Lock()
        self._table: Mapping[type[BaseException], str] = {}
        if builtins:
            for failure_type, descriptor in BUILTIN_MAPPINGS:
                # A shared registry may already carry an overridden template.
                self._bind(failure_type, registry.add(descriptor))

    @property
    def registry(self) -> DescriptorRegistry:
        return self._registry

    def register_mapping(
        self,
        failure_type: type[BaseException],
        descriptor: ErrorDescriptor | str,
    ) -> ErrorDescriptor:
        if not (isinstance(failure_type, type) and issubclass(failure_type, BaseException)):
            raise RegistrationError(
                f"Failure type must be an exception class, got {failure_type!r}"
            )
        if descriptor is None:
            raise RegistrationError(
                f"Descriptor for {failure_type.__name__} must not be None"
            )

        if isinstance(descriptor, str):
            identifier = validate_identifier(descriptor)
            try:
                resolved = self._registry.get(identifier)
            except DescriptorNotFoundError as e:
                raise RegistrationError(
                    f"Cannot map {failure_type.__name__} to unregistered identifier {identifier!r}"
                ) from e
        elif isinstance(descriptor, ErrorDescriptor):
            # Last write wins for the template as well as for the type.
            resolved = self._registry.register(descriptor.identifier, descriptor.template)
        else:
            raise RegistrationError(
                f"Expected an ErrorDescriptor or identifier, got {type(descriptor).__name__}"
            )

        self._bind(failure_type, resolved)
        return resolved

    def _bind(self, failure_type: type[BaseException], resolved: ErrorDescriptor) -> None:
        with self._lock:
            updated = dict(self._table)
            updated[failure_type] = resolved.identifier
            self._table = updated
        logger.debug("Mapped %s -> %s", failure_type.__name__, resolved.identifier)

    def lookup(self, failure_type: type[BaseException]) -> ErrorDescriptor | None:
        identifier = self._table.get(failure_type)
        if identifier is None:
            return None
        return self._registry.find(identifier)

    def classify(self, failure: BaseException) -> ErrorDescriptor:
        declared = _declared_descriptor(failure)
        if declared is not None:
            return self._registry.find(declared.identifier) or declared
        descriptor = self.lookup(type(failure))
        if descriptor is not None:
            return descriptor
        return self._registry.find(UNKNOWN_ERROR.identifier) or UNKNOWN_ERROR

    def mappings(self) -> dict[type[BaseException], str]:
        return dict(self._table)
