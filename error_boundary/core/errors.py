from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from error_boundary.core.descriptors import ErrorDescriptor


class RegistrationError(ValueError):
    """Malformed setup-time input (identifier, template, failure type, status)."""


class DescriptorNotFoundError(LookupError):
    def __init__(self, identifier: str) -> None:
        super().__init__(f"No error descriptor registered under {identifier!r}")
        self.identifier = identifier


@dataclasses.dataclass(slots=True)
class DescribedError(Exception):
    """Application failure that carries its own error descriptor.

    The classifier uses ``error_descriptor`` as-is and skips the type table,
    so subclasses do not need their own registration.
    """

    error_descriptor: ErrorDescriptor
    detail: str | None = None

    def __str__(self) -> str:
        return self.error_descriptor.render(self.detail)
