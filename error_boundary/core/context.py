from __future__ import annotations

import json

from error_boundary.core.classifier import FailureClassifier
from error_boundary.core.descriptors import DescriptorRegistry, ErrorDescriptor
from error_boundary.core.payload import ErrorPayload, ErrorResponseBuilder
from error_boundary.core.settings import Settings, get_settings
from error_boundary.core.status import StatusResolver


class ErrorContext:
    """Registry, classifier, builder and status table owned by one application.

    Setup code registers descriptors, failure mappings and statuses here
    before traffic starts; the boundary only calls ``convert``.
    """

    def __init__(
        self,
        *,
        registry: DescriptorRegistry | None = None,
        classifier: FailureClassifier | None = None,
        builder: ErrorResponseBuilder | None = None,
        statuses: StatusResolver | None = None,
        media_type: str = "application/json",
    ) -> None:
        if registry is not None and classifier is not None and classifier.registry is not registry:
            raise ValueError("classifier must use the same registry as the context")
        if registry is None:
            registry = classifier.registry if classifier is not None else DescriptorRegistry()
        self.registry = registry
        self.classifier = classifier if classifier is not None else FailureClassifier(registry)
        self.builder = builder if builder is not None else ErrorResponseBuilder()
        self.statuses = statuses if statuses is not None else StatusResolver()
        self.media_type = media_type

    def register_descriptor(self, identifier: str, template: str) -> ErrorDescriptor:
        return self.registry.register(identifier, template)

    def register_failure(
        self,
        failure_type: type[BaseException],
        descriptor: ErrorDescriptor | str,
    ) -> ErrorDescriptor:
        return self.classifier.register_mapping(failure_type, descriptor)

    def register_status(self, identifier: str, status: int) -> None:
        self.statuses.register_status_mapping(identifier, status)

    def convert(self, failure: BaseException) -> tuple[int, ErrorPayload]:
        descriptor = self.classifier.classify(failure)
        payload = self.builder.build(descriptor, failure)
        return self.statuses.resolve(payload.code), payload


def _load_status_overrides(settings: Settings) -> dict[str, object]:
    if not settings.status_overrides_json:
        return {}
    raw = json.loads(settings.status_overrides_json)
    if not isinstance(raw, dict):
        raise ValueError("ERROR_BOUNDARY_STATUS_OVERRIDES_JSON must be a JSON object")
    return raw


def create_error_context(settings: Settings | None = None) -> ErrorContext:
    settings = settings or get_settings()
    context = ErrorContext(
        statuses=StatusResolver(default_status=settings.default_status),
        media_type=settings.media_type,
    )
    for identifier, status in _load_status_overrides(settings).items():
        context.register_status(identifier, status)  # type: ignore[arg-type]
    return context
