from __future__ import annotations

import json
from dataclasses import dataclass

from error_boundary.core.descriptors import ErrorDescriptor
from error_boundary.core.errors import DescribedError


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}

    def to_json(self) -> bytes:
        # json.dumps escapes quotes, backslashes and every control character,
        # so the message can never break out of its string value.
        return json.dumps(
            self.to_dict(),
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")


def failure_detail(failure: BaseException) -> str:
    """Human-readable detail supplied by the failure itself (untrusted)."""

    detail = getattr(failure, "detail", None)
    if not isinstance(detail, str):
        if isinstance(failure, DescribedError):
            # str() of a DescribedError is its rendered template.
            detail = ""
        elif len(failure.args) == 1 and isinstance(failure.args[0], str):
            detail = failure.args[0]
        else:
            try:
                detail = str(failure)
            except Exception:
                detail = ""
    # Lone surrogates cannot be encoded as UTF-8.
    return detail.encode("utf-8", "replace").decode("utf-8")


class ErrorResponseBuilder:
    def build(self, descriptor: ErrorDescriptor, failure: BaseException) -> ErrorPayload:
        return ErrorPayload(
            code=descriptor.identifier,
            message=descriptor.render(failure_detail(failure)),
        )
