from __future__ import annotations

from fastapi import Request

from error_boundary.core.context import ErrorContext


def get_error_context(request: Request) -> ErrorContext:
    return request.app.state.error_context
