from __future__ import annotations

import logging

from fastapi import FastAPI
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from error_boundary.core.context import ErrorContext


logger = logging.getLogger(__name__)

# Exception subclasses the host must see unchanged. BaseException-only
# failures (KeyboardInterrupt, SystemExit, CancelledError) are never caught.
FATAL_FAILURES: tuple[type[BaseException], ...] = (MemoryError, RecursionError)


class ErrorBoundaryMiddleware:
    """Converts any failure escaping the downstream app into a JSON error body.

    A request that completes normally passes through untouched. A failure
    raised after the response has started cannot be converted; it is logged
    and re-raised to the host.
    """

    def __init__(self, app: ASGIApp, *, context: ErrorContext) -> None:
        self.app = app
        self.context = context

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, _send)
        except FATAL_FAILURES:
            raise
        except Exception as exc:
            method = scope.get("method")
            path = scope.get("path")
            if response_started:
                logger.error(
                    "Unhandled exception after response started (method=%s path=%s)",
                    method,
                    path,
                    exc_info=(type(exc), exc, exc.__traceback__),
                )
                raise

            status_code, payload = self.context.convert(exc)
            logger.error(
                "Unhandled exception (code=%s status=%d method=%s path=%s): %s",
                payload.code,
                status_code,
                method,
                path,
                payload.message,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
            response = Response(
                content=payload.to_json(),
                status_code=status_code,
                media_type=self.context.media_type,
            )
            await response(scope, receive, send)


def install_error_boundary(app: FastAPI, context: ErrorContext) -> None:
    """Wrap ``app``'s handler chain with the boundary and expose ``context``."""

    app.state.error_context = context
    app.add_middleware(ErrorBoundaryMiddleware, context=context)
