from __future__ import annotations

from pathlib import Path
import sys

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


# Ensure `import error_boundary.*` works when pytest chooses an import mode
# that doesn't automatically add the project root to sys.path.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


class OrderNotFound(Exception):
    pass


class SpecialValueError(ValueError):
    pass


def _add_failing_routes(app: FastAPI) -> None:
    @app.get("/ok")
    async def ok() -> dict[str, str]:
        return {"status": "fine"}

    @app.get("/fail/value")
    async def fail_value(detail: str = "user@bad") -> None:
        raise ValueError(detail)

    @app.get("/fail/runtime")
    async def fail_runtime() -> None:
        raise RuntimeError("boom")

    @app.get("/fail/subclass")
    async def fail_subclass() -> None:
        raise SpecialValueError("age")

    @app.get("/fail/order")
    async def fail_order() -> None:
        raise OrderNotFound("order-42")

    @app.get("/fail/sync")
    def fail_sync() -> None:
        raise PermissionError("/admin")

    @app.get("/fail/recursion")
    async def fail_recursion() -> None:
        raise RecursionError("maximum recursion depth exceeded")

    @app.get("/fail/memory")
    async def fail_memory() -> None:
        raise MemoryError()


@pytest.fixture()
def settings_env(monkeypatch: pytest.MonkeyPatch):
    # Keep tests independent of the developer's environment.
    for name in (
        "ERROR_BOUNDARY_DEFAULT_STATUS",
        "ERROR_BOUNDARY_MEDIA_TYPE",
        "ERROR_BOUNDARY_STATUS_OVERRIDES_JSON",
        "ERROR_BOUNDARY_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    from error_boundary.core.settings import get_settings

    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture()
def context(settings_env):
    from error_boundary.core.context import create_error_context

    return create_error_context()


@pytest.fixture()
def app(context) -> FastAPI:
    from error_boundary.main import create_app

    app = create_app(context)
    _add_failing_routes(app)
    return app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    # The boundary must absorb failures itself; anything it lets through
    # surfaces in the test as a raised exception.
    return TestClient(app, raise_server_exceptions=True)


@pytest.fixture()
def failures():
    """Exception classes raised by the failing routes."""

    from types import SimpleNamespace

    return SimpleNamespace(OrderNotFound=OrderNotFound, SpecialValueError=SpecialValueError)
