from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from error_boundary.api.deps import get_error_context
from error_boundary.core.context import ErrorContext


router = APIRouter(prefix="/v1/errors", tags=["errors"])


class ErrorCatalogEntry(BaseModel):
    code: str
    template: str
    status: int


@router.get("", response_model=list[ErrorCatalogEntry])
async def list_errors(
    context: ErrorContext = Depends(get_error_context),
) -> list[ErrorCatalogEntry]:
    # Read-only view so API callers can discover the stable identifiers.
    return [
        ErrorCatalogEntry(
            code=descriptor.identifier,
            template=descriptor.template,
            status=context.statuses.resolve(descriptor.identifier),
        )
        for descriptor in context.registry.all()
    ]
