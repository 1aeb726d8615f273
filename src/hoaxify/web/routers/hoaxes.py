from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from hoaxify.core.modules.hoax.models import HoaxView
from hoaxify.core.pagination import PageRequest, PageResult
from hoaxify.web.deps import AppDep, IdentityDep
from hoaxify.web.openapi import ErrorResponse

router = APIRouter(tags=["hoaxes"])


class CreateHoaxRequest(BaseModel):
    content: str | None = Field(None, description="Hoax text, 10 to 5000 characters")
    attachment_id: UUID | None = Field(None, description="Previously uploaded attachment to include")


@router.post(
    "/hoaxes",
    summary="Post hoax",
    operation_id="createHoax",
    responses={
        200: {"description": "Hoax saved"},
        400: {"model": ErrorResponse, "description": "Invalid content or attachment already used"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Attachment not found"},
    },
)
async def create_hoax(request: CreateHoaxRequest, app: AppDep, identity: IdentityDep) -> None:
    await app.create_hoax(identity, request.content, request.attachment_id)


@router.get(
    "/hoaxes",
    summary="List hoaxes",
    description="Get a page of hoaxes from all users, newest first.",
    operation_id="listHoaxes",
)
async def list_hoaxes(
    app: AppDep,
    page: Annotated[str | None, Query(description="Zero-based page index")] = None,
    size: Annotated[str | None, Query(description="Page size, 1 to 100")] = None,
) -> PageResult[HoaxView]:
    return await app.get_hoaxes(PageRequest.parse(page, size))


@router.delete(
    "/hoaxes/{hoax_id}",
    summary="Delete hoax",
    operation_id="deleteHoax",
    status_code=204,
    responses={
        204: {"description": "Hoax deleted"},
        403: {"model": ErrorResponse, "description": "Not the author of this hoax"},
        404: {"model": ErrorResponse, "description": "Hoax not found"},
    },
)
async def delete_hoax(hoax_id: UUID, app: AppDep, identity: IdentityDep) -> None:
    await app.delete_hoax(identity, hoax_id)
