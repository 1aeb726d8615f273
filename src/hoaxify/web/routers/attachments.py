from uuid import UUID

from fastapi import APIRouter, UploadFile
from fastapi.responses import FileResponse

from hoaxify.core.modules.attachment.service import MAX_ATTACHMENT_SIZE
from hoaxify.core.modules.hoax.models import AttachmentView
from hoaxify.web.deps import AppDep, IdentityDep
from hoaxify.web.openapi import ErrorResponse

router = APIRouter(tags=["attachments"])


@router.post(
    "/hoaxes/attachments",
    summary="Upload attachment",
    description="Upload a file to include in a hoax. Returns the attachment ID to send with the hoax.",
    operation_id="uploadAttachment",
    responses={
        200: {"description": "Attachment stored"},
        400: {"model": ErrorResponse, "description": "File too large"},
    },
)
async def upload_attachment(file: UploadFile, app: AppDep, identity: IdentityDep) -> AttachmentView:
    # One byte over the limit is enough for the size check to reject it
    content = await file.read(MAX_ATTACHMENT_SIZE + 1)
    filename = file.filename or "unnamed"
    mime_type = file.content_type or "application/octet-stream"
    attachment = await app.upload_attachment(identity, filename, content, mime_type)
    return AttachmentView.from_domain(attachment)


@router.get(
    "/attachments/{attachment_id}",
    summary="Download attachment",
    operation_id="downloadAttachment",
    response_class=FileResponse,
    responses={
        200: {"description": "Attachment file"},
        404: {"model": ErrorResponse, "description": "Attachment not found"},
    },
)
async def download_attachment(attachment_id: UUID, app: AppDep) -> FileResponse:
    info = await app.get_attachment_file(attachment_id)
    return FileResponse(
        path=info.file_path,
        media_type=info.mime_type,
        filename=info.filename,
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )
