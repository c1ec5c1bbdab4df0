from datetime import tzinfo

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from pactweb.api.errors import page_errors
from pactweb.core.deps import get_backend, get_display_tz
from pactweb.core.identity import Identity, Viewer, get_viewer, require_identity
from pactweb.schemas.activity_log import ActivityLogDetailResponse, MediaLinkOut
from pactweb.schemas.common import RedirectOut
from pactweb.services.backend_client import PactBackendClient, UploadPart
from pactweb.services.formatting import format_date
from pactweb.services.uploads import validate_uploads
from pactweb.services.week_view import week_href

router = APIRouter(prefix="/pact/{pact_id}", tags=["activity-log"])

UPLOAD_FAILED = "Failed to save activity log."


@router.post("/logs", response_model=RedirectOut, status_code=status.HTTP_201_CREATED)
async def create_log(
    pact_id: str,
    activity_id: str = Form(..., alias="activityId", min_length=1),
    notes: str | None = Form(default=None),
    files: list[UploadFile] | None = File(default=None),
    identity: Identity = Depends(require_identity),
    backend: PactBackendClient = Depends(get_backend),
):
    parts = []
    for upload in files or []:
        parts.append(
            UploadPart(
                filename=upload.filename or "upload",
                content=await upload.read(),
                content_type=upload.content_type or "application/octet-stream",
            )
        )

    problem = validate_uploads(parts)
    if problem:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"errors": {"files": problem}},
        )

    # Upload failures are shown as a blocking alert with a fixed message.
    with page_errors(UPLOAD_FAILED, presentation="alert", use_server_message=False):
        await backend.create_activity_log(identity, pact_id, activity_id, parts, notes=notes or None)
    return RedirectOut(redirect_to=week_href(pact_id))


def _media_out(files) -> list[MediaLinkOut]:
    return [
        MediaLinkOut(
            name=f.name,
            mime_type=f.mime_type,
            view_link=f.web_view_link,
            content_link=f.web_content_link,
        )
        for f in files
    ]


@router.get("/log/{log_id}", response_model=ActivityLogDetailResponse)
async def log_detail(
    pact_id: str,
    log_id: str,
    viewer: Viewer = Depends(get_viewer),
    backend: PactBackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_tz),
) -> ActivityLogDetailResponse:
    with page_errors("Activity log not found"):
        log = await backend.get_activity_log(viewer, log_id)

    return ActivityLogDetailResponse(
        id=log.id,
        activity_id=log.activity_id,
        occurred_at=log.occurred_at,
        occurred_label=format_date(log.occurred_at, tz) if log.occurred_at else "Not set",
        notes=log.notes,
        verified=log.verified,
        images=_media_out(f for f in log.images if f.is_image),
        files=_media_out(f for f in log.images if not f.is_image),
        back_href=week_href(pact_id),
    )
