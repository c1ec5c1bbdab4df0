from fastapi import APIRouter, Depends, HTTPException, Query, status

from pactweb.api.errors import page_errors
from pactweb.core.aio import gather_or_cancel
from pactweb.core.deps import get_backend
from pactweb.core.identity import Identity, IdentityRequired, Viewer, get_viewer, require_identity
from pactweb.schemas.activity import Activity, ActivityCreatePayload, ActivityCreateRequest
from pactweb.schemas.common import RedirectOut
from pactweb.services import pact_rules
from pactweb.services.backend_client import PactBackendClient

router = APIRouter(prefix="/pact/{pact_id}/activities", tags=["activity"])


@router.get("", response_model=list[Activity])
async def list_activities(
    pact_id: str,
    mine: bool = Query(default=True),
    viewer: Viewer = Depends(get_viewer),
    backend: PactBackendClient = Depends(get_backend),
) -> list[Activity]:
    if mine and not isinstance(viewer, Identity):
        raise IdentityRequired()
    with page_errors("Failed to load activities."):
        if mine:
            return await backend.list_user_activities(viewer, pact_id)
        return await backend.list_activities(viewer, pact_id)


@router.post("", response_model=RedirectOut, status_code=status.HTTP_201_CREATED)
async def create_activity(
    pact_id: str,
    payload: ActivityCreateRequest,
    identity: Identity = Depends(require_identity),
    backend: PactBackendClient = Depends(get_backend),
) -> RedirectOut:
    with page_errors("Failed to create activity. Please try again."):
        pact, activities = await gather_or_cancel(
            backend.get_pact(identity, pact_id),
            backend.list_user_activities(identity, pact_id),
        )
        if not pact_rules.can_add_activity(pact, activities):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=pact_rules.activity_limit_message(pact))

        description = payload.description if payload.description and payload.description.strip() else None
        await backend.create_activity(
            identity,
            ActivityCreatePayload(
                pact_id=pact.id,
                user_id=identity.user_id,
                name=payload.name,
                description=description,
                number_of_days=payload.number_of_days,
                is_primary=payload.is_primary,
            ),
        )
    return RedirectOut(redirect_to=f"/pact/{pact_id}")
