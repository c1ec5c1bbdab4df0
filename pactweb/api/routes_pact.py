import logging
from datetime import tzinfo

from fastapi import APIRouter, Depends, HTTPException, Response, status

from pactweb.api.errors import page_errors
from pactweb.core.aio import gather_or_cancel
from pactweb.core.deps import get_backend, get_display_tz
from pactweb.core.identity import Identity, Viewer, get_viewer, remember_current_pact, require_identity
from pactweb.schemas.activity import Activity
from pactweb.schemas.activity_log import UserProgress
from pactweb.schemas.common import RedirectOut
from pactweb.schemas.pact import PactCreateRequest, PactDetailResponse, PactListResponse
from pactweb.services import pact_rules
from pactweb.services.backend_client import BackendError, PactBackendClient
from pactweb.services.week_view import week_href

logger = logging.getLogger("pactweb.pacts")

router = APIRouter(tags=["pact"])

NO_ACTIVE_PACTS = "There are currently no active pacts. Please create new!"


async def _progress_or_none(backend: PactBackendClient, viewer: Viewer) -> UserProgress | None:
    if not isinstance(viewer, Identity):
        return None
    try:
        return await backend.get_progress(viewer)
    except BackendError as exc:
        # Progress badges are optional decoration on the list page.
        logger.warning("progress unavailable for %s: %s", viewer.user_id, exc)
        return None


@router.get("/pacts", response_model=PactListResponse)
async def list_pacts(
    viewer: Viewer = Depends(get_viewer),
    backend: PactBackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_tz),
) -> PactListResponse:
    with page_errors("Failed to load pacts. Please try again later."):
        pacts, progress = await gather_or_cancel(
            backend.list_active_pacts(viewer),
            _progress_or_none(backend, viewer),
        )

    user_id = viewer.user_id if isinstance(viewer, Identity) else None
    by_pact = pact_rules.progress_map(progress)
    mine, explore = pact_rules.split_by_membership(pacts, user_id)
    return PactListResponse(
        your_pacts=[pact_rules.to_card(p, week_href(p.id), by_pact.get(p.id), tz) for p in mine],
        explore_pacts=[pact_rules.to_card(p, f"/pact/{p.id}", by_pact.get(p.id), tz) for p in explore],
        empty_message=None if pacts else NO_ACTIVE_PACTS,
    )


@router.post("/pacts", response_model=RedirectOut, status_code=status.HTTP_201_CREATED)
async def create_pact(
    payload: PactCreateRequest,
    viewer: Viewer = Depends(get_viewer),
    backend: PactBackendClient = Depends(get_backend),
) -> RedirectOut:
    if payload.description is not None and not payload.description.strip():
        payload = payload.model_copy(update={"description": None})
    with page_errors("Failed to create pact. Please try again."):
        await backend.create_pact(viewer, payload)
    return RedirectOut(redirect_to="/pacts")


async def _user_activities(backend: PactBackendClient, viewer: Viewer, pact_id: str) -> list[Activity]:
    if not isinstance(viewer, Identity):
        return []
    return await backend.list_user_activities(viewer, pact_id)


@router.get("/pact/{pact_id}", response_model=PactDetailResponse)
async def pact_detail(
    pact_id: str,
    viewer: Viewer = Depends(get_viewer),
    backend: PactBackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_tz),
) -> PactDetailResponse:
    with page_errors("Pact not found"):
        pact, activities = await gather_or_cancel(
            backend.get_pact(viewer, pact_id),
            _user_activities(backend, viewer, pact_id),
        )

    return PactDetailResponse(
        pact=pact_rules.to_pact_out(pact, tz),
        activities=activities,
        can_add_more_activities=pact_rules.can_add_activity(pact, activities),
        show_confirm_join=pact_rules.can_confirm_join(pact, activities),
        action_label=pact_rules.action_label(pact, activities),
        slots_message=pact_rules.slots_message(pact, activities),
    )


@router.post("/pact/{pact_id}/join", response_model=RedirectOut)
async def join_pact(
    pact_id: str,
    response: Response,
    identity: Identity = Depends(require_identity),
    backend: PactBackendClient = Depends(get_backend),
) -> RedirectOut:
    with page_errors("Failed to join pact. Please try again."):
        pact, activities = await gather_or_cancel(
            backend.get_pact(identity, pact_id),
            backend.list_user_activities(identity, pact_id),
        )
        if not pact_rules.can_confirm_join(pact, activities):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=pact_rules.slots_message(pact, activities),
            )
        await backend.join_pact(identity, pact.id, [a.id for a in activities])

    remember_current_pact(response, pact.id)
    return RedirectOut(redirect_to="/pacts")
