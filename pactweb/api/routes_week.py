from datetime import date, tzinfo

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from pactweb.api.errors import page_errors
from pactweb.core.aio import gather_or_cancel
from pactweb.core.deps import get_backend, get_display_tz
from pactweb.core.identity import Identity, require_identity
from pactweb.core.tz import today_in
from pactweb.render.week_page import render_week_page
from pactweb.schemas.week import WeekViewResponse
from pactweb.services.backend_client import PactBackendClient
from pactweb.services.week_view import build_week_view, week_href
from pactweb.services.week_window import day_key

router = APIRouter(prefix="/pact/{pact_id}/week", tags=["week"])


async def _load_week(
    pact_id: str,
    today: date | None,
    identity: Identity,
    backend: PactBackendClient,
    tz: tzinfo,
) -> WeekViewResponse:
    # "today" is fixed once per page; refetches pass it back so the window never drifts.
    current = today or today_in(tz)
    with page_errors("Failed to load week view."):
        pact, logs = await gather_or_cancel(
            backend.get_pact(identity, pact_id),
            backend.get_user_logs(identity, pact_id),
        )
    return build_week_view(pact, logs, current, tz)


@router.get("", response_model=WeekViewResponse)
async def week_view(
    pact_id: str,
    today: date | None = Query(default=None),
    identity: Identity = Depends(require_identity),
    backend: PactBackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_tz),
) -> WeekViewResponse:
    return await _load_week(pact_id, today, identity, backend, tz)


@router.get("/page", response_class=HTMLResponse)
async def week_page(
    pact_id: str,
    today: date | None = Query(default=None),
    identity: Identity = Depends(require_identity),
    backend: PactBackendClient = Depends(get_backend),
    tz: tzinfo = Depends(get_display_tz),
) -> HTMLResponse:
    view = await _load_week(pact_id, today, identity, backend, tz)
    refresh_url = f"{week_href(pact_id)}?today={day_key(view.today)}"
    return HTMLResponse(render_week_page(view, refresh_url))
