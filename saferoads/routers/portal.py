from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import HTMLResponse

from saferoads.dependencies import get_portal_state
from saferoads.portal import render
from saferoads.portal.flow import check_visibility, report_road_segment, submit_photo
from saferoads.portal.state import Mode, PortalState

router = APIRouter(prefix="/portal", tags=["portal"], default_response_class=HTMLResponse)


def _with_notifications(state: PortalState, html: str) -> str:
    return html + render.render_notifications(state.drain_notifications())


@router.get("")
async def portal(state: PortalState = Depends(get_portal_state)):
    return render.render_portal(state)


@router.post("/mode/{mode}")
async def switch_mode(mode: Mode, state: PortalState = Depends(get_portal_state)):
    state.switch_mode(mode)
    return render.render_portal(state)


@router.get("/sections/{name}")
async def show_section(name: str, q: str = "", state: PortalState = Depends(get_portal_state)):
    await state.show_section(name)
    if name == "tenders" and q:
        state.filter_projects(q)
    return _with_notifications(state, render.render_portal(state))


@router.post("/location")
async def set_location(
    lat: float | None = Form(None),
    lng: float | None = Form(None),
    state: PortalState = Depends(get_portal_state),
):
    if lat is None or lng is None:
        state.use_default_location()
    else:
        state.set_location(lat, lng)
    return _with_notifications(state, await check_visibility(state))


@router.post("/upload")
async def upload(image: UploadFile = File(...), state: PortalState = Depends(get_portal_state)):
    result = await submit_photo(state, image)
    return _with_notifications(state, result.html)


@router.post("/segments")
async def report_segment(
    start_lat: float = Form(...),
    start_lng: float = Form(...),
    end_lat: float = Form(...),
    end_lng: float = Form(...),
    state: PortalState = Depends(get_portal_state),
):
    report_road_segment(state, (start_lat, start_lng), (end_lat, end_lng))
    return _with_notifications(state, render.render_priority_table(state.reports))


@router.get("/weather")
async def weather(state: PortalState = Depends(get_portal_state)):
    return _with_notifications(state, await check_visibility(state))
