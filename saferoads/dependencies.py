from fastapi import Request

from saferoads.portal.state import PortalState


async def get_portal_state(request: Request) -> PortalState:
    return request.app.state.portal
