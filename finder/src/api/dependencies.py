from fastapi import Depends, HTTPException, Request

from core.pagination import BrowseController
from services.sessions import SessionRegistry


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


async def get_controller(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> BrowseController:
    try:
        return registry.get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown session")
