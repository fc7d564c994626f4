from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    registry = getattr(request.app.state, "registry", None)
    return {"status": "ok", "sessions": len(registry) if registry is not None else 0}
