from fastapi import APIRouter, status

from gatepass import __version__

router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness probe"""
    return {"status": "ok", "version": __version__}
