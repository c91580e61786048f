from fastapi import APIRouter

from ..settings import APP_NAME, APP_VERSION

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/version")
def version():
    return {"app": APP_NAME, "version": APP_VERSION}
