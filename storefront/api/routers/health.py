from fastapi import APIRouter

from storefront.utils import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "backend": settings.STOREFRONT_BACKEND}
