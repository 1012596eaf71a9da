# storefront/api/routers/support.py
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_chat_service
from storefront.domain.errors import UpstreamUnavailableError
from storefront.domain.schemas import ChatIn, ChatOut, LocationOut
from storefront.services.chat_client import ChatService
from storefront.utils import settings

router = APIRouter(prefix="/api", tags=["support"])


@router.post("/chat", response_model=ChatOut)
def chat(payload: ChatIn, svc: ChatService = Depends(get_chat_service)):
    try:
        return {"reply": svc.reply(payload.message)}
    except UpstreamUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/location", response_model=LocationOut)
def location():
    return LocationOut(
        name=settings.STORE_NAME,
        address=settings.STORE_ADDRESS,
        phone=settings.STORE_PHONE,
        hours=settings.STORE_HOURS,
        map_url=f"https://maps.google.com/?q={quote(settings.STORE_ADDRESS)}",
    )
