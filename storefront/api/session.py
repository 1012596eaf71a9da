# storefront/api/session.py
import secrets

from fastapi import Request

from storefront.utils import settings


async def session_middleware(request: Request, call_next):
    """
    Give every browser an opaque session id cookie; carts are keyed by it.
    The cookie is re-sent on every response so it expires with the cart,
    CART_TTL_SECONDS after the last visit.
    """
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME) or secrets.token_urlsafe(24)
    request.state.session_id = session_id

    response = await call_next(request)

    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session_id,
        max_age=settings.CART_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )
    return response
