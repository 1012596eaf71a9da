from fastapi import APIRouter, Depends, HTTPException, Request

from storefront.api.deps import get_payment_client
from storefront.domain.errors import InvalidRequestError, UpstreamUnavailableError
from storefront.domain.schemas import PaymentSessionIn, PaymentSessionOut
from storefront.services.payment_client import PaymentClient

router = APIRouter(tags=["payments"])


@router.post("/create-checkout-session", response_model=PaymentSessionOut)
def create_checkout_session(
    payload: PaymentSessionIn,
    request: Request,
    client: PaymentClient = Depends(get_payment_client),
):
    """Hands the browser cart to the payment gateway and returns its redirect url."""
    try:
        url = client.create_checkout_session(payload.cart, str(request.base_url))
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UpstreamUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"url": url}
