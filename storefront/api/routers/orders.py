# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_cart_store, get_repo, get_session_id
from storefront.domain.errors import ConflictError, InvalidRequestError, NotFoundError
from storefront.domain.schemas import CheckoutOut, ContactInfo, PurchaseOut
from storefront.repos.base import StorefrontRepo
from storefront.repos.cart_store import CartStore
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api", tags=["orders"])


def get_service(repo: StorefrontRepo, cart_store: CartStore):
    return OrderService(repo=repo, cart_store=cart_store)


@router.post("/checkout", response_model=CheckoutOut)
def checkout(
    payload: ContactInfo,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    """
    Stores the session cart as a purchase and empties the cart.
    """
    svc = get_service(repo, cart_store)
    try:
        return svc.checkout(session_id, payload)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/purchases/{purchase_id}", response_model=PurchaseOut)
def get_purchase(
    purchase_id: str,
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(repo, cart_store)
    try:
        #ids are integers, anything else can never match a purchase
        if not purchase_id.isdecimal():
            raise NotFoundError("Purchase not found")
        return svc.get_purchase(int(purchase_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
