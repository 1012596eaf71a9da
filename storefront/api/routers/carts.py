#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_cart_store, get_repo, get_session_id
from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.schemas import CartItemIn, CartOut, CartRemoveIn
from storefront.repos.base import StorefrontRepo
from storefront.repos.cart_store import CartStore
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(repo: StorefrontRepo, cart_store: CartStore):
    return CartService(repo=repo, cart_store=cart_store)


@router.get("", response_model=CartOut)
def get_cart(
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(repo, cart_store)
    return svc.read(session_id)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(repo, cart_store)
    try:
        return svc.add(session_id, payload.product_id, payload.qty)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/update", response_model=CartOut)
def update_item(
    payload: CartItemIn,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(repo, cart_store)
    try:
        return svc.update(session_id, payload.product_id, payload.qty)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/remove", response_model=CartOut)
def remove_item(
    payload: CartRemoveIn,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    svc = get_service(repo, cart_store)
    try:
        return svc.remove(session_id, payload.product_id)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
