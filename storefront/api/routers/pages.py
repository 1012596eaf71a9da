# storefront/api/routers/pages.py
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from storefront.api.deps import get_cart_store, get_repo, get_session_id
from storefront.repos.base import StorefrontRepo
from storefront.repos.cart_store import CartStore
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.utils import settings

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_currency(value) -> str:
    return f"${float(value or 0):,.2f}"


templates.env.filters["currency"] = format_currency

router = APIRouter(tags=["pages"], default_response_class=HTMLResponse)


def render(
    request: Request,
    template: str,
    session_id: str,
    cart_store: CartStore,
    repo: StorefrontRepo,
    status_code: int = 200,
    **context,
):
    cart = CartService(repo, cart_store).read(session_id)
    return templates.TemplateResponse(
        request,
        template,
        {"cart_count": cart.count, "store_name": settings.STORE_NAME, **context},
        status_code=status_code,
    )


@router.get("/")
def index(
    request: Request,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    featured = CatalogService(repo).list_featured()
    return render(request, "index.html", session_id, cart_store, repo, featured=featured)


@router.get("/products")
def products(
    request: Request,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    items = CatalogService(repo).list_products()
    return render(request, "products.html", session_id, cart_store, repo, products=items)


@router.get("/products/{product_id}")
def product(
    product_id: str,
    request: Request,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    found = repo.get_product(product_id)
    return render(
        request,
        "product.html",
        session_id,
        cart_store,
        repo,
        status_code=200 if found else 404,
        product=found,
    )


@router.get("/admin")
def admin(
    request: Request,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    items = CatalogService(repo).list_products()
    return render(request, "admin.html", session_id, cart_store, repo, products=items)


def _static_page(template: str):
    def page(
        request: Request,
        session_id: str = Depends(get_session_id),
        repo: StorefrontRepo = Depends(get_repo),
        cart_store: CartStore = Depends(get_cart_store),
    ):
        return render(request, template, session_id, cart_store, repo)

    return page


router.add_api_route("/services", _static_page("services.html"), methods=["GET"])
router.add_api_route("/contact", _static_page("contact.html"), methods=["GET"])


@router.get("/cart")
def cart(
    request: Request,
    session_id: str = Depends(get_session_id),
    repo: StorefrontRepo = Depends(get_repo),
    cart_store: CartStore = Depends(get_cart_store),
):
    current = CartService(repo, cart_store).read(session_id)
    return render(request, "cart.html", session_id, cart_store, repo, cart=current)
