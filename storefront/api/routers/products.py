from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_repo
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductListOut, ProductOut
from storefront.repos.base import StorefrontRepo
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListOut)
def list_products(repo: StorefrontRepo = Depends(get_repo)):
    return {"products": CatalogService(repo).list_products()}


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, repo: StorefrontRepo = Depends(get_repo)):
    try:
        return {"product": CatalogService(repo).get_product(product_id)}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
