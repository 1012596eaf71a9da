# storefront/api/routers/admin.py
from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.api.deps import get_repo
from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.schemas import ProductIn, ProductOut
from storefront.repos.base import StorefrontRepo
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/admin/products", tags=["admin"])


@router.post("", response_model=ProductOut, status_code=201)
def add_product(payload: ProductIn, repo: StorefrontRepo = Depends(get_repo)):
    try:
        return {"product": CatalogService(repo).add_product(payload)}
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{product_id}", status_code=204)
def remove_product(product_id: str, repo: StorefrontRepo = Depends(get_repo)):
    CatalogService(repo).remove_product(product_id)
    return Response(status_code=204)


@router.post("/{product_id}/feature", response_model=ProductOut)
def toggle_featured(product_id: str, repo: StorefrontRepo = Depends(get_repo)):
    try:
        return {"product": CatalogService(repo).toggle_featured(product_id)}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
