from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from storefront.utils.security import require_admin
from . import service as catalog_service
from .models import ProductIn
from .repository import CatalogRepository, get_catalog_repository

router = APIRouter(prefix="/api/v1/products", tags=["Catalog API"])
admin_router = APIRouter(prefix="/api/v1/admin/products", tags=["Catalog Admin"])


# module storefront.catalog.views
@router.get("")
def list_products(category: Optional[str] = None, repo: CatalogRepository = Depends(get_catalog_repository)):
    return {"items": catalog_service.list_products_with_images(repo, category)}


@router.get("/categories")
def list_categories(repo: CatalogRepository = Depends(get_catalog_repository)):
    return {"categories": catalog_service.list_categories(repo)}


@router.get("/{product_id}")
def get_product(product_id: str, repo: CatalogRepository = Depends(get_catalog_repository)) -> Dict[str, Any]:
    product = catalog_service.get_product_detail(repo, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# API JSON admin
@admin_router.get("")
def admin_list_products(user: dict = Depends(require_admin), repo: CatalogRepository = Depends(get_catalog_repository)):
    return JSONResponse({"items": repo.list_products() or []})


@admin_router.post("", status_code=201)
def admin_create_product(payload: ProductIn, user: dict = Depends(require_admin), repo: CatalogRepository = Depends(get_catalog_repository)):
    saved = catalog_service.save_product(repo, payload)
    if not saved:
        raise HTTPException(status_code=400, detail="Product not saved")
    return {"item": saved, "message": "Product created"}


@admin_router.put("/{product_id}")
def admin_update_product(product_id: str, payload: ProductIn, user: dict = Depends(require_admin), repo: CatalogRepository = Depends(get_catalog_repository)):
    saved = catalog_service.save_product(repo, payload, product_id=product_id)
    if not saved:
        raise HTTPException(status_code=400, detail="Product not saved")
    return {"item": saved, "message": "Product updated"}


@admin_router.delete("/{product_id}")
def admin_delete_product(product_id: str, user: dict = Depends(require_admin), repo: CatalogRepository = Depends(get_catalog_repository)):
    if not catalog_service.delete_product(repo, product_id):
        return JSONResponse({"ok": False}, status_code=400)
    return JSONResponse({"ok": True})
