import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request

from storefront.utils.rate_limit import optional_rate_limit
from storefront.catalog import service as catalog_service
from storefront.catalog.repository import CatalogRepository, get_catalog_repository
from .models import AddItemRequest, UpdateQuantityRequest
from .store import CartStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])


def get_cart(request: Request, repo: CatalogRepository = Depends(get_catalog_repository)) -> CartStore:
    """Panier de la session navigateur courante; nom, prix et image relus au catalogue."""
    return CartStore(request.session, resolve=lambda ids: catalog_service.load_cart_products(repo, ids))


# module storefront.cart.views
@router.get("")
def read_cart(cart: CartStore = Depends(get_cart)) -> Dict[str, Any]:
    return cart.to_payload()


@router.get("/count")
def read_cart_count(cart: CartStore = Depends(get_cart)) -> Dict[str, Any]:
    # Badge du header
    return {"count": cart.get_total_items()}


@router.post("/items", dependencies=[Depends(optional_rate_limit(times=60, seconds=60))])
def add_item(
    body: AddItemRequest,
    cart: CartStore = Depends(get_cart),
    repo: CatalogRepository = Depends(get_catalog_repository),
) -> Dict[str, Any]:
    """
    Ajoute un produit du catalogue au panier.
    - Le prix est toujours relu côté catalogue (jamais celui du client).
    - 404 si le produit est inconnu.
    """
    product = catalog_service.get_product_detail(repo, body.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    item = cart.add_to_cart(catalog_service.to_cart_product(product))
    logger.info("cart.add_item id=%s quantity=%s", item.id, item.quantity)
    return {"item": item.model_dump(), "cart": cart.to_payload()}


@router.patch("/items/{item_id}", dependencies=[Depends(optional_rate_limit(times=60, seconds=60))])
def update_item(item_id: str, body: UpdateQuantityRequest, cart: CartStore = Depends(get_cart)) -> Dict[str, Any]:
    # CartError (quantité < 1) est converti en 400 par le handler global
    updated = cart.update_quantity(item_id, body.quantity)
    return {"updated": updated, "cart": cart.to_payload()}


@router.delete("/items/{item_id}")
def delete_item(item_id: str, cart: CartStore = Depends(get_cart)) -> Dict[str, Any]:
    removed = cart.remove_from_cart(item_id)
    return {"removed": removed, "cart": cart.to_payload()}


@router.delete("")
def clear(cart: CartStore = Depends(get_cart)) -> Dict[str, Any]:
    cart.clear_cart()
    return cart.to_payload()
