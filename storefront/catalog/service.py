"""
Cas d'usage 'catalog': vitrine (produits + image principale, catégories, fiche)
et sauvegarde admin (produit puis images).
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from storefront.cart.models import CartProduct
from .models import ProductIn
from .repository import CatalogRepository

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


def list_products_with_images(repo: CatalogRepository, category: Optional[str] = None) -> List[Dict[str, Any]]:
    """Produits enrichis de leur image principale ("" si aucune). "All" = pas de filtre."""
    if category == ALL_CATEGORIES:
        category = None
    products = repo.list_products(category)
    images = repo.get_primary_image_urls([str(p.get("id")) for p in products])
    return [{**p, "image": images.get(str(p.get("id"))) or ""} for p in products]


def load_cart_products(repo: CatalogRepository, product_ids: Sequence[str]) -> Dict[str, CartProduct]:
    """Relit au catalogue les produits d'un panier (deux requêtes, quel que soit le nombre de lignes)."""
    ids = list(dict.fromkeys(product_ids))
    if not ids:
        return {}
    images = repo.get_primary_image_urls(ids)
    return {
        str(p.get("id")): to_cart_product({**p, "image": images.get(str(p.get("id"))) or ""})
        for p in repo.get_products_by_ids(ids)
    }


def list_categories(repo: CatalogRepository) -> List[str]:
    """"All" suivi des catégories distinctes, dans l'ordre de première apparition."""
    categories = [ALL_CATEGORIES]
    for p in repo.list_products():
        c = p.get("category")
        if c and c not in categories:
            categories.append(c)
    return categories


def get_product_detail(repo: CatalogRepository, product_id: str) -> Optional[Dict[str, Any]]:
    product = repo.get_product(product_id)
    if not product:
        return None
    images = repo.list_product_images(product_id)
    primary = next((img for img in images if img.get("is_primary")), images[0] if images else None)
    return {
        **product,
        "images": [img.get("image_url") for img in images if img.get("image_url")],
        "image": (primary or {}).get("image_url") or "",
    }


def save_product(repo: CatalogRepository, payload: ProductIn, product_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Création (product_id absent) ou mise à jour d'un produit.
    - Les images ne sont remplacées que si la liste fournie est non vide.
    - Retourne le produit enregistré, ou None si l'écriture a échoué.
    """
    fields = payload.product_fields()
    if product_id:
        saved = repo.update_product(product_id, fields)
    else:
        saved = repo.create_product(fields)
    if not saved:
        return None
    saved_id = str(saved.get("id") or product_id)
    if payload.images:
        if not repo.replace_product_images(saved_id, payload.images):
            logger.warning("catalog.service.save_product images not saved product_id=%s", saved_id)
            return None
    return saved


def delete_product(repo: CatalogRepository, product_id: str) -> bool:
    return repo.delete_product(product_id)


def to_cart_product(product: Dict[str, Any]) -> CartProduct:
    return CartProduct(
        id=str(product.get("id")),
        name=product.get("name") or "",
        price=float(product.get("price") or 0),
        category=product.get("category") or "",
        image=product.get("image") or "",
    )
