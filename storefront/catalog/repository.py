"""
Accès aux tables Supabase `products` et `product_images`.

Le reste de l'application ne dépend que du protocole CatalogRepository:
la dépendance FastAPI get_catalog_repository est remplacée par un dépôt
en mémoire dans les tests (app.dependency_overrides).
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from storefront.infra.supabase_client import get_supabase, get_service_supabase

logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    def list_products(self, category: Optional[str] = None) -> List[dict]: ...
    def get_product(self, product_id: str) -> Optional[dict]: ...
    def get_products_by_ids(self, product_ids: Sequence[str]) -> List[dict]: ...
    def get_primary_image_urls(self, product_ids: Sequence[str]) -> Dict[str, str]: ...
    def list_product_images(self, product_id: str) -> List[dict]: ...
    def create_product(self, data: Dict[str, Any]) -> Optional[dict]: ...
    def update_product(self, product_id: str, data: Dict[str, Any]) -> Optional[dict]: ...
    def delete_product(self, product_id: str) -> bool: ...
    def replace_product_images(self, product_id: str, urls: List[str]) -> bool: ...


# module storefront.catalog.repository
class SupabaseCatalogRepository:
    """Lectures via le client anon (RLS), écritures admin via le client service-role."""

    def list_products(self, category: Optional[str] = None) -> List[dict]:
        try:
            q = get_supabase().table("products").select("*")
            if category:
                q = q.eq("category", category)
            res = q.order("created_at", desc=True).execute()
            return res.data or []
        except Exception:
            logger.exception("catalog.repository.list_products failed category=%s", category)
            return []

    def get_product(self, product_id: str) -> Optional[dict]:
        try:
            res = (
                get_supabase()
                .table("products")
                .select("*")
                .eq("id", product_id)
                .limit(1)
                .execute()
            )
            rows = res.data or []
            return rows[0] if rows else None
        except Exception:
            logger.exception("catalog.repository.get_product failed id=%s", product_id)
            return None

    def get_products_by_ids(self, product_ids: Sequence[str]) -> List[dict]:
        ids = list(product_ids)
        if not ids:
            return []
        try:
            res = get_supabase().table("products").select("*").in_("id", ids).execute()
            return res.data or []
        except Exception:
            logger.exception("catalog.repository.get_products_by_ids failed ids=%s", ids)
            return []

    def get_primary_image_urls(self, product_ids: Sequence[str]) -> Dict[str, str]:
        """Une seule requête pour toute la liste: {product_id: image_url} des images principales."""
        ids = list(product_ids)
        if not ids:
            return {}
        try:
            res = (
                get_supabase()
                .table("product_images")
                .select("product_id,image_url")
                .in_("product_id", ids)
                .eq("is_primary", True)
                .execute()
            )
            urls: Dict[str, str] = {}
            for row in res.data or []:
                pid = str(row.get("product_id"))
                if row.get("image_url") and pid not in urls:
                    urls[pid] = row["image_url"]
            return urls
        except Exception:
            logger.exception("catalog.repository.get_primary_image_urls failed count=%s", len(ids))
            return {}

    def list_product_images(self, product_id: str) -> List[dict]:
        try:
            res = (
                get_supabase()
                .table("product_images")
                .select("*")
                .eq("product_id", product_id)
                .order("display_order")
                .execute()
            )
            return res.data or []
        except Exception:
            logger.exception("catalog.repository.list_product_images failed product_id=%s", product_id)
            return []

    def create_product(self, data: Dict[str, Any]) -> Optional[dict]:
        try:
            res = get_service_supabase().table("products").insert(data).execute()
            rows = res.data or []
            return rows[0] if rows else None
        except Exception:
            logger.exception("catalog.repository.create_product failed data=%s", data)
            return None

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Optional[dict]:
        try:
            res = get_service_supabase().table("products").update(data).eq("id", product_id).execute()
            rows = res.data or []
            return rows[0] if rows else None
        except Exception:
            logger.exception("catalog.repository.update_product failed id=%s data=%s", product_id, data)
            return None

    def delete_product(self, product_id: str) -> bool:
        try:
            get_service_supabase().table("products").delete().eq("id", product_id).execute()
            return True
        except Exception:
            logger.exception("catalog.repository.delete_product failed id=%s", product_id)
            return False

    def replace_product_images(self, product_id: str, urls: List[str]) -> bool:
        """
        Remplace toutes les images d'un produit:
        - supprime les lignes existantes
        - insère les nouvelles avec display_order = index et is_primary = (index == 0)
        """
        try:
            client = get_service_supabase()
            client.table("product_images").delete().eq("product_id", product_id).execute()
            rows = [
                {"product_id": product_id, "image_url": url, "display_order": i, "is_primary": i == 0}
                for i, url in enumerate(urls)
            ]
            if rows:
                client.table("product_images").insert(rows).execute()
            return True
        except Exception:
            logger.exception("catalog.repository.replace_product_images failed product_id=%s", product_id)
            return False


_repository: Optional[CatalogRepository] = None


def get_catalog_repository() -> CatalogRepository:
    global _repository
    if _repository is None:
        _repository = SupabaseCatalogRepository()
    return _repository
