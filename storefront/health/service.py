import logging
from typing import Any, Dict

from storefront.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY
from storefront.infra.supabase_client import get_supabase

logger = logging.getLogger(__name__)

def health_supabase_info() -> Dict[str, Any]:
    """
    État de la connexion Supabase:
    - configured: URL + clé anon présentes
    - reachable: une lecture minimale de `products` aboutit
    """
    info: Dict[str, Any] = {
        "configured": bool(SUPABASE_URL and SUPABASE_ANON),
        "service_key": bool(SUPABASE_SERVICE_KEY),
        "url": SUPABASE_URL or None,
        "reachable": False,
    }
    if not info["configured"]:
        return info
    try:
        get_supabase().table("products").select("id").limit(1).execute()
        info["reachable"] = True
    except Exception as e:
        logger.exception("health.service.health_supabase_info failed")
        info["error"] = str(e)
    return info
