from fastapi import Request, HTTPException, Depends
from typing import Optional, Dict, Any
import logging

from storefront.config import ADMIN_EMAILS
from storefront.infra.supabase_client import get_supabase

logger = logging.getLogger(__name__)

COOKIE_NAME = "sb_access"

def determine_role(email: Optional[str], metadata: Dict[str, Any] | None) -> str:
    """
    Rôle applicatif:
    - "admin" si metadata.role == "admin" ou si l'email figure dans ADMIN_EMAILS
    - "user" sinon
    """
    if str((metadata or {}).get("role", "")).lower() == "admin":
        return "admin"
    if email and email.strip().lower() in ADMIN_EMAILS:
        return "admin"
    return "user"

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l’utilisateur depuis supabase.auth.get_user(access_token)."""
    res = get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None)
    if not user:
        return {}
    email = getattr(user, "email", None)
    metadata = getattr(user, "user_metadata", None) or {}
    return {
        "id": getattr(user, "id", None),
        "email": email,
        "metadata": metadata,
        "role": determine_role(email, metadata),
    }

def get_current_user(request: Request) -> Dict[str, Any]:
    # Hybride: priorité au Bearer, fallback cookie
    token = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get(COOKIE_NAME)

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        user = get_user_from_token(token)
        if not user.get("id"):
            raise HTTPException(status_code=401, detail="Session expired, please sign in")
        return user
    except HTTPException:
        raise
    except Exception:
        logger.exception("utils.security.get_current_user failed")
        raise HTTPException(status_code=401, detail="Session expired, please sign in")

def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="You need admin privileges to access this page.")
    return user
