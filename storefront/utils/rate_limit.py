from typing import Dict, Any
from urllib.parse import urlparse
from fastapi import Request, Response, HTTPException
import os
import time
import logging

logger = logging.getLogger(__name__)

def _client_key(request: Request) -> str:
    # IP (réelle via ProxyHeadersMiddleware) + path. Aucun cookie: le client les choisit, et "session" change à chaque réponse
    ip = request.client.host if request.client else "local"
    return f"ip:{ip}:{request.url.path}"

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance de rate limiting tolérante:
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (app.state._rl_store)
    - app.state.rate_limit_enabled False: aucun contrôle
    - sinon fastapi-limiter (Redis); un échec du limiteur ne bloque jamais la requête
    """
    async def _dep(request: Request, response: Response):
        # Forcer le fallback mémoire en DEV si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        # Respecter le flag global
        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        from fastapi_limiter.depends import RateLimiter

        async def _identifier(req: Request) -> str:
            return _client_key(req)

        try:
            return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception:
            # Redis indisponible (ex: SCRIPT non supporté): pas de 429 en prod
            logger.warning("utils.rate_limit limiter unavailable path=%s", request.url.path)
            return
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    from fastapi_limiter import FastAPILimiter
    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    backend = "redis" if limiter_ready else None
    if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
        backend = "memory"

    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": backend,
    }

    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if limiter_ready and redis_url:
        p = urlparse(redis_url)
        info["redis"] = {
            "scheme": p.scheme,
            "host": p.hostname,
            "port": p.port,
        }

    return info
