from fastapi import Request, FastAPI
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from storefront.config import (
    SUPABASE_URL,
    COOKIE_SECURE,
    CORS_ORIGINS,
    ALLOWED_HOSTS,
    SESSION_SECRET_KEY,
    SESSION_MAX_AGE,
)

"""
Middlewares transverses de l’application.
- register_basic_middlewares: session (panier + checkout), CORS, TrustedHost et confiance en X-Forwarded-*.
- register_security_middleware: en-têtes de sécurité et CSP.
- register_no_cache_middleware: empêche la mise en cache des réponses liées à la session.
- register_force_https_middleware: force la redirection HTTPS (utile derrière proxy).
Notes:
- L’ordre d’ajout est important: le middleware HTTPS est ajouté en dernier pour s’exécuter en premier.
"""

# Réponses propres à la session navigateur
SESSION_PATH_PREFIXES = ("/api/v1/cart", "/api/v1/checkout", "/api/v1/admin")

def register_basic_middlewares(app: FastAPI) -> None:
    """
    Ajoute les middlewares « de base »:
    - SessionMiddleware: cookie de session signé (itsdangerous) portant le panier et la session de checkout.
    - CORSMiddleware: autorise les origines définies (dev/prod).
    - TrustedHostMiddleware: limite les hôtes acceptés (défense host header).
    - ProxyHeadersMiddleware: fait confiance aux en-têtes du proxy (x-forwarded-*).
    """
    app.add_middleware(
        SessionMiddleware,
        secret_key=SESSION_SECRET_KEY,
        max_age=SESSION_MAX_AGE,
        same_site="lax",
        https_only=COOKIE_SECURE,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=ALLOWED_HOSTS + ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS,
    )
    # Fait confiance aux en-têtes X-Forwarded-* (Render, Nginx, etc.)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

def register_security_middleware(app: FastAPI) -> None:
    """
    En-têtes de sécurité:
    - X-Frame-Options, X-Content-Type-Options, Referrer-Policy, Permissions-Policy, HSTS (si secure).
    - CSP: API JSON, seuls la doc Swagger (CDN) et Supabase sont autorisés.
    """
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        if "X-Frame-Options" not in response.headers:
            response.headers["X-Frame-Options"] = "DENY"
        if "X-Content-Type-Options" not in response.headers:
            response.headers["X-Content-Type-Options"] = "nosniff"
        if "Referrer-Policy" not in response.headers:
            response.headers["Referrer-Policy"] = "no-referrer"
        if "Permissions-Policy" not in response.headers:
            response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        if COOKIE_SECURE and "Strict-Transport-Security" not in response.headers:
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains; preload"

        csp_connect = ["'self'"]
        if SUPABASE_URL:
            csp_connect.append(SUPABASE_URL.rstrip("/"))
        swagger_cdns = ["https://cdn.jsdelivr.net", "https://fastapi.tiangolo.com"]
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
            f"img-src 'self' data: {' '.join(swagger_cdns)}; "
            f"style-src 'self' 'unsafe-inline' {' '.join(swagger_cdns)}; "
            f"script-src 'self' 'unsafe-inline' {' '.join(swagger_cdns)}; "
            f"connect-src {' '.join(csp_connect)}"
        )
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    """
    Empêche la mise en cache des réponses liées à la session (panier, checkout, admin).
    """
    @app.middleware("http")
    async def no_cache_for_session(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(SESSION_PATH_PREFIXES):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response

def register_force_https_middleware(app: FastAPI) -> None:
    """
    Force la redirection HTTP -> HTTPS lorsqu’un proxy place x-forwarded-proto=http.
    - Ajouté en dernier afin qu’il s’exécute en premier dans la pile des middlewares.
    """
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "http":
            url = str(request.url.replace(scheme="https"))
            return RedirectResponse(url, status_code=301)
        return await call_next(request)
