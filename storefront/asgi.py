"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn/uvicorn-workers) importe `storefront.asgi:app`
  pour servir l’application FastAPI en mode ASGI.
- Toute la configuration de FastAPI (routes, middlewares, sécurité, etc.) est centralisée
  dans storefront.app_setup, ce fichier ne fait qu’exposer l’instance `app`.
"""

from storefront.app import app

if __name__ == "__main__":
    # Exécution directe utile en développement local (uvicorn standalone).
    import os
    import uvicorn
    uvicorn.run(
        "storefront.asgi:app",
        host="0.0.0.0",  # écoute toutes interfaces (Docker/VM)
        port=int(os.getenv("PORT", "8000")),
        reload=True,     # rechargement automatique en dev
    )
