"""
Gestionnaires d’exceptions utilisés par la factory.
- HTTPException: corps JSON {"detail": ...} pour tous les clients.
- CartError: opération panier refusée -> 400 JSON.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from storefront.cart.models import CartError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_json(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(CartError)
    async def cart_error_json(request: Request, exc: CartError):
        logger.info("cart rejected path=%s item_id=%s reason=%s", request.url.path, exc.item_id, exc.message)
        return JSONResponse(status_code=400, content={"detail": exc.message})
