import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from storefront.cart.store import CartStore
from storefront.cart.views import get_cart
from storefront.config import MESSAGING_HOST, ORDER_WHATSAPP_NUMBER, STORE_COUNTRY
from storefront.payments.client import PushPaymentGateway, get_push_payment_gateway
from storefront.utils.formatters import format_ksh
from storefront.utils.rate_limit import optional_rate_limit
from .controller import (
    CHECKOUT_DRAFT_KEY,
    CheckoutController,
    close_checkout,
    open_checkout,
    parse_checkout_form,
    EMPTY_CART_MESSAGE,
    VALIDATION_MESSAGE,
)
from .dispatcher import PaymentDispatcher
from .errors import CheckoutValidationError
from .guard import SubmissionGuard, get_submission_guard
from .models import PaymentMethod
from .summary import build_messaging_link, build_order_summary

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])

STATUS_CODES = {"ok": 200, "validation": 422, "busy": 409, "remote": 400, "internal": 500}


def get_payment_dispatcher(gateway: PushPaymentGateway = Depends(get_push_payment_gateway)) -> PaymentDispatcher:
    return PaymentDispatcher(gateway)


def get_checkout_controller(
    request: Request,
    cart: CartStore = Depends(get_cart),
    dispatcher: PaymentDispatcher = Depends(get_payment_dispatcher),
    guard: SubmissionGuard = Depends(get_submission_guard),
) -> CheckoutController:
    return CheckoutController(cart=cart, dispatcher=dispatcher, guard=guard, session=request.session)


# module storefront.checkout.views
@router.get("")
def open_checkout_panel(request: Request, cart: CartStore = Depends(get_cart)) -> Dict[str, Any]:
    """
    Ouvre la session de checkout et retourne le panneau "Your order":
    lignes (quantité, total ligne), total, pays fixe, moyens de paiement,
    et le brouillon du formulaire après un échec.
    """
    checkout_id = open_checkout(request.session)
    items = cart.items
    total_price = sum(item.price * item.quantity for item in items)
    return {
        "checkout_id": checkout_id,
        "items": [
            {"id": item.id, "name": item.name, "quantity": item.quantity, "line_total_display": format_ksh(item.line_total)}
            for item in items
        ],
        "total_items": sum(item.quantity for item in items),
        "total_display": format_ksh(total_price),
        "country": STORE_COUNTRY,
        "payment_methods": [{"value": m.value, "label": m.label} for m in PaymentMethod],
        "draft": request.session.get(CHECKOUT_DRAFT_KEY) or {},
    }


@router.post("", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def submit_checkout(payload: Any = Body(...), controller: CheckoutController = Depends(get_checkout_controller)):
    """
    Soumet le formulaire de commande.
    - 200 ok, 422 validation, 409 soumission déjà en cours, 400 paiement refusé, 500 erreur interne
    - Corps: CheckoutResult
    """
    result = controller.submit(payload)
    logger.info("checkout.submit status=%s", result.status)
    return JSONResponse(result.model_dump(), status_code=STATUS_CODES[result.status])


@router.delete("")
def close_checkout_panel(request: Request) -> Dict[str, Any]:
    # Panier conservé; une demande de paiement en vol continue, son résultat est ignoré
    close_checkout(request.session)
    return {"closed": True}


@router.post("/summary")
def preview_summary(payload: Any = Body(...), cart: CartStore = Depends(get_cart)):
    """Aperçu du récapitulatif et du lien de messagerie (sans effet de bord)."""
    try:
        form = parse_checkout_form(payload)
        if cart.is_empty():
            raise CheckoutValidationError({"cart": EMPTY_CART_MESSAGE})
    except CheckoutValidationError as e:
        return JSONResponse({"error": VALIDATION_MESSAGE, "errors": e.errors}, status_code=422)
    summary = build_order_summary(form, cart.items, country=STORE_COUNTRY)
    return {
        "summary": summary,
        "link": build_messaging_link(summary, ORDER_WHATSAPP_NUMBER, MESSAGING_HOST),
    }
