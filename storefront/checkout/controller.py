"""
Contrôleur de checkout: validation -> garde de soumission -> aiguillage -> nettoyage.

Frontière de la taxonomie d'erreurs du checkout: submit() ne lève jamais,
il retourne toujours un CheckoutResult (ok, validation, busy, remote, internal).
"""
import json
import logging
import uuid
from typing import Any, Dict, MutableMapping, Optional

from pydantic import ValidationError

from storefront.cart.store import CartStore
from .dispatcher import PaymentDispatcher
from .errors import CheckoutValidationError, PaymentRequestError
from .guard import SubmissionGuard
from .models import CheckoutFormData, CheckoutResult

logger = logging.getLogger(__name__)

CHECKOUT_SESSION_KEY = "checkout_id"
CHECKOUT_DRAFT_KEY = "checkout_draft"

REQUIRED_MESSAGES = {
    "firstName": "First name is required",
    "lastName": "Last name is required",
    "address": "Street address is required",
    "city": "Town/City is required",
    "county": "State/County is required",
    "phone": "Phone is required",
}
INVALID_EMAIL_MESSAGE = "Invalid email address"
PAYMENT_METHOD_MESSAGE = "Please select a payment method"
EMPTY_CART_MESSAGE = "Your cart is empty"
VALIDATION_MESSAGE = "Please correct the highlighted fields"
BUSY_MESSAGE = "Your order is already being processed"
INTERNAL_MESSAGE = "Failed to place order. Please try again."
CHECKOUT_NOT_OPEN_MESSAGE = "Your checkout session has expired. Please review your order and submit again."
# Taille JSON max du brouillon gardé en session
MAX_DRAFT_SIZE = 1024


# --- session de checkout ---
def open_checkout(session: MutableMapping[str, Any]) -> str:
    """Ouvre (ou reprend) la session de checkout et retourne son identifiant."""
    checkout_id = session.get(CHECKOUT_SESSION_KEY)
    if not checkout_id:
        checkout_id = uuid.uuid4().hex
        session[CHECKOUT_SESSION_KEY] = checkout_id
    return checkout_id


def close_checkout(session: MutableMapping[str, Any]) -> None:
    # Le panier n'est pas concerné
    session.pop(CHECKOUT_SESSION_KEY, None)
    session.pop(CHECKOUT_DRAFT_KEY, None)


# --- validation ---
def _field_message(field: str, err: Dict[str, Any]) -> str:
    err_type = err.get("type")
    if field == "email" and err_type != "string_too_long":
        return INVALID_EMAIL_MESSAGE
    if field == "paymentMethod":
        return PAYMENT_METHOD_MESSAGE
    if err_type in ("missing", "string_too_short"):
        return REQUIRED_MESSAGES.get(field, "This field is required")
    if err_type == "string_too_long":
        max_length = (err.get("ctx") or {}).get("max_length")
        return f"String must contain at most {max_length} character(s)"
    return err.get("msg") or "Invalid value"


def parse_checkout_form(payload: Any) -> CheckoutFormData:
    """
    Valide le formulaire brut (dict JSON).
    Lève CheckoutValidationError avec un message par champ (premier message retenu).
    """
    if not isinstance(payload, dict):
        raise CheckoutValidationError({"form": "Invalid form payload"})
    try:
        return CheckoutFormData.model_validate(payload)
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for err in e.errors():
            loc = err.get("loc") or ("form",)
            field = str(loc[0])
            errors.setdefault(field, _field_message(field, err))
        raise CheckoutValidationError(errors) from e


class CheckoutController:
    def __init__(
        self,
        cart: CartStore,
        dispatcher: PaymentDispatcher,
        guard: SubmissionGuard,
        session: MutableMapping[str, Any],
    ):
        self.cart = cart
        self.dispatcher = dispatcher
        self.guard = guard
        self.session = session

    @property
    def checkout_id(self) -> Optional[str]:
        return self.session.get(CHECKOUT_SESSION_KEY)

    def _save_draft(self, payload: Any) -> None:
        # Le formulaire reste modifiable après un échec, dans la limite du cookie de session
        if not isinstance(payload, dict):
            return
        draft = {k: v for k, v in payload.items() if isinstance(k, str) and isinstance(v, str)}
        if len(json.dumps(draft)) > MAX_DRAFT_SIZE:
            logger.info("checkout.controller draft too large, not kept size=%s", len(json.dumps(draft)))
            self.session.pop(CHECKOUT_DRAFT_KEY, None)
            return
        self.session[CHECKOUT_DRAFT_KEY] = draft

    def submit(self, payload: Any) -> CheckoutResult:
        checkout_id = self.checkout_id

        # 1) validation (aucun appel réseau en cas d'échec)
        errors: Dict[str, str] = {}
        form = None
        try:
            form = parse_checkout_form(payload)
        except CheckoutValidationError as e:
            errors.update(e.errors)
        if self.cart.is_empty():
            errors["cart"] = EMPTY_CART_MESSAGE
        if not checkout_id:
            # Sans session de checkout ouverte, pas de clé de garde fiable: on ouvre et on refuse
            open_checkout(self.session)
            errors["checkout"] = CHECKOUT_NOT_OPEN_MESSAGE
        if errors or form is None:
            self._save_draft(payload)
            return CheckoutResult(success=False, status="validation", error=VALIDATION_MESSAGE, errors=errors)

        # 2) garde: une seule soumission en vol par session de checkout
        if not self.guard.acquire(checkout_id):
            logger.info("checkout.controller.submit busy checkout_id=%s", checkout_id)
            return CheckoutResult(success=False, status="busy", error=BUSY_MESSAGE)

        # 3) aiguillage, garde toujours relâchée
        try:
            outcome = self.dispatcher.dispatch(form, self.cart)
        except PaymentRequestError as e:
            self._save_draft(payload)
            return CheckoutResult(success=False, status="remote", error=e.message)
        except Exception:
            logger.exception("checkout.controller.submit failed checkout_id=%s", checkout_id)
            self._save_draft(payload)
            return CheckoutResult(success=False, status="internal", error=INTERNAL_MESSAGE)
        finally:
            self.guard.release(checkout_id)

        # 4) succès: la session de checkout est fermée
        close_checkout(self.session)
        return CheckoutResult(
            success=True,
            status="ok",
            message=outcome.message,
            reference_id=outcome.reference_id,
            redirect_url=outcome.redirect_url,
            cart_cleared=outcome.cart_cleared,
        )
