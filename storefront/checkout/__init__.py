"""
Module 'checkout' (feature-first): point d'entrée public.
Formulaire, récapitulatif de commande, aiguillage du paiement et contrôleur.
"""

from .models import CheckoutFormData, CheckoutResult, DispatchOutcome, PaymentMethod
from .errors import CheckoutValidationError, PaymentRequestError
from .summary import build_order_summary, encode_order_summary, build_messaging_link
from .dispatcher import PaymentDispatcher
from .guard import SubmissionGuard
from .controller import CheckoutController, parse_checkout_form, open_checkout, close_checkout

__all__ = [
    # models
    "CheckoutFormData",
    "CheckoutResult",
    "DispatchOutcome",
    "PaymentMethod",
    # errors
    "CheckoutValidationError",
    "PaymentRequestError",
    # summary
    "build_order_summary",
    "encode_order_summary",
    "build_messaging_link",
    # flow
    "PaymentDispatcher",
    "SubmissionGuard",
    "CheckoutController",
    "parse_checkout_form",
    "open_checkout",
    "close_checkout",
]
