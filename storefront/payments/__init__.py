"""
Module 'payments' (feature-first): point d'entrée public.
Réunit le client Daraja, le service de demande de paiement et les passerelles.
"""

from .models import PushPaymentRequest, PaymentRequestResult
from .mpesa_client import MpesaError, get_access_token, make_timestamp, make_password, stk_push
from .service import initiate_push_payment
from .client import (
    PushPaymentGateway,
    LocalPushPaymentGateway,
    RemotePushPaymentGateway,
    get_push_payment_gateway,
)

__all__ = [
    # models
    "PushPaymentRequest",
    "PaymentRequestResult",
    # daraja
    "MpesaError",
    "get_access_token",
    "make_timestamp",
    "make_password",
    "stk_push",
    # services
    "initiate_push_payment",
    # gateways
    "PushPaymentGateway",
    "LocalPushPaymentGateway",
    "RemotePushPaymentGateway",
    "get_push_payment_gateway",
]
