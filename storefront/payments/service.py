"""
Cas d'usage 'payments': demande de paiement M-Pesa (STK push).
Toujours un PaymentRequestResult en retour, jamais d'exception vers l'appelant.
"""
import logging
from typing import Optional

import httpx

from storefront.utils.formatters import round_half_up
from storefront.utils.validators import require_kenyan_msisdn
from . import mpesa_client
from .models import PaymentRequestResult

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Payment request sent. Please check your phone."
FAILURE_MESSAGE = "Payment initiation failed"

def initiate_push_payment(phone_number: str, amount: float, client: Optional[httpx.Client] = None) -> PaymentRequestResult:
    """
    Envoie l'invite de paiement sur le téléphone du client.
    - phone_number: normalisé puis validé (254XXXXXXXXX)
    - amount: arrondi à l'entier (demi vers le haut), doit rester > 0
    - succès: {success, message, checkoutRequestID}; échec: {success: False, error}
    """
    try:
        phone = require_kenyan_msisdn(phone_number)
        whole_amount = round_half_up(amount)
        if whole_amount < 1:
            raise ValueError("Amount must be at least KSh 1")
        logger.info("payments.service.initiate_push_payment phone=%s amount=%s", phone[:6] + "***", whole_amount)
        data = mpesa_client.stk_push(phone, whole_amount, client=client)
        return PaymentRequestResult(
            success=True,
            message=SUCCESS_MESSAGE,
            checkout_request_id=data.get("CheckoutRequestID"),
        )
    except (ValueError, mpesa_client.MpesaError) as e:
        logger.warning("payments.service.initiate_push_payment rejected error=%s", e)
        return PaymentRequestResult(success=False, error=str(e) or FAILURE_MESSAGE)
    except httpx.HTTPError:
        logger.exception("payments.service.initiate_push_payment failed transport")
        return PaymentRequestResult(success=False, error=FAILURE_MESSAGE)
