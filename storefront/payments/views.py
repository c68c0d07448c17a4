import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from storefront.utils.rate_limit import optional_rate_limit
from storefront.payments import service as payments_service
from storefront.payments.models import PushPaymentRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])

# module storefront.payments.views
@router.post("/mpesa", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def request_mpesa_payment(body: PushPaymentRequest):
    """
    Demande de paiement M-Pesa (STK push).
    - Entrée JSON: { "phoneNumber": "07...", "amount": 4000 }
    - 200 {success, message, checkoutRequestID} ou 400 {success: false, error}
    """
    result = payments_service.initiate_push_payment(body.phone_number, body.amount)
    return JSONResponse(result.to_wire(), status_code=200 if result.success else 400)

@router.post("/mpesa/callback", include_in_schema=False)
async def mpesa_callback(request: Request) -> Dict[str, Any]:
    """
    Callback Daraja (résultat asynchrone du STK push).
    - Journalise ResultCode/ResultDesc/CheckoutRequestID puis acquitte.
    - Ne modifie ni panier ni commande: le panier est déjà vidé à l'acceptation.
    """
    try:
        body = await request.json()
    except ValueError:
        body = {}
    callback = ((body or {}).get("Body") or {}).get("stkCallback") or {}
    logger.info(
        "payments.mpesa_callback checkout_request_id=%s result_code=%s result_desc=%s",
        callback.get("CheckoutRequestID"),
        callback.get("ResultCode"),
        callback.get("ResultDesc"),
    )
    return {"ResultCode": 0, "ResultDesc": "Accepted"}
