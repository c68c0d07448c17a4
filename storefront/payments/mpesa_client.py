"""
Adaptateur M-Pesa Daraja: centralise les appels OAuth et STK push.
"""
import base64
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx

from storefront import config

logger = logging.getLogger(__name__)

# Heure d'Afrique de l'Est (UTC+3, sans heure d'été)
EAT = timezone(timedelta(hours=3))
TRANSACTION_TYPE = "CustomerPayBillOnline"

class MpesaError(Exception):
    """Échec côté Daraja (configuration, token, ou STK push refusé)."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

# module storefront.payments.mpesa_client
def require_credentials() -> None:
    if not (config.MPESA_CONSUMER_KEY and config.MPESA_CONSUMER_SECRET and config.MPESA_PASSKEY):
        raise MpesaError("M-Pesa credentials not configured")

def make_timestamp(now: Optional[datetime] = None) -> str:
    """Horodatage Daraja YYYYMMDDHHMMSS en heure locale kényane."""
    now = now or datetime.now(EAT)
    if now.tzinfo is not None:
        now = now.astimezone(EAT)
    return now.strftime("%Y%m%d%H%M%S")

def make_password(shortcode: str, passkey: str, timestamp: str) -> str:
    return base64.b64encode(f"{shortcode}{passkey}{timestamp}".encode("utf-8")).decode("ascii")

def _json(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}

def get_access_token(client: Optional[httpx.Client] = None) -> str:
    """
    Token OAuth (client_credentials) via Basic auth consumer_key:consumer_secret.
    Lève MpesaError si la réponse ne contient pas d'access_token.
    """
    require_credentials()
    http = client or httpx.Client(timeout=config.MPESA_TIMEOUT)
    try:
        response = http.get(
            f"{config.MPESA_BASE_URL}/oauth/v1/generate",
            params={"grant_type": "client_credentials"},
            auth=(config.MPESA_CONSUMER_KEY, config.MPESA_CONSUMER_SECRET),
        )
    finally:
        if client is None:
            http.close()
    data = _json(response)
    token = data.get("access_token")
    if response.status_code >= 400 or not token:
        raise MpesaError(
            data.get("errorMessage") or "Could not obtain M-Pesa access token",
            status_code=response.status_code,
            payload=data,
        )
    logger.info("mpesa_client.get_access_token ok")
    return token

def build_stk_payload(phone: str, amount: int, timestamp: str) -> Dict[str, Any]:
    shortcode = config.MPESA_SHORTCODE
    return {
        "BusinessShortCode": shortcode,
        "Password": make_password(shortcode, config.MPESA_PASSKEY, timestamp),
        "Timestamp": timestamp,
        "TransactionType": TRANSACTION_TYPE,
        "Amount": amount,
        "PartyA": phone,
        "PartyB": shortcode,
        "PhoneNumber": phone,
        "CallBackURL": config.MPESA_CALLBACK_URL,
        "AccountReference": config.MPESA_ACCOUNT_REFERENCE,
        "TransactionDesc": config.MPESA_TRANSACTION_DESC,
    }

def stk_push(phone: str, amount: int, client: Optional[httpx.Client] = None) -> Dict[str, Any]:
    """
    Lance une demande STK push (invite de paiement sur le téléphone du client).
    - phone: numéro 254XXXXXXXXX déjà normalisé
    - amount: montant entier en KSh
    Retour: réponse Daraja (contient CheckoutRequestID) si ResponseCode == "0".
    """
    http = client or httpx.Client(timeout=config.MPESA_TIMEOUT)
    try:
        token = get_access_token(http)
        payload = build_stk_payload(phone, amount, make_timestamp())
        response = http.post(
            f"{config.MPESA_BASE_URL}/mpesa/stkpush/v1/processrequest",
            json=payload,
            headers={"Authorization": f"Bearer {token}"},
        )
    finally:
        if client is None:
            http.close()
    data = _json(response)
    logger.info("mpesa_client.stk_push status=%s response_code=%s", response.status_code, data.get("ResponseCode"))
    if response.status_code >= 400 or str(data.get("ResponseCode")) != "0":
        raise MpesaError(
            data.get("ResponseDescription") or data.get("errorMessage") or "Payment initiation failed",
            status_code=response.status_code,
            payload=data,
        )
    return data
