"""
Aiguillage du paiement selon paymentMethod.

- mobile-money: demande STK push via la passerelle; succès -> panier vidé,
  échec ou erreur de transport -> PaymentRequestError, panier intact
- cash-on-delivery: récapitulatif + lien de messagerie, panier vidé
"""
import logging

import httpx

from storefront.cart.store import CartStore
from storefront.config import MESSAGING_HOST, ORDER_WHATSAPP_NUMBER, STORE_COUNTRY
from storefront.payments.client import PushPaymentGateway
from storefront.utils.formatters import round_half_up
from storefront.utils.validators import normalize_msisdn
from .errors import PaymentRequestError
from .models import CheckoutFormData, DispatchOutcome, PaymentMethod
from .summary import build_messaging_link, build_order_summary

logger = logging.getLogger(__name__)

ORDER_PLACED_MESSAGE = "Order placed! We'll contact you shortly."
PAYMENT_SENT_MESSAGE = "Payment request sent. Please check your phone."
PAYMENT_FAILED_MESSAGE = "Payment initiation failed"


class PaymentDispatcher:
    def __init__(
        self,
        gateway: PushPaymentGateway,
        messaging_number: str = ORDER_WHATSAPP_NUMBER,
        messaging_host: str = MESSAGING_HOST,
        country: str = STORE_COUNTRY,
    ):
        self.gateway = gateway
        self.messaging_number = messaging_number
        self.messaging_host = messaging_host
        self.country = country

    def dispatch(self, form: CheckoutFormData, cart: CartStore) -> DispatchOutcome:
        if form.payment_method == PaymentMethod.MOBILE_MONEY:
            return self._request_push_payment(form, cart)
        return self._place_manual_order(form, cart)

    def _request_push_payment(self, form: CheckoutFormData, cart: CartStore) -> DispatchOutcome:
        phone = normalize_msisdn(form.phone)
        amount = round_half_up(cart.get_total_price())
        try:
            result = self.gateway.request_push_payment(phone, amount)
        except httpx.HTTPError as e:
            logger.warning("checkout.dispatcher push payment transport error=%s", e)
            raise PaymentRequestError(PAYMENT_FAILED_MESSAGE) from e

        if not result.success:
            raise PaymentRequestError(result.error or result.message or PAYMENT_FAILED_MESSAGE)

        cart.clear_cart()
        logger.info("checkout.dispatcher push payment accepted reference_id=%s amount=%s", result.checkout_request_id, amount)
        return DispatchOutcome(
            payment_method=PaymentMethod.MOBILE_MONEY,
            message=result.message or PAYMENT_SENT_MESSAGE,
            reference_id=result.checkout_request_id,
        )

    def _place_manual_order(self, form: CheckoutFormData, cart: CartStore) -> DispatchOutcome:
        summary = build_order_summary(form, cart.items, country=self.country)
        link = build_messaging_link(summary, self.messaging_number, self.messaging_host)
        cart.clear_cart()
        logger.info("checkout.dispatcher manual order placed host=%s", self.messaging_host)
        return DispatchOutcome(
            payment_method=PaymentMethod.CASH_ON_DELIVERY,
            message=ORDER_PLACED_MESSAGE,
            redirect_url=link,
        )
