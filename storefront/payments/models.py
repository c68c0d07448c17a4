# module storefront.payments.models
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class PushPaymentRequest(BaseModel):
    """Corps de POST /api/v1/payments/mpesa (mêmes noms que la fonction distante)."""
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(alias="phoneNumber", min_length=1)
    amount: float = Field(gt=0)


class PaymentRequestResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: Optional[str] = None
    checkout_request_id: Optional[str] = Field(default=None, alias="checkoutRequestID")
    error: Optional[str] = None

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
