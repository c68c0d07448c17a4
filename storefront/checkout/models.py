# module storefront.checkout.models
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.networks import validate_email
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

EMAIL_MAX_LENGTH = 255


class PaymentMethod(str, Enum):
    MOBILE_MONEY = "mobile-money"
    CASH_ON_DELIVERY = "cash-on-delivery"

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self]


PAYMENT_METHOD_LABELS = {
    PaymentMethod.MOBILE_MONEY: "M-Pesa",
    PaymentMethod.CASH_ON_DELIVERY: "Cash on Delivery",
}


class CheckoutFormData(BaseModel):
    """
    Formulaire de commande.
    - Noms camelCase sur le fil (firstName, addressLine2, paymentMethod...), snake_case acceptés.
    - Chaînes nettoyées (strip); champs optionnels vides -> None.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    company_name: Optional[str] = Field(default=None, max_length=100)
    address: str = Field(min_length=1, max_length=200)
    address_line2: Optional[str] = Field(default=None, max_length=200)
    city: str = Field(min_length=1, max_length=100)
    county: str = Field(min_length=1, max_length=100)
    zip: Optional[str] = Field(default=None, max_length=20)
    phone: str = Field(min_length=1, max_length=20)
    # Adresse gardée telle que saisie (seulement strip), validée ci-dessous
    email: str
    notes: Optional[str] = Field(default=None, max_length=1000)
    payment_method: PaymentMethod

    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("company_name", "address_line2", "zip", "notes", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("email", mode="before")
    @classmethod
    def email_length(cls, v):
        if isinstance(v, str) and len(v.strip()) > EMAIL_MAX_LENGTH:
            raise PydanticCustomError(
                "string_too_long",
                "String should have at most {max_length} characters",
                {"max_length": EMAIL_MAX_LENGTH},
            )
        return v

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        _, normalized = validate_email(v)
        # Refuse la forme "Nom <adresse>" acceptée par validate_email
        if normalized.casefold() != v.casefold():
            raise PydanticCustomError("value_error", "value is not a valid email address")
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class CheckoutResult(BaseModel):
    """Réponse unique de la soumission (succès ou échec typé par status)."""
    success: bool
    status: str  # ok | validation | busy | remote | internal
    message: Optional[str] = None
    error: Optional[str] = None
    errors: Dict[str, str] = Field(default_factory=dict)
    reference_id: Optional[str] = None
    redirect_url: Optional[str] = None
    cart_cleared: bool = False


class DispatchOutcome(BaseModel):
    payment_method: PaymentMethod
    message: str
    reference_id: Optional[str] = None
    redirect_url: Optional[str] = None
    cart_cleared: bool = True
