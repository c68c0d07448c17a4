# module storefront.cart.models
from typing import Optional
from pydantic import BaseModel, Field


class CartProduct(BaseModel):
    """Article ajoutable au panier (sans quantité)."""
    id: str = Field(min_length=1)
    name: str
    price: float = Field(ge=0)
    category: str = ""
    image: str = ""


class CartItem(CartProduct):
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class AddItemRequest(BaseModel):
    product_id: str = Field(min_length=1, max_length=64)


class UpdateQuantityRequest(BaseModel):
    # Pas de contrainte ici: la règle quantité >= 1 est portée par CartStore
    quantity: int


class CartError(ValueError):
    """Opération panier refusée (ex: quantité < 1)."""

    def __init__(self, message: str, item_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.item_id = item_id
