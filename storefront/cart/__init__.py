"""
Module 'cart' (feature-first): point d'entrée public.
Panier de session: modèles et store.
"""

from .models import CartItem, CartProduct, CartError
from .store import CartStore, CART_SESSION_KEY

__all__ = [
    "CartItem",
    "CartProduct",
    "CartError",
    "CartStore",
    "CART_SESSION_KEY",
]
