"""
Store panier lié à une session.

La session (cookie signé, limité à ~4 Ko côté navigateur) ne contient que des
lignes compactes {id, quantity}, dans l'ordre d'ajout. Nom, prix et image
sont relus au catalogue via `resolve` à chaque lecture; les produits déjà
vus par ce store (add_to_cart) sont gardés en cache pour la requête.
Nombre de lignes et quantités sont bornés pour que le cookie reste petit.
"""
import logging
from typing import Any, Callable, Dict, List, MutableMapping, Optional, Sequence, Set, Union

from storefront.utils.formatters import format_ksh
from .models import CartError, CartItem, CartProduct

logger = logging.getLogger(__name__)

CART_SESSION_KEY = "cart"
MAX_CART_LINES = 20
MAX_LINE_QUANTITY = 999

# ids -> produits trouvés (les ids absents sont indisponibles)
CartResolver = Callable[[Sequence[str]], Dict[str, CartProduct]]


class CartStore:
    def __init__(
        self,
        storage: MutableMapping[str, Any],
        resolve: Optional[CartResolver] = None,
        key: str = CART_SESSION_KEY,
    ):
        self._storage = storage
        self._resolve = resolve
        self._key = key
        self._products: Dict[str, CartProduct] = {}
        self._unavailable: Set[str] = set()

    # --- lecture ---
    def _raw(self) -> List[Dict[str, Any]]:
        raw = self._storage.get(self._key)
        if not isinstance(raw, list):
            return []
        rows = []
        for row in raw:
            if isinstance(row, dict) and isinstance(row.get("id"), str) and isinstance(row.get("quantity"), int):
                rows.append({"id": row["id"], "quantity": row["quantity"]})
        return rows

    def _write(self, rows: List[Dict[str, Any]]) -> None:
        self._storage[self._key] = rows

    def _products_for(self, rows: List[Dict[str, Any]]) -> Dict[str, CartProduct]:
        missing = [row["id"] for row in rows if row["id"] not in self._products and row["id"] not in self._unavailable]
        if missing and self._resolve is not None:
            self._products.update(self._resolve(missing))
            self._unavailable.update(pid for pid in missing if pid not in self._products)
        return self._products

    @property
    def items(self) -> List[CartItem]:
        """Lignes dans l'ordre d'ajout; un produit introuvable au catalogue est omis (mais reste en session)."""
        rows = self._raw()
        products = self._products_for(rows)
        items: List[CartItem] = []
        for row in rows:
            product = products.get(row["id"])
            if product is None:
                logger.warning("cart.store product unavailable id=%s", row["id"])
                continue
            items.append(CartItem(**product.model_dump(), quantity=max(1, row["quantity"])))
        return items

    def is_empty(self) -> bool:
        return not self.items

    def get_total_price(self) -> float:
        return sum(item.price * item.quantity for item in self.items)

    def get_total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    # --- mutations ---
    def add_to_cart(self, product: Union[CartProduct, Dict[str, Any]]) -> CartItem:
        """
        Ajoute un article.
        - id déjà présent: quantité +1 (jamais de doublon).
        - sinon: ajout en fin de panier avec quantité 1 (CartError si le panier est plein).
        """
        if not isinstance(product, CartProduct):
            product = CartProduct.model_validate(product)
        self._products[product.id] = product
        rows = self._raw()
        for row in rows:
            if row["id"] == product.id:
                if row["quantity"] >= MAX_LINE_QUANTITY:
                    raise CartError(f"Quantity cannot exceed {MAX_LINE_QUANTITY}", item_id=product.id)
                row["quantity"] += 1
                self._write(rows)
                return CartItem(**product.model_dump(), quantity=row["quantity"])
        if len(rows) >= MAX_CART_LINES:
            raise CartError(f"Your cart is full ({MAX_CART_LINES} products max)", item_id=product.id)
        rows.append({"id": product.id, "quantity": 1})
        self._write(rows)
        return CartItem(**product.model_dump(), quantity=1)

    def remove_from_cart(self, item_id: str) -> bool:
        rows = self._raw()
        kept = [row for row in rows if row["id"] != item_id]
        if len(kept) == len(rows):
            return False
        self._write(kept)
        return True

    def update_quantity(self, item_id: str, quantity: int) -> bool:
        """
        Fixe la quantité d'une ligne.
        - quantity < 1 est refusé (CartError): utiliser remove_from_cart.
        - quantity > MAX_LINE_QUANTITY est refusé (CartError).
        - id inconnu: aucun effet, retourne False.
        """
        if quantity < 1:
            raise CartError("Quantity must be at least 1; remove the item instead", item_id=item_id)
        if quantity > MAX_LINE_QUANTITY:
            raise CartError(f"Quantity cannot exceed {MAX_LINE_QUANTITY}", item_id=item_id)
        rows = self._raw()
        for row in rows:
            if row["id"] == item_id:
                row["quantity"] = int(quantity)
                self._write(rows)
                return True
        return False

    def clear_cart(self) -> None:
        self._write([])

    def to_payload(self) -> Dict[str, Any]:
        items = self.items
        total_price = sum(item.price * item.quantity for item in items)
        return {
            "items": [
                {**item.model_dump(), "line_total": item.line_total, "line_total_display": format_ksh(item.line_total)}
                for item in items
            ],
            "total_items": sum(item.quantity for item in items),
            "total_price": total_price,
            "total_display": format_ksh(total_price),
        }
