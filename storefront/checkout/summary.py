"""
Récapitulatif de commande (texte) et lien de messagerie pré-rempli.

Fonctions pures: mêmes entrées, même texte. Les lignes sont séparées par "\n"
puis tout le texte est encodé pour un paramètre de query (\n -> %0A).
"""
from typing import List, Sequence
from urllib.parse import quote

from storefront.cart.models import CartItem
from storefront.config import STORE_COUNTRY
from storefront.utils.formatters import format_ksh
from .models import CheckoutFormData


def build_order_summary(form: CheckoutFormData, items: Sequence[CartItem], country: str = STORE_COUNTRY) -> str:
    """
    Ordre fixe:
      nom du client, contact (téléphone, email), adresse de livraison
      (rue, ligne 2?, ville/comté/code postal?, pays), société?, articles
      dans l'ordre du panier, nombre d'articles, total, moyen de paiement, notes?
    """
    total_items = sum(item.quantity for item in items)
    total_price = sum(item.price * item.quantity for item in items)

    lines: List[str] = [
        f"*New Order from {form.full_name}*",
        "",
        "*Contact Information:*",
        f"Phone: {form.phone}",
        f"Email: {form.email}",
        "",
        "*Shipping Address:*",
        form.address,
    ]
    if form.address_line2:
        lines.append(form.address_line2)
    locality = f"{form.city}, {form.county}"
    if form.zip:
        locality += f", {form.zip}"
    lines.append(locality)
    lines.append(country)
    if form.company_name:
        lines.extend(["", f"Company: {form.company_name}"])

    lines.extend(["", f"*Order Items ({total_items} items):*"])
    lines.extend(f"{item.name} (x{item.quantity}) - {format_ksh(item.price * item.quantity)}" for item in items)
    lines.extend([
        "",
        f"*Total: {format_ksh(total_price)}*",
        f"*Payment Method:* {form.payment_method.label}",
    ])
    if form.notes:
        lines.extend(["", "*Order Notes:*", form.notes])
    return "\n".join(lines)


def encode_order_summary(text: str) -> str:
    # Aucun caractère réservé conservé: "&", "=", "#" ou "/" casseraient la query
    return quote(text, safe="")


def build_messaging_link(text: str, number: str, host: str) -> str:
    return f"https://{host}/{number}?text={encode_order_summary(text)}"
