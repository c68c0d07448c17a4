"""
Helpers d'affichage (montants en shillings kényans).
"""
import math

from storefront.config import CURRENCY_LABEL


def round_half_up(value: float) -> int:
    # 2.5 -> 3 (round() arrondirait au pair)
    return int(math.floor(float(value) + 0.5))


def format_amount(value: float) -> str:
    """
    Formate un montant avec séparateur de milliers.
    - Arrondi aux centimes uniquement ici (jamais pendant les sommes).
    - Zéros décimaux superflus supprimés: 4000 -> "4,000", 1999.5 -> "1,999.5".
    """
    text = f"{float(value):,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_ksh(value: float) -> str:
    return f"{CURRENCY_LABEL} {format_amount(value)}"
