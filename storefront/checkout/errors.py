from typing import Dict, Optional


class CheckoutValidationError(ValueError):
    """Formulaire invalide: messages par champ (clés camelCase, ex: {"email": "Invalid email address"})."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class PaymentRequestError(Exception):
    """Demande de paiement refusée ou injoignable; le panier n'a pas été touché."""

    def __init__(self, message: str, reference_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reference_id = reference_id
