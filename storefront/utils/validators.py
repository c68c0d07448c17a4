import re

KENYA_MSISDN = re.compile(r"^254\d{9}$")

def normalize_msisdn(phone: str) -> str:
    """
    Normalise un numéro kényan au format 254XXXXXXXXX:
    - retire espaces, tirets, points et parenthèses, puis le "+" initial
    - "0" initial -> "254" (0712345678 -> 254712345678)
    - numéro abonné nu à 9 chiffres -> préfixé par "254"
    Ne valide pas: voir require_kenyan_msisdn.
    """
    digits = re.sub(r"[\s\-().]", "", phone or "")
    digits = re.sub(r"^\+", "", digits)
    if digits.startswith("0"):
        digits = "254" + digits[1:]
    elif len(digits) == 9 and digits.isdigit():
        digits = "254" + digits
    return digits

def require_kenyan_msisdn(phone: str) -> str:
    v = normalize_msisdn(phone)
    if not KENYA_MSISDN.match(v):
        raise ValueError("Invalid phone number. Use the format 07XXXXXXXX or 2547XXXXXXXX")
    return v
