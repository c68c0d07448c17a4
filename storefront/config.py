# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, M-Pesa Daraja), sécurité cookies, CORS/hosts
- Paramètres de la commande manuelle (numéro WhatsApp, pays, devise)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _optional_float(v: str):
    v = _clean_env(v)
    if not v:
        return None
    try:
        return float(v)
    except ValueError:
        return None

# Supabase: URLs et clés (public/anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("VITE_SUPABASE_URL") or "")
SUPABASE_KEY = _clean_env(os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or SUPABASE_KEY)
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Cookies / sessions (panier + session de checkout)
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")
SESSION_SECRET_KEY = _clean_env(os.getenv("SESSION_SECRET_KEY") or "replace_me_with_a_long_random_secret")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24)))
ADMIN_EMAILS = [e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "admin@example.com").split(",") if e.strip()]

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

# M-Pesa (Daraja): identifiants et paramètres STK push
MPESA_CONSUMER_KEY = _clean_env(os.getenv("MPESA_CONSUMER_KEY") or "")
MPESA_CONSUMER_SECRET = _clean_env(os.getenv("MPESA_CONSUMER_SECRET") or "")
MPESA_PASSKEY = _clean_env(os.getenv("MPESA_PASSKEY") or "")
MPESA_SHORTCODE = _clean_env(os.getenv("MPESA_SHORTCODE") or "174379")  # shortcode sandbox
MPESA_BASE_URL = _clean_env(os.getenv("MPESA_BASE_URL") or "https://sandbox.safaricom.co.ke").rstrip("/")
MPESA_CALLBACK_URL = _clean_env(os.getenv("MPESA_CALLBACK_URL") or "https://mydomain.com/callback")
MPESA_ACCOUNT_REFERENCE = os.getenv("MPESA_ACCOUNT_REFERENCE", "Order Payment")
MPESA_TRANSACTION_DESC = os.getenv("MPESA_TRANSACTION_DESC", "Payment for order")
MPESA_TIMEOUT = _optional_float(os.getenv("MPESA_TIMEOUT") or "30")

# Fonction de paiement distante (ex: fonction hébergée). Vide => appel en process.
# Pas de timeout local par défaut: le comportement du endpoint distant fait foi.
PUSH_PAYMENT_URL = _clean_env(os.getenv("PUSH_PAYMENT_URL") or "")
PUSH_PAYMENT_TIMEOUT = _optional_float(os.getenv("PUSH_PAYMENT_TIMEOUT") or "")

# Commande manuelle (lien WhatsApp) et affichage
ORDER_WHATSAPP_NUMBER = _clean_env(os.getenv("ORDER_WHATSAPP_NUMBER") or "254743039253")
MESSAGING_HOST = _clean_env(os.getenv("MESSAGING_HOST") or "wa.me")
STORE_COUNTRY = os.getenv("STORE_COUNTRY", "Kenya")
CURRENCY_LABEL = os.getenv("CURRENCY_LABEL", "KSh")

BASE_URL = _clean_env(os.getenv("BASE_URL") or "http://localhost:8000")
