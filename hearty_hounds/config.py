# hearty_hounds.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du service.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Stripe, Shippo, Supabase)
- Expose les constantes métier (frais plateforme, estimation frais Stripe, seuil livraison gratuite)
- Sécurité: CORS/hosts, cookies de session (panier)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _float_env(name: str, default: float) -> float:
    try:
        return float(_clean_env(os.getenv(name)) or default)
    except ValueError:
        return default

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name)) or default)
    except ValueError:
        return default

# Stripe: clé secrète (STRIPE_API_KEY accepté comme alias) et version d'API figée
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or os.getenv("STRIPE_API_KEY") or "")
STRIPE_API_VERSION = _clean_env(os.getenv("STRIPE_API_VERSION") or "2023-10-16")

# Shippo: token API et URL de base REST
SHIPPO_API_KEY = _clean_env(os.getenv("SHIPPO_API_KEY") or os.getenv("SHIPPO_TOKEN") or "")
SHIPPO_API_URL = _clean_env(os.getenv("SHIPPO_API_URL") or "https://api.goshippo.com").rstrip("/")
SHIPPO_TIMEOUT = _float_env("SHIPPO_TIMEOUT", 20.0)

# Supabase: URLs et clés (anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Stripe Connect: compte de la plateforme (aucun transfert vers lui-même)
PLATFORM_ACCOUNT_ID = _clean_env(os.getenv("PLATFORM_ACCOUNT_ID") or "acct_1RrxjBJHHLWU5Kg3")

# Frais
PLATFORM_FEE_RATE = _float_env("PLATFORM_FEE_RATE", 0.10)
STRIPE_FEE_PERCENT = _float_env("STRIPE_FEE_PERCENT", 0.029)
STRIPE_FEE_FIXED_CENTS = _int_env("STRIPE_FEE_FIXED_CENTS", 30)

# Checkout / livraison
DEFAULT_CURRENCY = _clean_env(os.getenv("DEFAULT_CURRENCY") or "usd").lower()
CHECKOUT_SOURCE_TAG = _clean_env(os.getenv("CHECKOUT_SOURCE_TAG") or "hearty-hounds-frontend")
DEFAULT_PRODUCT_DESCRIPTION = os.getenv("DEFAULT_PRODUCT_DESCRIPTION", "Premium pet product")
SHIPPING_ALLOWED_COUNTRIES = [c.strip().upper() for c in os.getenv("SHIPPING_ALLOWED_COUNTRIES", "US,CA").split(",") if c.strip()]
FREE_SHIPPING_THRESHOLD = _float_env("FREE_SHIPPING_THRESHOLD", 50.0)

# Adresse d'expédition par défaut si aucune adresse vendeur n'est enregistrée
DEFAULT_SELLER_ADDRESS = {
    "name": "Hearty Hounds",
    "street1": "123 Main Street",
    "street2": "",
    "city": "San Francisco",
    "state": "CA",
    "zip": "94102",
    "country": "US",
    "phone": "+1-555-123-4567",
    "email": "shipping@heartyhounds.com",
}

# Cookies / Sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "replace_me_with_a_long_random_secret")
ADMIN_EMAILS = [e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "admin@example.com").split(",") if e.strip()]

# CORS ouvert par défaut (SPA servie depuis un autre domaine)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]
