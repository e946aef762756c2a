# hiringkit.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du service de checkout des kits.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env) sans écraser l'environnement
- Normalise et expose les secrets/URLs (Supabase, Stripe)
- Expose la politique admin (ADMIN_EMAILS), CORS et les réglages de logs
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _csv_env(name: str, default: str = "") -> list:
    return [v.strip() for v in os.getenv(name, default).split(",") if v.strip()]

# Supabase: URL et clés (anon pour l'auth, service pour les écritures serveur)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_SERVICE_ROLE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Stripe: clé secrète, secret webhook et version d'API épinglée
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
STRIPE_API_VERSION = _clean_env(os.getenv("STRIPE_API_VERSION") or "2025-02-24.acacia")

# Rôle admin: attribué aux emails listés en plus du rôle stocké en base
ADMIN_EMAILS = [e.lower() for e in _csv_env("ADMIN_EMAILS", "admin@example.com")]

# Cookies / CORS
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")
CORS_ORIGINS = _csv_env("CORS_ORIGINS", "*")

# Logs
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# JSON en production, rendu console lisible sinon
LOG_JSON = (os.getenv("LOG_JSON", "true").lower() == "true")

def is_admin_email(email: str | None) -> bool:
    return bool(email) and email.strip().lower() in ADMIN_EMAILS
