"""
Configuration de l'API Midnight Soldiers.
Chargée depuis les variables d'environnement (fichier .env en local).
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: str) -> float:
    return float(os.getenv(name, default))


class Config:
    """Configuration de l'application"""

    # MongoDB
    MONGO_URI = os.getenv("MONGO_URI")
    MONGO_DB = os.getenv("MONGO_DB", "midnightsoldiers")

    # Supabase Storage (clé service role prioritaire, sinon clé anon)
    SUPABASE_URL = (os.getenv("SUPABASE_URL") or "").rstrip("/")
    SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_KEY")
    STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "midnightsoldiers")
    STORAGE_TIMEOUT_SECONDS = _float_env("STORAGE_TIMEOUT_SECONDS", "60")
    UPLOAD_CHUNK_SIZE = int(os.getenv("UPLOAD_CHUNK_SIZE", str(256 * 1024)))

    # Backend compagnon (publication sur les réseaux sociaux)
    SOCIAL_API_URL = (os.getenv("SOCIAL_API_URL") or "").rstrip("/")
    SOCIAL_API_TIMEOUT_SECONDS = _float_env("SOCIAL_API_TIMEOUT_SECONDS", "15")

    # Authentification admin
    SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-this-in-production")
    SESSION_DURATION_HOURS = int(os.getenv("SESSION_DURATION_HOURS", "2"))
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "sj@sjdev.co")

    # Frontend (origines CORS séparées par des virgules)
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Pipeline de soumission
    SUCCESS_RESET_SECONDS = _float_env("SUCCESS_RESET_SECONDS", "3")
    FAILURE_RESET_SECONDS = _float_env("FAILURE_RESET_SECONDS", "5")
    UPLOAD_STAGE_TIMEOUT_SECONDS = _float_env("UPLOAD_STAGE_TIMEOUT_SECONDS", "300")
    PERSIST_STAGE_TIMEOUT_SECONDS = _float_env("PERSIST_STAGE_TIMEOUT_SECONDS", "30")
    NOTIFY_STAGE_TIMEOUT_SECONDS = _float_env("NOTIFY_STAGE_TIMEOUT_SECONDS", "20")
    FORM_IDLE_TTL_SECONDS = _float_env("FORM_IDLE_TTL_SECONDS", "600")


# Instance unique
config = Config()
