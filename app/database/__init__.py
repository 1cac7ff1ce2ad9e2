import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.config import config
from app.errors import RepositoryError

logger = logging.getLogger(__name__)

# Une collection par type d'entité
ARTISTS = "artists"
REELS = "reels"
VIDEOS = "videos"
SUBSCRIPTIONS = "subscriptions"
CONTACT_FORMS = "contact_forms"
ADMINS = "admins"

_client: Optional[MongoClient] = None
_db: Optional[Database] = None


def get_database() -> Database:
    """
    Retourne l'instance de la base MongoDB.
    La connexion est ouverte au premier appel puis réutilisée.
    """
    global _client, _db
    if _db is not None:
        return _db

    if not config.MONGO_URI:
        logger.error("⚠️ MONGO_URI environment variable not set")
        raise RepositoryError("Database not connected. Check MONGO_URI environment variable.")

    try:
        _client = MongoClient(config.MONGO_URI, serverSelectionTimeoutMS=5000)
        # Test de connexion
        _client.server_info()
    except PyMongoError as exc:
        _client = None
        logger.error(f"❌ MongoDB connection failed: {exc}")
        raise RepositoryError(f"Database connection failed: {exc}") from exc

    _db = _client[config.MONGO_DB]
    logger.info("✅ MongoDB connected successfully")
    return _db


def close_database():
    """Ferme la connexion (arrêt de l'application)."""
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None
