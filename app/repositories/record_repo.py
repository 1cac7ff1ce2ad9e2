"""
Repository générique des documents du site (artistes, reels, vidéos,
abonnements, messages de contact).
Les erreurs MongoDB sont remontées telles quelles sous forme de RepositoryError.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime
import logging
import uuid

from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.database import get_database, ARTISTS
from app.errors import RepositoryError

logger = logging.getLogger(__name__)

# Les dates manquantes sont classées en dernier
MISSING_DATE = "9999-12-31"


def serialize_document(raw: Dict) -> Dict:
    """
    Remplace `_id` par `id` (chaîne) pour le frontend.
    """
    doc = dict(raw)
    doc["id"] = str(doc.pop("_id"))
    return doc


class RecordRepository:
    """Accès aux collections de la base de documents"""

    def __init__(self, database: Optional[Database] = None):
        self._database = database

    def _collection(self, collection_name: str):
        db = self._database if self._database is not None else get_database()
        return db[collection_name]

    def create_or_update(self, collection_name: str, record_id: str, record: Dict[str, Any]) -> str:
        """
        Crée le document `record_id` ou fusionne `record` dans l'existant.
        Un seul aller-retour (upsert), `createdAt` n'est posé qu'à la création.

        Returns:
            L'identifiant du document
        """
        data = {k: v for k, v in record.items() if k not in ("id", "_id", "createdAt")}
        now = datetime.utcnow()
        data["updatedAt"] = now

        try:
            self._collection(collection_name).update_one(
                {"_id": record_id},
                {"$set": data, "$setOnInsert": {"createdAt": now}},
                upsert=True,
            )
        except PyMongoError as e:
            logger.error(f"Error writing {collection_name}/{record_id}: {e}")
            raise RepositoryError(f"Failed to save record: {e}") from e

        logger.info(f"✅ Saved {collection_name}/{record_id}")
        return record_id

    def add_auto(self, collection_name: str, document: Dict[str, Any]) -> str:
        """Insère un document avec un identifiant généré et `createdAt`."""
        record_id = str(uuid.uuid4())
        payload = dict(document)
        payload["_id"] = record_id
        payload["createdAt"] = datetime.utcnow()

        try:
            self._collection(collection_name).insert_one(payload)
        except PyMongoError as e:
            logger.error(f"Error inserting into {collection_name}: {e}")
            raise RepositoryError(f"Failed to save record: {e}") from e

        logger.info(f"✅ Document written to {collection_name} with ID {record_id}")
        return record_id

    def set_by_id(self, collection_name: str, record_id: str, document: Dict[str, Any]) -> None:
        """Remplace entièrement le document `record_id` (création si absent)."""
        payload = {k: v for k, v in document.items() if k not in ("id", "_id")}
        try:
            self._collection(collection_name).replace_one({"_id": record_id}, payload, upsert=True)
        except PyMongoError as e:
            raise RepositoryError(f"Failed to save record: {e}") from e

    def update_by_id(self, collection_name: str, record_id: str, patch: Dict[str, Any]) -> bool:
        """
        Applique `patch` au document existant.

        Returns:
            True si un document correspondait, False sinon
        """
        data = {k: v for k, v in patch.items() if k not in ("id", "_id")}
        data["updatedAt"] = datetime.utcnow()
        try:
            result = self._collection(collection_name).update_one({"_id": record_id}, {"$set": data})
        except PyMongoError as e:
            raise RepositoryError(f"Failed to update record: {e}") from e
        return result.matched_count > 0

    def get_by_id(self, collection_name: str, record_id: str) -> Optional[Dict]:
        try:
            raw = self._collection(collection_name).find_one({"_id": record_id})
        except PyMongoError as e:
            raise RepositoryError(f"Failed to load record: {e}") from e
        return serialize_document(raw) if raw else None

    def list_all(self, collection_name: str) -> List[Dict]:
        """Renvoie tous les documents de la collection (sans pagination)."""
        try:
            raws = list(self._collection(collection_name).find())
        except PyMongoError as e:
            logger.error(f"Error listing {collection_name}: {e}")
            raise RepositoryError(f"Failed to load records: {e}") from e
        return [serialize_document(raw) for raw in raws]

    def list_artists(self) -> List[Dict]:
        """
        Renvoie tous les artistes triés par date de début d'exposition
        (ordre chronologique, dates manquantes en dernier).
        """
        artists = self.list_all(ARTISTS)
        artists.sort(key=lambda a: a.get("exhibitionStartDate") or MISSING_DATE)
        return artists


# Instance globale du repository
record_repo = RecordRepository()
