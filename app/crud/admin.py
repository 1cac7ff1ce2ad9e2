from passlib.context import CryptContext
from datetime import datetime
from typing import Optional

from pymongo.errors import PyMongoError

from app.database import get_database, ADMINS
from app.errors import RepositoryError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def get_admin_by_email(email: str, database=None) -> Optional[dict]:
    db = database if database is not None else get_database()
    try:
        return db[ADMINS].find_one({"email": email.lower()})
    except PyMongoError as e:
        raise RepositoryError(f"Failed to load admin: {e}") from e


def create_admin(email: str, password: str, database=None) -> bool:
    """
    Crée un compte admin.
    Retourne False si un admin avec cet email existe déjà.
    """
    db = database if database is not None else get_database()

    # Vérifier si l'admin existe déjà
    if get_admin_by_email(email, db):
        return False

    admin_data = {
        "email": email.lower(),
        "hashed_password": get_password_hash(password),
        "is_active": True,
        "created_at": datetime.utcnow(),
        "last_login": None,
    }
    try:
        db[ADMINS].insert_one(admin_data)
    except PyMongoError as e:
        raise RepositoryError(f"Failed to create admin: {e}") from e
    return True


def record_login(email: str, database=None) -> None:
    db = database if database is not None else get_database()
    try:
        db[ADMINS].update_one({"email": email.lower()}, {"$set": {"last_login": datetime.utcnow()}})
    except PyMongoError as e:
        raise RepositoryError(f"Failed to update admin: {e}") from e
