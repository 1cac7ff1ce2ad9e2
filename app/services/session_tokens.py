"""
Jetons de session admin (JWT signé, stocké dans le cookie `auth_token`).
"""

import jwt
import logging
from datetime import datetime, timedelta
from typing import Optional

from app.config import config

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def generate_session_token(email: str, secret: Optional[str] = None, hours: Optional[int] = None) -> str:
    """
    Génère le jeton de session d'un admin connecté.

    Args:
        email: Email de l'admin
        secret: Clé de signature (SECRET_KEY par défaut)
        hours: Durée de validité (SESSION_DURATION_HOURS par défaut)

    Returns:
        Jeton JWT signé
    """
    now = datetime.utcnow()
    payload = {
        "email": email.lower(),
        "type": "session",
        "exp": now + timedelta(hours=hours or config.SESSION_DURATION_HOURS),
        "iat": now,
    }
    return jwt.encode(payload, secret or config.SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_session_token(token: Optional[str], secret: Optional[str] = None) -> Optional[str]:
    """
    Vérifie un jeton de session.

    Returns:
        L'email de l'admin si le jeton est valide, None sinon
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, secret or config.SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Session token has expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session token: {str(e)}")
        return None

    if payload.get("type") != "session":
        logger.warning(f"Invalid token type: expected session, got {payload.get('type')}")
        return None
    return payload.get("email")
