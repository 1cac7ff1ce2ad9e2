"""
Connexion admin : alias -> email, vérification bcrypt dans la collection `admins`.
Les échecs sont levés en AuthError avec un code stable.
"""

import logging
import threading
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from app.config import config
from app.crud.admin import get_admin_by_email, record_login, verify_password
from app.errors import AuthError, RepositoryError

logger = logging.getLogger(__name__)

# Alias acceptés à la place de l'email
ADMIN_ALIASES = ("admin", "gallery", "midnight", "sj")

MAX_FAILED_ATTEMPTS = 5
FAILED_ATTEMPTS_WINDOW_SECONDS = 15 * 60


def admin_user_map() -> Dict[str, str]:
    return {alias: config.ADMIN_EMAIL for alias in ADMIN_ALIASES}


def resolve_admin_email(identifier: str) -> str:
    """
    Retourne l'email à utiliser pour `identifier` (alias ou email).
    Lève AuthError('user-not-found') pour un alias inconnu,
    AuthError('invalid-email') pour un email mal formé.
    """
    identifier = (identifier or "").strip()
    if "@" not in identifier:
        mapped = admin_user_map().get(identifier.lower())
        if not mapped:
            raise AuthError("user-not-found", identifier)
        return mapped.lower()

    try:
        validate_email(identifier, check_deliverability=False)
    except EmailNotValidError as e:
        raise AuthError("invalid-email", str(e)) from e
    return identifier.lower()


class LoginThrottle:
    """Compte les échecs par email sur une fenêtre glissante (mémoire du process)."""

    def __init__(
        self,
        max_attempts: int = MAX_FAILED_ATTEMPTS,
        window_seconds: float = FAILED_ATTEMPTS_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.clock = clock
        self._failures: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def _prune(self, email: str, now: float) -> Deque[float]:
        failures = self._failures[email]
        while failures and now - failures[0] >= self.window_seconds:
            failures.popleft()
        return failures

    def is_blocked(self, email: str) -> bool:
        with self._lock:
            return len(self._prune(email, self.clock())) >= self.max_attempts

    def record_failure(self, email: str):
        with self._lock:
            now = self.clock()
            self._prune(email, now).append(now)

    def reset(self, email: str):
        with self._lock:
            self._failures.pop(email, None)


login_throttle = LoginThrottle()


def sign_in_admin(identifier: str, password: str, database=None, throttle: Optional[LoginThrottle] = None) -> str:
    """
    Vérifie les identifiants d'un admin.

    Returns:
        L'email de l'admin connecté
    """
    throttle = throttle or login_throttle
    email = resolve_admin_email(identifier)

    if throttle.is_blocked(email):
        logger.warning(f"🚫 Login blocked for {email}: too many failed attempts")
        raise AuthError("too-many-requests")

    if database is None and not config.MONGO_URI:
        raise AuthError("configuration-not-found", "MONGO_URI is not set")

    try:
        admin = get_admin_by_email(email, database)
    except RepositoryError as e:
        logger.error(f"Admin lookup failed: {e}")
        raise AuthError("network-request-failed", str(e)) from e

    if not admin or not admin.get("is_active", True):
        throttle.record_failure(email)
        raise AuthError("user-not-found", email)

    if not verify_password(password or "", admin.get("hashed_password", "")):
        throttle.record_failure(email)
        logger.info(f"Wrong password for {email}")
        raise AuthError("wrong-password", email)

    throttle.reset(email)
    try:
        record_login(email, database)
    except RepositoryError as e:
        logger.warning(f"Could not record last login for {email}: {e}")

    logger.info(f"🔐 Admin {email} signed in")
    return email
