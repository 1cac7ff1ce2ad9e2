"""
Exceptions métier de l'API Midnight Soldiers.
"""

from typing import Dict, Optional


class MidnightSoldiersError(Exception):
    """Exception de base de l'application."""


class ValidationError(MidnightSoldiersError):
    """Erreurs de saisie locales, indexées par champ. Aucun effet de bord."""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__("Please correct the highlighted fields")


class UploadError(MidnightSoldiersError):
    """Échec du transfert d'un fichier vers le stockage objet."""


class UploadCancelled(UploadError):
    """Transfert interrompu par un jeton d'annulation."""


class RepositoryError(MidnightSoldiersError):
    """Échec d'accès à la base de documents."""


class NotificationError(MidnightSoldiersError):
    """Échec d'appel au backend compagnon (toujours ignoré après log)."""


class SubmissionInProgress(MidnightSoldiersError):
    """Une soumission est déjà en cours pour ce formulaire."""


AUTH_ERROR_MESSAGES = {
    "user-not-found": "No admin account found with this username.",
    "wrong-password": "Incorrect password.",
    "invalid-email": "Invalid username format.",
    "too-many-requests": "Too many failed attempts. Please try again later.",
    "network-request-failed": "Network error. Please check your internet connection and try again.",
    "configuration-not-found": "Authentication service is not properly configured. Please contact the administrator.",
    "invalid-credential": "Invalid login credentials. Please check your username and password.",
}

DEFAULT_AUTH_MESSAGE = "Login failed. Please try again."


class AuthError(MidnightSoldiersError):
    """Échec de connexion admin, identifié par un code."""

    def __init__(self, code: str, detail: Optional[str] = None):
        self.code = code
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return AUTH_ERROR_MESSAGES.get(self.code, DEFAULT_AUTH_MESSAGE)
