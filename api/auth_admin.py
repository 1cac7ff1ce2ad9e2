# api/auth_admin.py
from fastapi import APIRouter, Request, Response, HTTPException, Depends
import logging

from app.config import config
from app.errors import AuthError
from app.models.admin import AdminLogin, SessionInfo
from app.services.auth import sign_in_admin
from app.services.session_tokens import generate_session_token, verify_session_token

logger = logging.getLogger(__name__)
router = APIRouter()

COOKIE_NAME = "auth_token"

# Code d'erreur -> statut HTTP (401 par défaut)
AUTH_ERROR_STATUS = {
    "too-many-requests": 429,
    "network-request-failed": 503,
    "configuration-not-found": 503,
}


def get_cookie_settings(request: Request, is_delete: bool = False):
    """Déterminer les paramètres de cookie selon l'environnement"""
    # Détecter si on est en production/Vercel
    hostname = request.url.hostname or ""
    is_production = hostname not in ["localhost", "127.0.0.1"]
    is_vercel_preview = "vercel" in hostname.lower()

    settings = {
        "httponly": True,
        "secure": is_production or is_vercel_preview,
        "samesite": "none" if is_vercel_preview else "lax",
        "domain": None,
    }
    if is_delete:
        settings["max_age"] = 0  # Suppression immédiate
        settings["expires"] = "Thu, 01 Jan 1970 00:00:00 GMT"
    else:
        settings["max_age"] = config.SESSION_DURATION_HOURS * 3600
    return settings


def _no_cache(response: Response):
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"


# === Dépendance FastAPI pour l'authentification ===

def require_admin_auth(request: Request) -> str:
    """
    Dépendance FastAPI pour vérifier la session admin.
    Retourne l'email de l'admin connecté.
    """
    auth_token = request.cookies.get(COOKIE_NAME)
    if not auth_token:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    email = verify_session_token(auth_token)
    if not email:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return email


# === Routes API ===

@router.post("/login")
def login(request: Request, response: Response, creds: AdminLogin):
    try:
        email = sign_in_admin(creds.username, creds.password)
    except AuthError as e:
        status_code = AUTH_ERROR_STATUS.get(e.code, 401)
        raise HTTPException(status_code=status_code, detail={"code": e.code, "message": e.message})

    response.set_cookie(
        key=COOKIE_NAME,
        value=generate_session_token(email),
        **get_cookie_settings(request)
    )
    return {"success": True, **SessionInfo(is_authenticated=True, user_email=email).to_dict()}


@router.get("/verify")
def verify(response: Response, email: str = Depends(require_admin_auth)):
    _no_cache(response)
    return SessionInfo(is_authenticated=True, user_email=email).to_dict()


@router.post("/logout")
def logout(request: Request, response: Response):
    response.set_cookie(key=COOKIE_NAME, value="", **get_cookie_settings(request, is_delete=True))
    return {"success": True, **SessionInfo(is_authenticated=False).to_dict()}
