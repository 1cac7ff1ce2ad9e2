from fastapi import APIRouter, HTTPException, Depends
import logging

from api.auth_admin import require_admin_auth
from app.crud.contact_forms import get_all_contact_forms
from app.crud.subscriptions import get_all_subscriptions
from app.database import REELS, VIDEOS
from app.errors import RepositoryError
from app.models.subscriber import ContactStatus, SubscriptionType
from app.repositories.record_repo import record_repo

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/dashboard")
def get_dashboard(_: str = Depends(require_admin_auth)):
    """Données du tableau de bord admin : artistes, abonnés, messages et compteurs"""
    try:
        artists = record_repo.list_artists()
        subscriptions = get_all_subscriptions()
        contact_forms = get_all_contact_forms()
        reels_count = len(record_repo.list_all(REELS))
        videos_count = len(record_repo.list_all(VIDEOS))
    except RepositoryError as e:
        logger.error(f"Dashboard load failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    # Plus récents d'abord
    subscriptions.sort(key=lambda s: str(s.get("createdAt") or ""), reverse=True)
    contact_forms.sort(key=lambda c: str(c.get("createdAt") or ""), reverse=True)

    return {
        "artists": artists,
        "subscriptions": subscriptions,
        "contactForms": contact_forms,
        "counts": {
            "artists": len(artists),
            "reels": reels_count,
            "videos": videos_count,
            "subscriptions": len(subscriptions),
            "fullSubscriptions": sum(1 for s in subscriptions if s.get("type") == SubscriptionType.FULL.value),
            "newsletterSubscriptions": sum(
                1 for s in subscriptions if s.get("type") == SubscriptionType.NEWSLETTER.value
            ),
            "contactForms": len(contact_forms),
            "unreadContactForms": sum(1 for c in contact_forms if c.get("status") == ContactStatus.UNREAD.value),
        },
    }
