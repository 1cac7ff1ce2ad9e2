from fastapi import APIRouter, HTTPException
import logging

from app.crud.subscriptions import save_subscription, save_newsletter_subscription
from app.errors import RepositoryError
from app.models.subscriber import SubscriptionRequest, NewsletterRequest

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=dict)
def subscribe(request: SubscriptionRequest):
    """Abonnement complet (nom, adresse postale, email)"""
    data = request.model_dump(by_alias=True, exclude_none=True)
    try:
        subscription_id = save_subscription(data)
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))

    logger.info(f"📬 New subscription {subscription_id}")
    return {"success": True, "id": subscription_id, "message": "Thank you for subscribing!"}


@router.post("/newsletter", response_model=dict)
def subscribe_newsletter(request: NewsletterRequest):
    try:
        subscription_id = save_newsletter_subscription(request.email)
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))

    logger.info(f"📬 New newsletter subscription {subscription_id}")
    return {"success": True, "id": subscription_id, "message": "Thank you for subscribing to our newsletter!"}
