from typing import List, Dict

from app.database import SUBSCRIPTIONS
from app.models.subscriber import SubscriptionType
from app.repositories.record_repo import record_repo


def save_subscription(data: Dict) -> str:
    """Enregistre un abonnement complet et retourne son id."""
    payload = dict(data)
    payload["email"] = payload["email"].strip().lower()
    payload["type"] = SubscriptionType.FULL.value
    return record_repo.add_auto(SUBSCRIPTIONS, payload)


def save_newsletter_subscription(email: str) -> str:
    """Enregistre une inscription à la newsletter seule et retourne son id."""
    payload = {
        "email": email.strip().lower(),
        "type": SubscriptionType.NEWSLETTER.value,
    }
    return record_repo.add_auto(SUBSCRIPTIONS, payload)


def get_all_subscriptions() -> List[Dict]:
    return record_repo.list_all(SUBSCRIPTIONS)
