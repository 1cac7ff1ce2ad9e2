from typing import List, Dict

from app.database import CONTACT_FORMS
from app.models.subscriber import ContactStatus
from app.repositories.record_repo import record_repo


def save_contact_form(data: Dict) -> str:
    """
    Enregistre un message de contact, marqué comme non lu.
    Retourne l'id du document.
    """
    payload = dict(data)
    payload["status"] = ContactStatus.UNREAD.value
    return record_repo.add_auto(CONTACT_FORMS, payload)


def get_all_contact_forms() -> List[Dict]:
    return record_repo.list_all(CONTACT_FORMS)
