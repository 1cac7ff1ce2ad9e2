from fastapi import APIRouter, HTTPException
import logging

from app.crud.contact_forms import save_contact_form
from app.errors import RepositoryError
from app.models.subscriber import ContactRequest

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=dict)
def send_contact_message(request: ContactRequest):
    try:
        message_id = save_contact_form(request.model_dump())
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))

    logger.info(f"✉️ New contact message {message_id}")
    return {"success": True, "id": message_id, "message": "Your message has been sent."}
