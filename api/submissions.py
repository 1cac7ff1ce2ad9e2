from fastapi import APIRouter, HTTPException, Depends

from api.auth_admin import require_admin_auth
from app.models.progress import ProgressDescriptor
from app.pipeline.registry import submission_registry

router = APIRouter()


@router.get("/{form_id}")
def get_progress(form_id: str, _: str = Depends(require_admin_auth)):
    """Descripteur de progression courant (idle si le formulaire est inconnu)"""
    tracker = submission_registry.find(form_id)
    progress = tracker.current() if tracker else ProgressDescriptor()
    return progress.to_dict()


@router.post("/{form_id}/cancel")
def cancel_submission(form_id: str, _: str = Depends(require_admin_auth)):
    tracker = submission_registry.find(form_id)
    if tracker is None or not tracker.cancel():
        raise HTTPException(status_code=404, detail="No submission in progress for this form")
    return {"success": True, "message": "Cancellation requested"}
