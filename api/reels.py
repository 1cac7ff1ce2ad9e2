from fastapi import APIRouter, HTTPException, Depends, File, Form, UploadFile
from typing import List, Optional

from api.auth_admin import require_admin_auth
from api.submission_utils import build_form, read_upload, run_submission
from app.database import REELS
from app.errors import RepositoryError
from app.models.reel import ReelRecord
from app.repositories.record_repo import record_repo

router = APIRouter()


@router.get("/", response_model=List[ReelRecord])
def list_reels():
    try:
        return record_repo.list_all(REELS)
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{reel_id}", response_model=ReelRecord)
def get_reel(reel_id: str):
    try:
        reel = record_repo.get_by_id(REELS, reel_id)
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not reel:
        raise HTTPException(status_code=404, detail="Reel not found")
    return reel


@router.post("/")
def submit_reel(
    formId: str = Form(...),
    id: Optional[str] = Form(None),
    reelName: Optional[str] = Form(None),
    reelDescription: Optional[str] = Form(None),
    reelVideo: Optional[UploadFile] = File(None),
    _: str = Depends(require_admin_auth),
):
    """
    Création ou modification d'un reel.
    La vidéo est obligatoire à la création, optionnelle en modification.
    """
    values = {"reelName": reelName, "reelDescription": reelDescription}
    form = build_form("reel", values, record_id=id, primary=read_upload(reelVideo))
    return run_submission("reel", formId, form)
