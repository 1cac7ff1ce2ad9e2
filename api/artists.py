from fastapi import APIRouter, HTTPException, Depends, File, Form, UploadFile
from typing import List, Optional
import logging

from api.auth_admin import require_admin_auth
from api.submission_utils import build_form, read_upload, read_uploads, run_submission
from app.database import ARTISTS
from app.errors import RepositoryError
from app.models.artist import ArtistRecord
from app.repositories.record_repo import record_repo

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[ArtistRecord])
def list_artists():
    """Artistes triés par date de début d'exposition (sans date en dernier)"""
    try:
        return record_repo.list_artists()
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{artist_id}", response_model=ArtistRecord)
def get_artist(artist_id: str):
    try:
        artist = record_repo.get_by_id(ARTISTS, artist_id)
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not artist:
        raise HTTPException(status_code=404, detail="Artist not found")
    return artist


@router.post("/")
def submit_artist(
    formId: str = Form(...),
    id: Optional[str] = Form(None),
    artistName: Optional[str] = Form(None),
    artistBio: Optional[str] = Form(None),
    facebookProfile: Optional[str] = Form(None),
    twitterProfile: Optional[str] = Form(None),
    instagramProfile: Optional[str] = Form(None),
    otherProfile: Optional[str] = Form(None),
    exhibitionName: Optional[str] = Form(None),
    exhibitionStartDate: Optional[str] = Form(None),
    exhibitionEndDate: Optional[str] = Form(None),
    artistPhoto: Optional[UploadFile] = File(None),
    exemplaryWorks: Optional[List[UploadFile]] = File(None),
    _: str = Depends(require_admin_auth),
):
    """Création (sans id) ou modification (avec id) d'une fiche artiste"""
    values = {
        "artistName": artistName,
        "artistBio": artistBio,
        "facebookProfile": facebookProfile,
        "twitterProfile": twitterProfile,
        "instagramProfile": instagramProfile,
        "otherProfile": otherProfile,
        "exhibitionName": exhibitionName,
        "exhibitionStartDate": exhibitionStartDate,
        "exhibitionEndDate": exhibitionEndDate,
    }
    form = build_form(
        "artist", values, record_id=id,
        primary=read_upload(artistPhoto),
        secondary=read_uploads(exemplaryWorks),
    )
    return run_submission("artist", formId, form)
