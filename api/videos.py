from fastapi import APIRouter, HTTPException, Depends, File, Form, UploadFile
from typing import List, Optional

from api.auth_admin import require_admin_auth
from api.submission_utils import build_form, read_upload, run_submission
from app.database import VIDEOS
from app.errors import RepositoryError
from app.models.reel import VideoRecord
from app.repositories.record_repo import record_repo

router = APIRouter()


@router.get("/", response_model=List[VideoRecord])
def list_videos():
    try:
        return record_repo.list_all(VIDEOS)
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{video_id}", response_model=VideoRecord)
def get_video(video_id: str):
    try:
        video = record_repo.get_by_id(VIDEOS, video_id)
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")
    return video


@router.post("/")
def submit_video(
    formId: str = Form(...),
    id: Optional[str] = Form(None),
    videoName: Optional[str] = Form(None),
    videoDescription: Optional[str] = Form(None),
    videoFile: Optional[UploadFile] = File(None),
    _: str = Depends(require_admin_auth),
):
    values = {"videoName": videoName, "videoDescription": videoDescription}
    form = build_form("video", values, record_id=id, primary=read_upload(videoFile))
    return run_submission("video", formId, form)
