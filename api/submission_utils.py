"""
Passage d'une requête multipart au pipeline de soumission, et retour HTTP.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, UploadFile

from app.errors import RepositoryError, SubmissionInProgress, ValidationError
from app.pipeline.registry import get_pipeline, submission_registry
from app.pipeline.submission import SubmissionForm
from app.services.storage.uploads import UploadBlob

logger = logging.getLogger(__name__)


def read_upload(upload: Optional[UploadFile]) -> Optional[UploadBlob]:
    """Lit un fichier du formulaire. Un champ vide (pas de nom) est ignoré."""
    if upload is None or not upload.filename:
        return None
    content = upload.file.read()
    return UploadBlob(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type or "application/octet-stream",
    )


def read_uploads(uploads: Optional[List[UploadFile]]) -> List[UploadBlob]:
    blobs = [read_upload(upload) for upload in uploads or []]
    return [blob for blob in blobs if blob is not None]


def build_form(
    kind: str,
    values: Dict[str, Any],
    record_id: Optional[str] = None,
    primary: Optional[UploadBlob] = None,
    secondary: Optional[List[UploadBlob]] = None,
    repository=None,
) -> SubmissionForm:
    """
    Construit la saisie. En édition, le document existant est chargé d'abord
    et seuls les champs envoyés le remplacent.
    """
    pipeline = get_pipeline(kind)
    submitted = {name: value for name, value in values.items() if value is not None}

    if record_id:
        repository = repository or pipeline.repository
        try:
            existing = repository.get_by_id(pipeline.schema.collection, record_id)
        except RepositoryError as e:
            raise HTTPException(status_code=503, detail=str(e))
        if not existing:
            raise HTTPException(status_code=404, detail=f"{kind.capitalize()} not found")
        form = SubmissionForm.from_record(pipeline.schema, existing)
        form.values.update(submitted)
    else:
        form = SubmissionForm(values=submitted)

    form.primary_file = primary
    form.secondary_files = secondary or []
    return form


def run_submission(kind: str, form_id: str, form: SubmissionForm) -> Dict[str, Any]:
    """Exécute le pipeline et traduit son issue en réponse HTTP."""
    pipeline = get_pipeline(kind)
    tracker = submission_registry.tracker(form_id)

    try:
        result = pipeline.submit(form, tracker)
    except SubmissionInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))

    if result.succeeded:
        return {
            "success": True,
            "id": result.record_id,
            "record": result.record,
            "progress": result.progress.to_dict(),
        }

    status_code = 422 if isinstance(result.exception, ValidationError) else 502
    raise HTTPException(status_code=status_code, detail=result.progress.to_dict())
