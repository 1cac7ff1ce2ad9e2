"""
Description déclarative des formulaires de soumission (artiste, reel, vidéo).
Un même SubmissionPipeline est instancié pour chaque schéma.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Tuple

from app.database import ARTISTS, REELS, VIDEOS
from app.utils.string_utils import is_http_url

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
MAX_EXEMPLARY_WORKS = 5
MAX_VIDEO_SIZE_MB = 100


@dataclass(frozen=True)
class FileSlot:
    """Emplacement de fichier(s) d'un formulaire"""
    field: str  # champ du formulaire
    url_field: str  # clé du document qui reçoit l'URL (ou la liste d'URLs)
    label: str  # pour les libellés de progression
    storage_slot: str  # segment du chemin de stockage
    type_error: str
    mime_types: Tuple[str, ...] = ()
    mime_prefix: Optional[str] = None
    extensions: Tuple[str, ...] = ()
    max_files: int = 1
    required_on_create: bool = False
    required_error: str = ""
    max_size_mb: Optional[float] = None
    size_field: Optional[str] = None  # clé du document qui reçoit la taille en Mo

    def accepts(self, blob) -> bool:
        content_type = (blob.content_type or "").lower()
        if content_type in self.mime_types:
            return True
        if self.mime_prefix and content_type.startswith(self.mime_prefix):
            return True
        return blob.extension in self.extensions


Validator = Callable[[Dict[str, Any], bool, date], Dict[str, str]]


@dataclass(frozen=True)
class EntitySchema:
    kind: str
    collection: str
    storage_prefix: str
    text_fields: Tuple[str, ...]
    required: Dict[str, str] = field(default_factory=dict)  # champ -> message
    max_lengths: Dict[str, int] = field(default_factory=dict)
    url_fields: Tuple[str, ...] = ()
    date_fields: Tuple[str, ...] = ()
    primary: Optional[FileSlot] = None
    secondary: Optional[FileSlot] = None
    validators: Tuple[Validator, ...] = ()
    notify: bool = False
    name_field: Optional[str] = None
    description_field: Optional[str] = None


def parse_date(value: Any) -> Optional[date]:
    """Accepte une date ou une chaîne 'YYYY-MM-DD' (éventuellement suivie d'une heure)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def validate_exhibition_dates(values: Dict[str, Any], is_new: bool, today: date) -> Dict[str, str]:
    errors = {}
    raw_start = values.get("exhibitionStartDate")
    raw_end = values.get("exhibitionEndDate")
    start = parse_date(raw_start)
    end = parse_date(raw_end)

    if not raw_start:
        errors["exhibitionStartDate"] = "Exhibition start date is required"
    elif start is None:
        errors["exhibitionStartDate"] = "Please enter a valid date"
    elif is_new and start < today:
        errors["exhibitionStartDate"] = "Exhibition start date cannot be in the past"

    if not raw_end:
        errors["exhibitionEndDate"] = "Exhibition end date is required"
    elif end is None:
        errors["exhibitionEndDate"] = "Please enter a valid date"
    elif start is not None and end <= start:
        errors["exhibitionEndDate"] = "End date must be after start date"

    return errors


def validate_form(schema: EntitySchema, form, today: date) -> Dict[str, str]:
    """
    Contrôles locaux (obligatoires, formats, longueurs, dates, fichiers).
    Retourne les erreurs indexées par champ, vide si le formulaire est valide.
    """
    values = form.values
    is_new = form.is_new
    errors: Dict[str, str] = {}

    for name, message in schema.required.items():
        if not str(values.get(name) or "").strip():
            errors[name] = message

    for name, limit in schema.max_lengths.items():
        if len(str(values.get(name) or "")) > limit:
            errors.setdefault(name, f"Must be at most {limit} characters")

    for name in schema.url_fields:
        value = str(values.get(name) or "").strip()
        if value and not is_http_url(value):
            errors[name] = "Please enter a valid URL (http:// or https://)"

    primary = schema.primary
    if primary is not None:
        blob = form.primary_file
        if blob is None:
            if is_new and primary.required_on_create:
                errors[primary.field] = primary.required_error
        elif not primary.accepts(blob):
            errors[primary.field] = primary.type_error
        elif primary.max_size_mb is not None and blob.size_mb > primary.max_size_mb:
            errors[primary.field] = f"File size must be less than {primary.max_size_mb:g}MB"

    secondary = schema.secondary
    if secondary is not None and form.secondary_files:
        if len(form.secondary_files) > secondary.max_files:
            errors[secondary.field] = f"You can upload up to {secondary.max_files} files"
        elif not all(secondary.accepts(blob) for blob in form.secondary_files):
            errors[secondary.field] = secondary.type_error

    for validator in schema.validators:
        for name, message in validator(values, is_new, today).items():
            errors.setdefault(name, message)

    return errors


def build_record(schema: EntitySchema, values: Dict[str, Any]) -> Dict[str, Any]:
    """Document à écrire, sans les URLs (posées après les envois)."""
    record = {}
    for name in schema.text_fields:
        value = values.get(name)
        if name in schema.date_fields:
            parsed = parse_date(value)
            record[name] = parsed.isoformat() if parsed else None
        elif name in schema.url_fields:
            record[name] = str(value).strip() if value else None
        else:
            record[name] = str(value or "").strip()
    return record


ARTIST_SCHEMA = EntitySchema(
    kind="artist",
    collection=ARTISTS,
    storage_prefix="artists",
    text_fields=(
        "artistName", "artistBio",
        "facebookProfile", "twitterProfile", "instagramProfile", "otherProfile",
        "exhibitionName", "exhibitionStartDate", "exhibitionEndDate",
    ),
    required={
        "artistName": "Artist name is required",
        "artistBio": "Artist bio is required",
        "exhibitionName": "Exhibition name is required",
    },
    max_lengths={"artistBio": 2500},
    url_fields=("facebookProfile", "twitterProfile", "instagramProfile", "otherProfile"),
    date_fields=("exhibitionStartDate", "exhibitionEndDate"),
    primary=FileSlot(
        field="artistPhoto",
        url_field="artistPhotoURL",
        label="artist photo",
        storage_slot="photo",
        type_error="Please select a valid image file",
        mime_prefix="image/",
        extensions=IMAGE_EXTENSIONS,
    ),
    secondary=FileSlot(
        field="exemplaryWorks",
        url_field="exemplaryWorksURLs",
        label="artwork images",
        storage_slot="works",
        type_error="Please select valid image files",
        mime_prefix="image/",
        extensions=IMAGE_EXTENSIONS,
        max_files=MAX_EXEMPLARY_WORKS,
    ),
    validators=(validate_exhibition_dates,),
)

REEL_SCHEMA = EntitySchema(
    kind="reel",
    collection=REELS,
    storage_prefix="reels",
    text_fields=("reelName", "reelDescription"),
    required={"reelName": "Reel name is required"},
    # Limite de légende Instagram
    max_lengths={"reelDescription": 2200},
    primary=FileSlot(
        field="reelVideo",
        url_field="reelVideoUrl",
        label="reel video",
        storage_slot="video",
        type_error="Please select a valid video file (MP4, MOV, or AVI)",
        mime_types=("video/mp4", "video/quicktime", "video/x-msvideo"),
        extensions=(".mp4", ".mov", ".avi"),
        required_on_create=True,
        required_error="Reel video file is required",
        size_field="reelSize",
    ),
    notify=True,
    name_field="reelName",
    description_field="reelDescription",
)

VIDEO_SCHEMA = EntitySchema(
    kind="video",
    collection=VIDEOS,
    storage_prefix="videos",
    text_fields=("videoName", "videoDescription"),
    required={
        "videoName": "Video name is required",
        "videoDescription": "Video description is required",
    },
    max_lengths={"videoDescription": 2500},
    primary=FileSlot(
        field="videoFile",
        url_field="videoUrl",
        label="video file",
        storage_slot="video",
        type_error="Please select a valid video file (MP4, MOV, AVI, WEBM)",
        mime_types=("video/mp4", "video/mov", "video/quicktime", "video/avi", "video/x-msvideo", "video/webm"),
        extensions=(".mp4", ".mov", ".avi", ".webm"),
        required_on_create=True,
        required_error="Video file is required",
        max_size_mb=MAX_VIDEO_SIZE_MB,
        size_field="videoSize",
    ),
    notify=True,
    name_field="videoName",
    description_field="videoDescription",
)

SCHEMAS = {schema.kind: schema for schema in (ARTIST_SCHEMA, REEL_SCHEMA, VIDEO_SCHEMA)}
