"""
Pipeline de soumission commun aux formulaires artiste, reel et vidéo.

validating -> uploading_primary -> uploading_secondary -> persisting -> notifying
puis succeeded ou failed. Une étape sans travail est sautée.
"""

import logging
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from app.config import config
from app.errors import (
    MidnightSoldiersError,
    NotificationError,
    RepositoryError,
    UploadError,
    ValidationError,
)
from app.models.progress import ProgressDescriptor, Stage
from app.pipeline.progress import ProgressTracker
from app.pipeline.schemas import EntitySchema, build_record, validate_form
from app.services.storage.uploads import UploadBlob, upload_all, upload_file
from app.utils.cancellation import CancellationToken
from app.utils.string_utils import safe_filename

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], None]


def timer_scheduler(delay: float, callback: Callable[[], None]):
    """Exécute `callback` après `delay` secondes dans un thread démon."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


@dataclass
class SubmissionForm:
    """Saisie d'un formulaire. `record_id` est renseigné pour une modification."""
    values: Dict[str, Any] = field(default_factory=dict)
    primary_file: Optional[UploadBlob] = None
    secondary_files: List[UploadBlob] = field(default_factory=list)
    record_id: Optional[str] = None
    existing: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_new(self) -> bool:
        return not self.record_id

    @classmethod
    def from_record(cls, schema: EntitySchema, record: Dict[str, Any]) -> "SubmissionForm":
        """Préremplit le formulaire avec un document existant (mode édition)."""
        values = {name: record.get(name) for name in schema.text_fields if record.get(name) is not None}
        return cls(values=values, record_id=record.get("id"), existing=dict(record))


@dataclass
class SubmissionResult:
    progress: ProgressDescriptor
    record_id: Optional[str] = None
    record: Optional[Dict[str, Any]] = None
    exception: Optional[MidnightSoldiersError] = None

    @property
    def succeeded(self) -> bool:
        return self.progress.stage == Stage.SUCCEEDED


class SubmissionPipeline:
    """Un pipeline par type d'entité, paramétré par son EntitySchema."""

    def __init__(
        self,
        schema: EntitySchema,
        storage=None,
        repository=None,
        notifier=None,
        scheduler: Optional[Scheduler] = None,
        success_reset_seconds: Optional[float] = None,
        failure_reset_seconds: Optional[float] = None,
        upload_timeout: Optional[float] = None,
        persist_timeout: Optional[float] = None,
        notify_timeout: Optional[float] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        today: Callable[[], date] = date.today,
    ):
        if storage is None:
            from app.services.storage.storage_client import storage_client as storage
        if repository is None:
            from app.repositories.record_repo import record_repo as repository
        if notifier is None and schema.notify:
            from app.services.notifications.social_client import social_client as notifier

        self.schema = schema
        self.storage = storage
        self.repository = repository
        self.notifier = notifier
        self.scheduler = scheduler or timer_scheduler
        self.success_reset_seconds = (
            config.SUCCESS_RESET_SECONDS if success_reset_seconds is None else success_reset_seconds
        )
        self.failure_reset_seconds = (
            config.FAILURE_RESET_SECONDS if failure_reset_seconds is None else failure_reset_seconds
        )
        self.upload_timeout = upload_timeout or config.UPLOAD_STAGE_TIMEOUT_SECONDS
        self.persist_timeout = persist_timeout or config.PERSIST_STAGE_TIMEOUT_SECONDS
        self.notify_timeout = notify_timeout or config.NOTIFY_STAGE_TIMEOUT_SECONDS
        self.id_factory = id_factory
        self.today = today
        self._executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix=f"{schema.kind}-submission")

    # === Exécution ===

    def submit(self, form: SubmissionForm, tracker: Optional[ProgressTracker] = None) -> SubmissionResult:
        """
        Exécute une tentative complète pour `form`.
        Lève SubmissionInProgress si `tracker` a déjà une tentative en cours.
        Les autres erreurs sont rapportées dans le résultat et le descripteur.
        """
        tracker = tracker or ProgressTracker()
        attempt, token = tracker.begin()
        logger.info(f"🚀 {self.schema.kind} submission started (attempt {attempt}, form {tracker.form_id})")

        try:
            record_id, record = self._run(form, tracker, attempt, token)
        except ValidationError as exc:
            logger.info(f"{self.schema.kind} submission rejected: {sorted(exc.field_errors)}")
            tracker.fail(attempt, str(exc), exc.field_errors)
            return self._failed(tracker, attempt, exc)
        except (UploadError, RepositoryError) as exc:
            logger.error(f"❌ {self.schema.kind} submission failed: {exc}")
            tracker.fail(attempt, str(exc))
            return self._failed(tracker, attempt, exc)
        except Exception as exc:
            # Le formulaire ne doit pas rester verrouillé
            logger.exception(f"❌ Unexpected error in {self.schema.kind} submission")
            tracker.fail(attempt, f"Unexpected error: {exc}")
            self.scheduler(self.failure_reset_seconds, lambda: tracker.reset(attempt))
            raise

        tracker.succeed(attempt, record_id)
        logger.info(f"✅ {self.schema.kind} {record_id} submitted")
        progress = tracker.current()
        self.scheduler(self.success_reset_seconds, lambda: tracker.reset(attempt))
        return SubmissionResult(progress=progress, record_id=record_id, record=record)

    def _failed(self, tracker: ProgressTracker, attempt: int, exc: Exception) -> SubmissionResult:
        progress = tracker.current()
        # La saisie est conservée pour une nouvelle tentative
        self.scheduler(self.failure_reset_seconds, lambda: tracker.reset(attempt))
        return SubmissionResult(progress=progress, exception=exc)

    def _run_stage(self, token: CancellationToken, timeout: float, error_cls, what: str, fn, *args):
        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout:
            token.cancel()
            logger.error(f"⏱️ {what} timed out after {timeout:g}s")
            raise error_cls(f"{what} timed out") from None

    def _run(self, form: SubmissionForm, tracker: ProgressTracker, attempt: int, token: CancellationToken):
        schema = self.schema

        errors = validate_form(schema, form, self.today())
        if errors:
            raise ValidationError(errors)
        tracker.advance(attempt, Stage.VALIDATING, "Validation passed", 10)

        record_id = form.record_id or self.id_factory()
        record = build_record(schema, form.values)
        uploaded: List[str] = []

        primary = schema.primary
        if primary is not None and form.primary_file is not None:
            token.raise_if_cancelled()
            blob = form.primary_file
            tracker.advance(attempt, Stage.UPLOADING_PRIMARY, f"Uploading {primary.label}...", 30)
            path = f"{schema.storage_prefix}/{record_id}/{primary.storage_slot}/{safe_filename(blob.filename)}"

            def _on_primary(pct: float):
                tracker.advance(
                    attempt, Stage.UPLOADING_PRIMARY, f"Uploading {primary.label}: {pct:.0f}%", 30 + pct * 0.3
                )

            url = self._run_stage(
                token, self.upload_timeout, UploadError, f"Upload of {primary.label}",
                upload_file, self.storage, blob, path, _on_primary, token,
            )
            uploaded.append(url)
            record[primary.url_field] = url
            if primary.size_field:
                record[primary.size_field] = blob.size_mb

        secondary = schema.secondary
        if secondary is not None and form.secondary_files:
            token.raise_if_cancelled()
            tracker.advance(attempt, Stage.UPLOADING_SECONDARY, f"Uploading {secondary.label}...", 60)
            base_path = f"{schema.storage_prefix}/{record_id}/{secondary.storage_slot}/"

            def _on_secondary(pct: float):
                tracker.advance(
                    attempt, Stage.UPLOADING_SECONDARY, f"Uploading {secondary.label}: {pct:.0f}%", 60 + pct * 0.25
                )

            urls = self._run_stage(
                token, self.upload_timeout, UploadError, f"Upload of {secondary.label}",
                upload_all, self.storage, form.secondary_files, base_path, _on_secondary, token,
            )
            uploaded.extend(urls)
            record[secondary.url_field] = urls

        token.raise_if_cancelled()
        tracker.advance(attempt, Stage.PERSISTING, "Saving...", 85)
        try:
            self._run_stage(
                token, self.persist_timeout, RepositoryError, f"Saving {schema.kind}",
                self.repository.create_or_update, schema.collection, record_id, record,
            )
        except RepositoryError:
            if uploaded:
                logger.warning(f"Orphaned uploads for {schema.kind} {record_id}: {uploaded}")
            raise

        saved = {**form.existing, **record, "id": record_id}

        if schema.notify and self.notifier is not None and self.notifier.enabled:
            tracker.advance(attempt, Stage.NOTIFYING, "Posting to social media...", 90)
            self._notify(token, saved)

        return record_id, saved

    def _notify(self, token: CancellationToken, saved: Dict[str, Any]):
        schema = self.schema
        primary = schema.primary
        try:
            self._run_stage(
                token, self.notify_timeout, NotificationError, f"Social post for {saved['id']}",
                self.notifier.post_to_social,
                saved["id"],
                saved.get(schema.name_field),
                saved.get(schema.description_field),
                saved.get(primary.url_field) if primary else None,
                saved.get(primary.size_field) if primary and primary.size_field else None,
                token,
            )
        except NotificationError as exc:
            logger.warning(f"⚠️ Social post failed for {schema.kind} {saved['id']}: {exc}")
