import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from app.errors import SubmissionInProgress
from app.models.progress import ProgressDescriptor, Stage
from app.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

Listener = Callable[[ProgressDescriptor], None]


class ProgressTracker:
    """
    Progression d'un formulaire de soumission.

    Une seule tentative à la fois. Chaque tentative reçoit un numéro et un
    jeton d'annulation. Les mises à jour d'une tentative périmée (envoi encore
    en cours après un timeout) sont ignorées. Le pourcentage ne recule jamais
    au sein d'une tentative.
    """

    def __init__(self, form_id: Optional[str] = None):
        self.form_id = form_id
        self._lock = threading.Lock()
        self._current = ProgressDescriptor()
        self._attempt = 0
        self._token: Optional[CancellationToken] = None
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def current(self) -> ProgressDescriptor:
        with self._lock:
            return self._current.model_copy()

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._current.busy

    def _set(self, descriptor: ProgressDescriptor):
        self._current = descriptor
        for listener in self._listeners:
            listener(descriptor.model_copy())

    def begin(self) -> Tuple[int, CancellationToken]:
        with self._lock:
            if self._current.busy:
                raise SubmissionInProgress(f"A submission is already in progress for form {self.form_id}")
            self._attempt += 1
            self._token = CancellationToken()
            self._set(ProgressDescriptor(stage=Stage.VALIDATING, label="Validating form...", percent=0))
            return self._attempt, self._token

    def advance(self, attempt: int, stage: Stage, label: str, percent: float):
        with self._lock:
            if attempt != self._attempt or not self._current.busy:
                return
            percent = min(max(float(percent), self._current.percent), 100.0)
            if stage != self._current.stage:
                logger.info(f"Form {self.form_id}: {self._current.stage.value} -> {stage.value} ({percent:.0f}%)")
            self._set(ProgressDescriptor(stage=stage, label=label, percent=percent))

    def fail(self, attempt: int, message: str, field_errors: Optional[Dict[str, str]] = None):
        with self._lock:
            if attempt != self._attempt or not self._current.busy:
                return
            self._set(ProgressDescriptor(
                stage=Stage.FAILED,
                label=f"Error: {message}",
                percent=self._current.percent,
                error=True,
                error_message=message,
                failed_stage=self._current.stage,
                field_errors=field_errors or {},
            ))

    def succeed(self, attempt: int, record_id: str):
        with self._lock:
            if attempt != self._attempt or not self._current.busy:
                return
            self._set(ProgressDescriptor(
                stage=Stage.SUCCEEDED, label="Success!", percent=100.0, record_id=record_id,
            ))

    def reset(self, attempt: Optional[int] = None):
        """Retour à l'état idle, sauf si une tentative plus récente a démarré."""
        with self._lock:
            if attempt is not None and attempt != self._attempt:
                return
            if self._current.busy:
                return
            self._set(ProgressDescriptor())

    def cancel(self) -> bool:
        """Annule la tentative en cours. Retourne False s'il n'y en a pas."""
        with self._lock:
            if not self._current.busy or self._token is None:
                return False
            self._token.cancel()
            logger.info(f"Form {self.form_id}: cancellation requested")
            return True
