import logging
import threading
import time
from typing import Callable, Dict, Optional

from app.config import config
from app.models.progress import ProgressDescriptor, Stage
from app.pipeline.progress import ProgressTracker
from app.pipeline.schemas import SCHEMAS
from app.pipeline.submission import SubmissionPipeline

logger = logging.getLogger(__name__)


class SubmissionRegistry:
    """
    Suivi de progression par formulaire (`formId` envoyé par le frontend).

    Un tracker resté idle plus de `idle_ttl` secondes est retiré au prochain
    appel de `tracker()`. Un tracker occupé ou dans un état final est conservé.
    """

    def __init__(self, idle_ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.idle_ttl = config.FORM_IDLE_TTL_SECONDS if idle_ttl is None else idle_ttl
        self.clock = clock
        self._trackers: Dict[str, ProgressTracker] = {}
        self._idle_since: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _watch(self, form_id: str, tracker: ProgressTracker):
        def _on_change(descriptor: ProgressDescriptor):
            with self._lock:
                if self._trackers.get(form_id) is not tracker:
                    return
                if descriptor.stage == Stage.IDLE:
                    self._idle_since[form_id] = self.clock()
                else:
                    self._idle_since.pop(form_id, None)
        return _on_change

    def _prune(self):
        now = self.clock()
        expired = [form_id for form_id, since in self._idle_since.items() if now - since >= self.idle_ttl]
        for form_id in expired:
            del self._idle_since[form_id]
            self._trackers.pop(form_id, None)
        if expired:
            logger.info(f"🧹 Dropped {len(expired)} idle form tracker(s)")

    def tracker(self, form_id: str) -> ProgressTracker:
        # Ne prend jamais le verrou d'un tracker: ses listeners prennent celui du registre
        with self._lock:
            self._prune()
            tracker = self._trackers.get(form_id)
            if tracker is None:
                tracker = ProgressTracker(form_id)
                tracker.subscribe(self._watch(form_id, tracker))
                self._trackers[form_id] = tracker
                self._idle_since[form_id] = self.clock()
            elif form_id in self._idle_since:
                self._idle_since[form_id] = self.clock()
            return tracker

    def find(self, form_id: str) -> Optional[ProgressTracker]:
        with self._lock:
            return self._trackers.get(form_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._trackers)


submission_registry = SubmissionRegistry()

_pipelines: Dict[str, SubmissionPipeline] = {}
_pipelines_lock = threading.Lock()


def get_pipeline(kind: str) -> SubmissionPipeline:
    """Pipeline partagé pour `kind` (artist, reel, video), créé au premier appel."""
    with _pipelines_lock:
        if kind not in _pipelines:
            _pipelines[kind] = SubmissionPipeline(SCHEMAS[kind])
        return _pipelines[kind]
