"""
Envoi des fichiers d'une soumission vers le stockage objet.

- upload_file : un fichier, progression optionnelle
- upload_all  : plusieurs fichiers en parallèle, progression globale agrégée
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, FIRST_EXCEPTION, wait
from dataclasses import dataclass
from typing import Callable, List, Optional

from app.errors import UploadError
from app.utils.cancellation import CancellationToken
from app.utils.string_utils import safe_filename

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

MAX_PARALLEL_UPLOADS = 5


@dataclass
class UploadBlob:
    """Fichier reçu du formulaire, gardé en mémoire le temps de la tentative."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def size_mb(self) -> float:
        return round(self.size_bytes / (1024 * 1024), 2)

    @property
    def extension(self) -> str:
        name = self.filename.lower()
        return name[name.rfind("."):] if "." in name else ""


def upload_file(
    storage,
    blob: UploadBlob,
    path: str,
    on_progress: Optional[ProgressCallback] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> str:
    """
    Envoie un fichier à `path` et retourne son URL publique.
    Avec `on_progress`, l'envoi se fait par blocs et la progression finit à 100.
    Les UploadError sont propagées sans nouvelle tentative.
    """
    logger.debug(f"Uploading {blob.filename} ({blob.size_bytes} bytes) to {path}")
    if on_progress is not None:
        url = storage.put_resumable(
            path, blob.content, on_progress,
            content_type=blob.content_type, cancel_token=cancel_token,
        )
    else:
        url = storage.put(path, blob.content, content_type=blob.content_type, cancel_token=cancel_token)
    logger.info(f"📤 Uploaded {path}")
    return url


class _ProgressAccumulator:
    """Combine la progression de n fichiers en un pourcentage global croissant."""

    def __init__(self, total_files: int, on_overall_progress: Optional[ProgressCallback]):
        self._fractions = [0.0] * total_files
        self._callback = on_overall_progress
        self._last = 0.0
        self._lock = threading.Lock()

    def update(self, index: int, percent: float):
        with self._lock:
            fraction = min(max(percent / 100.0, 0.0), 1.0)
            self._fractions[index] = max(self._fractions[index], fraction)
            overall = min(100.0 * sum(self._fractions) / len(self._fractions), 100.0)
            # Jamais de recul, même si deux fichiers se croisent
            self._last = max(self._last, overall)
            if self._callback is not None:
                self._callback(self._last)


def upload_all(
    storage,
    files: List[UploadBlob],
    base_path: str,
    on_overall_progress: Optional[ProgressCallback] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> List[str]:
    """
    Envoie `files` en parallèle sous `base_path` et retourne leurs URLs
    dans l'ordre d'entrée. Au premier échec, lève l'UploadError observée
    sans retourner de liste partielle.
    """
    if not files:
        return []

    accumulator = _ProgressAccumulator(len(files), on_overall_progress)
    timestamp = int(time.time() * 1000)
    failures: List[BaseException] = []
    failures_lock = threading.Lock()

    def _upload(index: int, blob: UploadBlob) -> str:
        # Nom unique pour éviter les collisions entre soumissions
        path = f"{base_path}{timestamp}_{index}_{safe_filename(blob.filename)}"
        try:
            return upload_file(
                storage, blob, path,
                on_progress=lambda pct: accumulator.update(index, pct),
                cancel_token=cancel_token,
            )
        except Exception as exc:
            with failures_lock:
                failures.append(exc)
            raise

    executor = ThreadPoolExecutor(max_workers=min(len(files), MAX_PARALLEL_UPLOADS))
    try:
        futures = [executor.submit(_upload, i, blob) for i, blob in enumerate(files)]
        wait(futures, return_when=FIRST_EXCEPTION)
        if failures:
            exc = failures[0]
            logger.error(f"Upload of {len(files)} files to {base_path} failed: {exc}")
            if isinstance(exc, UploadError):
                raise exc
            raise UploadError(f"Upload failed: {exc}") from exc
        return [future.result() for future in futures]
    finally:
        # Les envois déjà démarrés continuent, on n'attend pas
        executor.shutdown(wait=False, cancel_futures=True)
