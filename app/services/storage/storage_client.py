"""
Client Supabase Storage pour l'envoi des photos, œuvres et vidéos.
Utilise l'API REST (https://<projet>.supabase.co/storage/v1).
"""

import logging
from typing import Callable, Dict, Iterator, Optional
from urllib.parse import quote

import requests

from app.config import config
from app.errors import UploadError, UploadCancelled
from app.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class StorageClient:
    """Accès au bucket de stockage objet du site"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        bucket: Optional[str] = None,
        timeout: Optional[float] = None,
        chunk_size: Optional[int] = None,
    ):
        self.base_url = (base_url if base_url is not None else config.SUPABASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else config.SUPABASE_KEY
        self.bucket = bucket or config.STORAGE_BUCKET
        self.timeout = timeout or config.STORAGE_TIMEOUT_SECONDS
        self.chunk_size = chunk_size or config.UPLOAD_CHUNK_SIZE

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
        }

    def _object_path(self, path: str) -> str:
        return quote(path.lstrip("/"), safe="/")

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{self._object_path(path)}"

    def _upload(self, path: str, body, content_type: str, cancel_token: Optional[CancellationToken]) -> str:
        if not self.base_url or not self.api_key:
            logger.error("Storage service not configured (SUPABASE_URL / SUPABASE_KEY missing)")
            raise UploadError("Storage service not configured")

        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{self._object_path(path)}"
        headers = self._auth_headers()
        headers["Content-Type"] = content_type or "application/octet-stream"
        headers["x-upsert"] = "false"

        try:
            response = requests.request("POST", url, data=body, headers=headers, timeout=self.timeout)
        except UploadError:
            raise
        except requests.RequestException as exc:
            if cancel_token is not None and cancel_token.cancelled:
                raise UploadCancelled("Upload cancelled") from exc
            logger.error("Storage upload failed for %s: %s", path, exc)
            raise UploadError(f"Upload failed: {exc}") from exc

        if response.status_code not in (200, 201):
            body_preview = response.text[:200]
            logger.error("Storage API error %s for %s: %s", response.status_code, path, body_preview)
            raise UploadError(f"Failed to upload {path}: HTTP {response.status_code}")

        return self.public_url(path)

    def put(
        self,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """
        Envoie `content` en une seule requête.

        Returns:
            URL publique de l'objet créé
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return self._upload(path, content, content_type, cancel_token)

    def put_resumable(
        self,
        path: str,
        content: bytes,
        on_progress: ProgressCallback,
        content_type: str = "application/octet-stream",
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """
        Envoie `content` par blocs en signalant la progression (0-100).
        La dernière valeur signalée est toujours 100, juste avant le retour.
        """
        total = len(content)

        def _chunks() -> Iterator[bytes]:
            sent = 0
            for start in range(0, total, self.chunk_size):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()
                chunk = content[start:start + self.chunk_size]
                yield chunk
                sent += len(chunk)
                on_progress(sent / total * 100)

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        url = self._upload(path, _chunks(), content_type, cancel_token)
        on_progress(100.0)
        return url


# Instance globale du client
storage_client = StorageClient()
