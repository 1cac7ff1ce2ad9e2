"""
Client du backend compagnon qui publie les reels sur les réseaux sociaux.
Contrat unique : PUT {SOCIAL_API_URL}/api/post-to-social/{id}
"""

import logging
from typing import Dict, Optional

import requests

from app.config import config
from app.errors import NotificationError
from app.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class SocialClient:
    """Notifie le backend compagnon qu'un reel est prêt à être publié"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url if base_url is not None else config.SOCIAL_API_URL).rstrip("/")
        self.timeout = timeout or config.SOCIAL_API_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def _request(self, method: str, endpoint: str, **kwargs) -> Optional[Dict]:
        """
        Effectue une requête HTTP vers le backend compagnon avec gestion des erreurs.
        """
        url = f"{self.base_url}{endpoint}"
        headers = kwargs.pop("headers", {})
        headers.update({"Content-Type": "application/json", "Accept": "application/json"})

        try:
            response = requests.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Social API request failed: %s", exc)
            raise NotificationError(str(exc)) from exc

        if not response.ok:
            body_preview = response.text[:400]
            logger.error("Social API error %s: %s", response.status_code, body_preview)
            raise NotificationError(f"Social API error {response.status_code}")

        try:
            return response.json()
        except ValueError:
            return {}

    def post_to_social(
        self,
        record_id: str,
        name: str,
        description: str,
        video_url: str,
        size_mb: Optional[float],
        cancel_token: Optional[CancellationToken] = None,
    ) -> Optional[Dict]:
        """
        Demande la publication d'un reel.
        Retourne la réponse JSON, ou None si aucun backend n'est configuré.
        """
        if not self.enabled:
            logger.warning("SOCIAL_API_URL missing. Skipping social post for %s", record_id)
            return None

        if cancel_token is not None and cancel_token.cancelled:
            raise NotificationError("Notification cancelled")

        payload = {
            "reelName": name,
            "reelDescription": description,
            "reelVideoUrl": video_url,
            "reelSize": size_mb,
            "reelId": record_id,
        }
        data = self._request("PUT", f"/api/post-to-social/{record_id}", json=payload)
        logger.info("📣 Social post requested for %s", record_id)
        return data


# Instance globale du client
social_client = SocialClient()
