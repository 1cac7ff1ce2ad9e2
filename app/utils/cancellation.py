import threading

from app.errors import UploadCancelled


class CancellationToken:
    """
    Jeton d'annulation partagé entre le pipeline et les transferts en cours.
    Les transferts le consultent entre deux blocs envoyés.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise UploadCancelled("Upload cancelled")
