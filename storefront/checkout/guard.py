import threading
from typing import Set


class SubmissionGuard:
    """
    Verrou à une place par session de checkout.
    acquire() est un compare-and-set: une seule soumission en vol par clé,
    les suivantes sont refusées (pas mises en attente).
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._busy: Set[str] = set()

    def acquire(self, key: str) -> bool:
        with self._lock:
            if key in self._busy:
                return False
            self._busy.add(key)
            return True

    def release(self, key: str) -> None:
        with self._lock:
            self._busy.discard(key)

    def is_busy(self, key: str) -> bool:
        with self._lock:
            return key in self._busy


# Partagé par tous les workers (threads) du process
submission_guard = SubmissionGuard()


def get_submission_guard() -> SubmissionGuard:
    return submission_guard
