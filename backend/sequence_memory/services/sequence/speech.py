import threading
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict


class SpeechAnnouncer(ABC):
    """Reads text aloud once and reports when playback has ended."""

    @abstractmethod
    def speak(self, text: str, rate: float, on_done: Callable[[], None]) -> None:
        pass


class SocketAnnouncer(SpeechAnnouncer):
    """Hands speech to the connected browser over Socket.IO.

    The client receives a ``speak`` event, plays it with speech synthesis
    (preferring ``lang``, else its default voice) and answers with
    ``speech_done`` carrying the same token.
    """

    def __init__(self, socketio, namespace: str = '/ws', lang: str = 'en-US', logger=None):
        self.socketio = socketio
        self.namespace = namespace
        self.lang = lang
        self.logger = logger
        self._pending: Dict[str, Callable[[], None]] = {}
        self._lock = threading.Lock()

    def speak(self, text: str, rate: float, on_done: Callable[[], None]) -> None:
        token = uuid.uuid4().hex
        with self._lock:
            # A new utterance supersedes any that never reported back
            self._pending.clear()
            self._pending[token] = on_done
        self.socketio.emit('speak', {
            'token': token,
            'text': text,
            'rate': rate,
            'lang': self.lang,
        }, namespace=self.namespace)
        if self.logger:
            self.logger.info(f"[speak] token={token} rate={rate} chars={len(text)}")

    def complete(self, token: str) -> bool:
        """Run the callback for ``token``. Unknown or repeated tokens are ignored."""
        with self._lock:
            on_done = self._pending.pop(token, None)
        if on_done is None:
            return False
        on_done()
        return True

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)
