import logging
import threading
from typing import Optional

from .session import GameSession

logger = logging.getLogger(__name__)


class SessionClock:
    """Background ticker that calls `session.tick()` once per interval until the game stops running."""

    def __init__(self, session: GameSession, interval: float = 1.0):
        self.session = session
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="rack-rush-clock", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval * 2)
        self._thread = None

    def _run(self):
        while not self._stop.wait(self.interval):
            if not self.session.tick():
                logger.info("Clock stopped: game is no longer running.")
                break
