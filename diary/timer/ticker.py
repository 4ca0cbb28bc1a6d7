import logging
import threading

logger = logging.getLogger(__name__)


class Ticker:
    """Drive ``timer.tick()`` from a background thread while the context is open."""

    def __init__(self, timer, interval=1.0):
        self.timer = timer
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread = None

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="pomodoro-ticker")
        self._thread.daemon = True
        self._thread.start()

    def stop(self):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _run(self):
        while not self._stop_event.wait(self.interval):
            try:
                self.timer.tick()
            except Exception:
                # The timer has already rolled back; keep driving it
                logger.exception("pomodoro tick failed")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
