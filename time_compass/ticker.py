import logging

logger = logging.getLogger('time_compass.ticker')


class Ticker:
    """
    Repeating callback on a Tk widget's after() loop.

    Each Ticker owns one pending after() job at most. cancel() drops it,
    and the callback may cancel its own ticker. Used as a context manager
    the ticker is started on entry and cancelled on exit.
    """

    def __init__(self, widget, callback, interval_ms=1000, name="tick"):
        self.widget = widget
        self.callback = callback
        self.interval_ms = interval_ms
        self.name = name
        self._job = None
        self._running = False

    @property
    def running(self):
        return self._running

    def start(self):
        if self._running:
            return
        self._running = True
        self._schedule()
        logger.debug(f"{self.name} ticker started ({self.interval_ms} ms)")

    def cancel(self):
        if not self._running:
            return
        self._running = False
        if self._job is not None:
            self.widget.after_cancel(self._job)
            self._job = None
        logger.debug(f"{self.name} ticker cancelled")

    def _schedule(self):
        self._job = self.widget.after(self.interval_ms, self._fire)

    def _fire(self):
        self._job = None
        if not self._running:
            return
        self.callback()
        if self._running and self._job is None:
            self._schedule()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cancel()
        return False
