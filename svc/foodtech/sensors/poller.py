# foodtech/sensors/poller.py
from __future__ import annotations
import logging
import threading
from typing import Dict, Optional

from ..config import POLL_INTERVAL_MS
from ..errors import GatewayError
from .interface import SensorClient, SensorReading

logger = logging.getLogger(__name__)


class SensorPoller:
    """
    Keeps the most recent good reading per endpoint suffix.

    A reading is only ever replaced by a newer successful fetch, so a failed
    or malformed poll leaves the last good value in place. Writes are plain
    reference swaps from either the worker thread or a caller of read_now();
    whichever completes last wins.
    """

    def __init__(self, client: SensorClient) -> None:
        self.client = client
        self._readings: Dict[str, SensorReading] = {}
        self._stop_event: Optional[threading.Event] = None
        self._worker: Optional[threading.Thread] = None
        self.interval_s: Optional[float] = None
        self.suffix = ""

    # --- lifecycle ---------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def start(self, interval_ms: int = POLL_INTERVAL_MS, suffix: str = "") -> None:
        if self.running:
            logger.debug("Sensor poller already running")
            return
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self.interval_s = interval_ms / 1000.0
        self.suffix = suffix
        # one event per worker; a thread left over from a timed-out stop() keeps its own set event
        self._stop_event = threading.Event()
        self._worker = threading.Thread(
            target=self._worker_loop,
            args=(self._stop_event,),
            name=f"foodtech-poller-esphome{suffix}",
            daemon=True,
        )
        self._worker.start()
        logger.info(f"Sensor poller started for esphome{suffix} every {self.interval_s}s")

    def stop(self, timeout_s: float = 5.0) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        worker, self._worker = self._worker, None
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout=timeout_s)
            if worker.is_alive():
                logger.warning(f"Sensor poller thread {worker.name} still finishing a request")
            else:
                logger.info("Sensor poller stopped")

    def _worker_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                self.poll_once(self.suffix)
            except Exception:
                logger.exception("Unexpected error in sensor poller")
            stop_event.wait(self.interval_s)

    # --- polling -----------------------------------------------------------

    def poll_once(self, suffix: str = "") -> bool:
        """
        Fetch once and update the cache. Returns True if the cache was updated.
        Never raises for gateway failures; they are logged instead.
        """
        try:
            reading = self.client.fetch(suffix)
        except GatewayError as e:
            logger.error(f"Sensor poll failed for esphome{suffix}: {e}")
            return False

        self._readings[suffix] = reading
        return True

    def read(self, suffix: str = "") -> Optional[float]:
        """Cached value, no network. None until the first successful poll."""
        return self.reading(suffix).value

    def read_now(self, suffix: str = "") -> Optional[float]:
        """Poll on demand, then return whatever is cached (fresh or stale)."""
        self.poll_once(suffix)
        return self.read(suffix)

    def reading(self, suffix: str = "") -> SensorReading:
        cached = self._readings.get(suffix)
        if cached is not None:
            return cached
        return SensorReading(sensor_id=f"esphome{suffix}", metric=self.client.metric)
