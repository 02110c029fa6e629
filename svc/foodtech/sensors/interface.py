# foodtech/sensors/interface.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class SensorReading:
    sensor_id: str              # e.g. "esphome", "esphome2"
    metric: str                 # e.g. "temperature"
    value: Optional[float] = None
    ts: Optional[float] = None  # unix timestamp of the fetch that produced value


class SensorClient(Protocol):
    """
    Minimal interface a sensor source must implement.
    One instance talks to one endpoint family; the suffix selects the device.
    """

    metric: str

    def fetch(self, suffix: str = "") -> SensorReading:
        """
        Fetch the current value once.

        Raises a GatewayError subclass when the endpoint cannot be reached,
        answers non-2xx, or answers with a body that carries no usable value.
        """
        ...
