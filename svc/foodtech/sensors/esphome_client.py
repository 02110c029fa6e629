# foodtech/sensors/esphome_client.py
from __future__ import annotations
import math
import numbers
import re
import time
from typing import Any, Callable

from ..errors import InvalidSuffixError, MalformedResponseError
from ..gateway import GatewayHTTP
from .interface import SensorClient, SensorReading

# Suffixes only ever extend the "esphome" path segment
SUFFIX_PATTERN = re.compile(r"[A-Za-z0-9_-]*")


def temperature_path(suffix: str = "") -> str:
    """ESPHome temperature endpoint; the suffix is glued onto "esphome" (esphome2, esphome-kitchen)."""
    if not SUFFIX_PATTERN.fullmatch(suffix):
        raise InvalidSuffixError(f"Suffix {suffix!r} is not a plain device name")
    return f"/esphome{suffix}/sensor/temperature"


def parse_value(payload: Any) -> float:
    """
    Pull the numeric "value" field out of an ESPHome state payload.

    0 is a valid reading; booleans, strings, NaN and infinities are not.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")
    value = payload.get("value")
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise MalformedResponseError(f"Missing or non-numeric value: {value!r}")
    try:
        value = float(value)
    except OverflowError as e:
        raise MalformedResponseError("value does not fit in a float") from e
    if not math.isfinite(value):
        raise MalformedResponseError(f"value is not finite: {value}")
    return value


class EspHomeTemperatureClient(SensorClient):
    """Reads the temperature sensor exposed by an ESPHome node behind the gateway."""

    metric = "temperature"

    def __init__(
        self,
        gateway: GatewayHTTP,
        endpoint_builder: Callable[[str], str] = temperature_path,
    ) -> None:
        self.gateway = gateway
        self.endpoint_builder = endpoint_builder

    def fetch(self, suffix: str = "") -> SensorReading:
        response = self.gateway.get(
            self.endpoint_builder(suffix),
            headers={"Content-Type": "application/json"},
        )
        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Unparsable JSON body: {e}") from e

        return SensorReading(
            sensor_id=f"esphome{suffix}",
            metric=self.metric,
            value=parse_value(payload),
            ts=time.time(),
        )
