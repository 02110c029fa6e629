from __future__ import annotations
import logging
from typing import Any, Mapping, Optional, Union

from .adapter import DeviceSessionClient
from .config import (
    AUTO_POLL,
    EXTENSION_ID,
    EXTENSION_NAME,
    EXTENSION_URL,
    POLL_INTERVAL_MS,
    SENSOR_SUFFIX,
)
from .errors import NotAuthenticatedError
from .gateway import GatewayHTTP
from .models import (
    BlockArgument,
    BlockInfo,
    CommandResult,
    DeviceArgs,
    DeviceStatus,
    ExtensionInfo,
    TemperatureArgs,
)
from .sensors.esphome_client import EspHomeTemperatureClient
from .sensors.interface import SensorReading
from .sensors.poller import SensorPoller

logger = logging.getLogger(__name__)

TemperatureArgsLike = Union[TemperatureArgs, Mapping[str, Any], None]
DeviceArgsLike = Union[DeviceArgs, Mapping[str, Any], None]


def _temperature_args(args: TemperatureArgsLike) -> TemperatureArgs:
    if isinstance(args, TemperatureArgs):
        return args
    return TemperatureArgs.model_validate(dict(args or {}))


def _device_args(args: DeviceArgsLike) -> DeviceArgs:
    if isinstance(args, DeviceArgs):
        return args
    return DeviceArgs.model_validate(dict(args or {}))


class FoodTechExtension:
    """
    The block surface handed to the host: a temperature reporter and on/off
    commands for a smart plug.

    Owns one sensor poller and one device session client; both share the
    same gateway connection settings but not the same HTTP session.
    """

    def __init__(
        self,
        poller: SensorPoller,
        device_client: DeviceSessionClient,
        auto_poll: bool = AUTO_POLL,
        poll_interval_ms: int = POLL_INTERVAL_MS,
        poll_suffix: str = SENSOR_SUFFIX,
    ) -> None:
        self.poller = poller
        self.device_client = device_client
        self.auto_poll = auto_poll
        self.poll_interval_ms = poll_interval_ms
        self.poll_suffix = poll_suffix

    @classmethod
    def from_config(cls) -> "FoodTechExtension":
        """Build an extension wired to the gateway configured in the environment."""
        poller = SensorPoller(EspHomeTemperatureClient(GatewayHTTP()))
        device_client = DeviceSessionClient(GatewayHTTP())
        return cls(poller, device_client)

    # --- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        if self.auto_poll:
            self.poller.start(self.poll_interval_ms, self.poll_suffix)
        if self.prepare_device():
            logger.info("Smart plug ready")
        else:
            logger.warning("Smart plug unavailable until a login succeeds")

    def stop(self) -> None:
        self.poller.stop()
        self.device_client.gateway.close()
        sensor_gateway = getattr(self.poller.client, "gateway", None)
        if sensor_gateway is not None and sensor_gateway is not self.device_client.gateway:
            sensor_gateway.close()

    def prepare_device(self, password: Optional[str] = None) -> bool:
        return self.device_client.login(password)

    # --- metadata ----------------------------------------------------------

    def get_info(self) -> ExtensionInfo:
        return ExtensionInfo(
            id=EXTENSION_ID,
            name=EXTENSION_NAME,
            extension_url=EXTENSION_URL,
            show_status_button=False,
            blocks=[
                BlockInfo(
                    opcode="getTemperature",
                    block_type="reporter",
                    text="temperature [SUFFIX]",
                    func="getTemperature",
                    arguments=[BlockArgument(name="SUFFIX", default_value="")],
                ),
                BlockInfo(
                    opcode="turnOn",
                    block_type="command",
                    text="turn on [DEVICE]",
                    func="turnOn",
                    arguments=[BlockArgument(name="DEVICE", default_value=DeviceArgs().device)],
                ),
                BlockInfo(
                    opcode="turnOff",
                    block_type="command",
                    text="turn off [DEVICE]",
                    func="turnOff",
                    arguments=[BlockArgument(name="DEVICE", default_value=DeviceArgs().device)],
                ),
            ],
        )

    # --- blocks ------------------------------------------------------------

    def get_temperature(self, args: TemperatureArgsLike = None) -> Optional[float]:
        """Reporter: fetch now, falling back to the last good value."""
        return self.poller.read_now(_temperature_args(args).suffix)

    def cached_temperature(self, args: TemperatureArgsLike = None) -> SensorReading:
        return self.poller.reading(_temperature_args(args).suffix)

    def turn_on(self, args: DeviceArgsLike = None) -> CommandResult:
        return self._set_status("on", _device_args(args).device)

    def turn_off(self, args: DeviceArgsLike = None) -> CommandResult:
        return self._set_status("off", _device_args(args).device)

    def _set_status(self, status: DeviceStatus, device_id: str) -> CommandResult:
        try:
            return self.device_client.set_status(status, device_id)
        except NotAuthenticatedError as e:
            logger.warning(str(e))
            return CommandResult(
                ok=False,
                status=status,
                device_id=device_id,
                outcome="not_authenticated",
                message="not logged in to the smart plug gateway",
            )
