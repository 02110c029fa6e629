from __future__ import annotations
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_DEVICE

DeviceStatus = Literal["on", "off"]
CommandOutcome = Literal["sent", "not_authenticated", "http_status", "network"]


class DeviceSession(BaseModel):
    """Session obtained from the smart plug gateway login."""
    model_config = ConfigDict(frozen=True)

    token: str = Field(description="Bearer token returned by the login endpoint")
    created_at: float = Field(description="Unix timestamp of the successful login")


class DeviceCommand(BaseModel):
    """One on/off request for a single device."""
    device_id: str = Field(description="Device name known to the gateway (e.g., smartplug)")
    status: DeviceStatus = Field(description="Requested power state")


class CommandResult(BaseModel):
    """Outcome of a device command."""
    ok: bool = Field(description="Whether the gateway accepted the command")
    status: DeviceStatus = Field(description="Requested power state")
    device_id: str = Field(description="Target device")
    outcome: CommandOutcome = Field(description="sent, not_authenticated, http_status or network")
    status_code: Optional[int] = Field(default=None, description="Gateway HTTP status, if one was received")
    message: str = Field(default="", description="Status message describing the result")


def _cast_to_str(value: Any) -> Any:
    # Host arguments arrive as whatever the block field held (numbers, None)
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class TemperatureArgs(BaseModel):
    """Arguments of the temperature reporter block."""
    model_config = ConfigDict(populate_by_name=True)

    suffix: str = Field(default="", alias="SUFFIX", description="Appended to 'esphome' in the sensor path")

    @field_validator("suffix", mode="before")
    @classmethod
    def cast_suffix(cls, v: Any) -> Any:
        return _cast_to_str(v)


class DeviceArgs(BaseModel):
    """Arguments of the on/off command blocks."""
    model_config = ConfigDict(populate_by_name=True)

    device: str = Field(default=DEFAULT_DEVICE, alias="DEVICE", description="Device name known to the gateway")

    @field_validator("device", mode="before")
    @classmethod
    def cast_device(cls, v: Any) -> Any:
        v = _cast_to_str(v)
        if v == "":
            return DEFAULT_DEVICE
        return v


class BlockArgument(BaseModel):
    name: str
    type: Literal["string", "number"] = "string"
    default_value: str = ""


class BlockInfo(BaseModel):
    """Metadata for one block, as handed to the host."""
    opcode: str
    block_type: Literal["reporter", "command"]
    text: str
    func: str
    block_all_threads: bool = False
    arguments: List[BlockArgument] = Field(default_factory=list)


class ExtensionInfo(BaseModel):
    """Extension metadata (the host's getInfo contract)."""
    id: str
    name: str
    extension_url: str
    show_status_button: bool = False
    blocks: List[BlockInfo] = Field(default_factory=list)


class TemperatureResponse(BaseModel):
    value: Optional[float] = Field(default=None, description="Temperature, or null if never read")


class SensorReadingResponse(BaseModel):
    sensor_id: str
    metric: str
    value: Optional[float] = None
    ts: Optional[float] = None


class LoginRequest(BaseModel):
    password: Optional[str] = Field(default=None, description="Gateway password; configured one if omitted")


class SessionStatus(BaseModel):
    authenticated: bool
    created_at: Optional[float] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(description="Service status (always 'ok' if service is running)")
    authenticated: bool = Field(description="Whether the smart plug gateway login succeeded")
    polling: bool = Field(description="Whether the background temperature poller is running")


class ErrorResponse(BaseModel):
    """Standard error response format."""
    detail: str = Field(description="Error message describing what went wrong")
