from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from .models import (
    CommandResult,
    DeviceArgs,
    ErrorResponse,
    ExtensionInfo,
    HealthResponse,
    LoginRequest,
    SensorReadingResponse,
    SessionStatus,
    TemperatureArgs,
    TemperatureResponse,
)
from .service import FoodTechExtension


router = APIRouter()


def get_extension(request: Request) -> FoodTechExtension:
    return request.app.state.extension


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns service health, gateway login state and poller state",
    tags=["Health"]
)
def health(ext: FoodTechExtension = Depends(get_extension)) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        authenticated=ext.device_client.authenticated,
        polling=ext.poller.running,
    )


@router.get(
    "/extension/info",
    response_model=ExtensionInfo,
    summary="Extension metadata",
    description="Block metadata the host uses to register the FoodTech blocks",
    tags=["Extension"]
)
def extension_info(ext: FoodTechExtension = Depends(get_extension)) -> ExtensionInfo:
    return ext.get_info()


@router.get(
    "/blocks/getTemperature",
    response_model=TemperatureResponse,
    summary="Temperature reporter",
    description="Reads the ESPHome temperature sensor now. Returns the last good value (or null) if the read fails.",
    tags=["Blocks"]
)
def get_temperature(
    suffix: str = Query(default="", alias="SUFFIX", description="Appended to 'esphome' in the sensor path"),
    ext: FoodTechExtension = Depends(get_extension),
) -> TemperatureResponse:
    return TemperatureResponse(value=ext.get_temperature(TemperatureArgs(suffix=suffix)))


@router.get(
    "/blocks/getTemperature/cached",
    response_model=SensorReadingResponse,
    summary="Cached temperature",
    description="Last good reading without contacting the sensor",
    tags=["Blocks"]
)
def get_cached_temperature(
    suffix: str = Query(default="", alias="SUFFIX", description="Appended to 'esphome' in the sensor path"),
    ext: FoodTechExtension = Depends(get_extension),
) -> SensorReadingResponse:
    r = ext.cached_temperature(TemperatureArgs(suffix=suffix))
    return SensorReadingResponse(sensor_id=r.sensor_id, metric=r.metric, value=r.value, ts=r.ts)


@router.post(
    "/blocks/turnOn",
    response_model=CommandResult,
    summary="Turn a smart plug on",
    description="Command block; failures are reported in the result body, never as HTTP errors",
    tags=["Blocks"]
)
def turn_on(
    body: Optional[DeviceArgs] = None,
    ext: FoodTechExtension = Depends(get_extension),
) -> CommandResult:
    return ext.turn_on(body)


@router.post(
    "/blocks/turnOff",
    response_model=CommandResult,
    summary="Turn a smart plug off",
    description="Command block; failures are reported in the result body, never as HTTP errors",
    tags=["Blocks"]
)
def turn_off(
    body: Optional[DeviceArgs] = None,
    ext: FoodTechExtension = Depends(get_extension),
) -> CommandResult:
    return ext.turn_off(body)


@router.get(
    "/session",
    response_model=SessionStatus,
    summary="Smart plug session state",
    tags=["Session"]
)
def session_status(ext: FoodTechExtension = Depends(get_extension)) -> SessionStatus:
    session = ext.device_client.session
    return SessionStatus(
        authenticated=session is not None,
        created_at=session.created_at if session else None,
    )


@router.post(
    "/session/login",
    response_model=SessionStatus,
    summary="Log in to the smart plug gateway",
    description="Obtains a new session token. Uses the configured password when none is given.",
    responses={
        200: {"description": "Login succeeded"},
        502: {"model": ErrorResponse, "description": "Gateway rejected the login or could not be reached"}
    },
    tags=["Session"]
)
def login(
    body: Optional[LoginRequest] = None,
    ext: FoodTechExtension = Depends(get_extension),
) -> SessionStatus:
    if not ext.prepare_device(body.password if body else None):
        raise HTTPException(status_code=502, detail="smart plug gateway login failed")
    return session_status(ext)
