from __future__ import annotations
import logging
import time
from typing import Optional

from .config import DEVICE_KIND, TAPO_PASSWORD
from .errors import GatewayError, HttpStatusError, MalformedResponseError, NotAuthenticatedError
from .gateway import GatewayHTTP
from .models import CommandResult, DeviceCommand, DeviceSession, DeviceStatus

logger = logging.getLogger(__name__)

LOGIN_PATH = "/tapo/login"
ACTIONS_PATH = "/tapo/actions"


class DeviceSessionClient:
    """
    Tapo smart plug control through the local gateway.

    The gateway hands out a session token on login; every on/off action is a
    GET carrying that token as a bearer credential. There is no renewal: if
    the gateway starts rejecting the token, commands fail and are reported
    until someone logs in again.
    """

    def __init__(
        self,
        gateway: GatewayHTTP,
        device_kind: str = DEVICE_KIND,
        password: str = TAPO_PASSWORD,
    ) -> None:
        self.gateway = gateway
        self.device_kind = device_kind
        self._password = password
        self._session: Optional[DeviceSession] = None

    @property
    def session(self) -> Optional[DeviceSession]:
        return self._session

    @property
    def authenticated(self) -> bool:
        return self._session is not None

    def login(self, password: Optional[str] = None) -> bool:
        """
        Log in and keep the returned token.

        Returns True on success. On failure the current state is left alone,
        so a client that never logged in stays unauthenticated.
        """
        credential = self._password if password is None else password
        try:
            response = self.gateway.post(
                LOGIN_PATH,
                json={"password": credential},
                headers={"Content-Type": "application/json"},
            )
            token = response.text.strip()
            if not token:
                raise MalformedResponseError("Login succeeded but returned an empty token")
        except GatewayError as e:
            logger.error(f"Smart plug login failed: {e}")
            return False

        self._session = DeviceSession(token=token, created_at=time.time())
        logger.info("Smart plug gateway login succeeded")
        return True

    def action_path(self, command: DeviceCommand) -> str:
        return f"{ACTIONS_PATH}/{self.device_kind}/{command.status}"

    def set_status(self, status: DeviceStatus, device_id: str) -> CommandResult:
        """
        Switch one device on or off.

        Raises NotAuthenticatedError (without touching the network) if no
        login has succeeded yet. Gateway failures are logged and returned as
        a failed CommandResult; they are never retried.
        """
        command = DeviceCommand(device_id=device_id, status=status)

        session = self._session
        if session is None:
            raise NotAuthenticatedError(
                f"Cannot turn {command.status} {command.device_id}: not logged in to the gateway"
            )

        try:
            response = self.gateway.get(
                self.action_path(command),
                params={"device": command.device_id},
                headers={"Authorization": f"Bearer {session.token}"},
            )
        except HttpStatusError as e:
            logger.error(f"Gateway rejected {command.status} for {command.device_id}: {e}")
            return CommandResult(
                ok=False,
                status=command.status,
                device_id=command.device_id,
                outcome="http_status",
                status_code=e.status_code,
                message=str(e),
            )
        except GatewayError as e:
            logger.error(f"Network error turning {command.status} {command.device_id}: {e}")
            return CommandResult(
                ok=False,
                status=command.status,
                device_id=command.device_id,
                outcome="network",
                message=str(e),
            )

        logger.info(f"Device {command.device_id} turned {command.status}")
        return CommandResult(
            ok=True,
            status=command.status,
            device_id=command.device_id,
            outcome="sent",
            status_code=response.status_code,
            message=f"device turned {command.status}",
        )
