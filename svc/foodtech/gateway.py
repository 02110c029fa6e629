from __future__ import annotations
import logging
from typing import Optional

import requests

from .config import GATEWAY_URL, HTTP_TIMEOUT_S
from .errors import HttpStatusError, NetworkError

logger = logging.getLogger(__name__)


class GatewayHTTP:
    """
    Request helper bound to one gateway base URL.

    Without an injected session every call goes through requests.request, so
    the poller thread and request handler threads never share a Session.

    Every call carries a bounded timeout. Transport failures are raised as
    NetworkError and non-2xx answers as HttpStatusError, so callers only
    have to deal with the GatewayError family.
    """

    def __init__(
        self,
        base_url: str = GATEWAY_URL,
        timeout_s: float = HTTP_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session

    def url(self, path: str) -> str:
        """Join a host-relative path onto the base URL with exactly one slash."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self.url(path)
        try:
            send = self.session.request if self.session is not None else requests.request
            response = send(method, url, timeout=self.timeout_s, **kwargs)
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"Timed out after {self.timeout_s}s: {method} {url}") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise HttpStatusError(response.status_code, url, response.text)

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def get(self, path: str, **kwargs) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def close(self) -> None:
        if self.session is not None:
            self.session.close()
