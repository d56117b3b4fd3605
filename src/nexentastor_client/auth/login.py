"""Username/password session that obtains its bearer token from ``auth/login``."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING

from ..exceptions import (
    AuthenticationError,
    UnexpectedResponseError,
    is_authentication_error,
    parse_appliance_error,
)
from .base import AuthStrategy

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..client import NexentaStorClient

logger = logging.getLogger(__name__)

LOGIN_PATH = "auth/login"


class LoginAuth(AuthStrategy):
    """Hold the session token for one client instance.

    The token is set by `login`, read by every request and reset on re-login.
    Re-login is serialised so concurrent callers sharing a client do not log in
    over each other.
    """

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password = password
        self._token: str | None = None
        self._lock = threading.Lock()

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_logged_in(self) -> bool:
        return bool(self._token)

    def apply(self, headers: MutableMapping[str, str]) -> None:
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

    def refresh(
        self, client: NexentaStorClient, rejected_headers: Mapping[str, str]
    ) -> bool:
        rejected = rejected_headers.get("Authorization")
        with self._lock:
            if self._token and f"Bearer {self._token}" != rejected:
                # the token changed since the request was sent
                return True
            self._login_locked(client)
        return True

    def login(self, client: NexentaStorClient) -> str:
        with self._lock:
            return self._login_locked(client)

    def _login_locked(self, client: NexentaStorClient) -> str:
        self._token = None
        response = client.send(
            "POST",
            LOGIN_PATH,
            json_payload={"username": self.username, "password": self.password},
            authenticate=False,
        )
        if not response.ok:
            error = parse_appliance_error(
                response.text, "Login request", status_code=response.status_code
            )
            if error is None:
                raise AuthenticationError(
                    f"Login request: failed, status {response.status_code}, "
                    f"response: {response.text[:200]}",
                    status_code=response.status_code,
                    details=response.text,
                )
            if is_authentication_error(error):
                logger.error(
                    "login to NexentaStor %s failed (username: '%s'), "
                    "please make sure to use correct address and password",
                    client.config.base_url,
                    self.username,
                )
            raise error

        payload = response.data
        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            raise UnexpectedResponseError(
                f"Login request: token not found in response: '{response.text[:200]}'",
                status_code=response.status_code,
                details=response.text,
            )
        self._token = token
        logger.debug("login token has been updated")
        return token
