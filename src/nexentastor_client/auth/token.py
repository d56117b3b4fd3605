"""Static bearer token authentication."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass

from ..exceptions import InvalidArgumentError
from .base import AuthStrategy


@dataclass(slots=True)
class TokenAuth(AuthStrategy):
    """Send a token issued elsewhere (e.g. by an earlier ``auth/login``).

    The token is never renewed: a 401 is returned to the caller as an
    authentication error instead of being retried.
    """

    token: str

    def __post_init__(self) -> None:
        if not self.token:
            raise InvalidArgumentError("Bearer token must not be empty")

    def apply(self, headers: MutableMapping[str, str]) -> None:
        headers["Authorization"] = f"Bearer {self.token}"
