"""Base abstractions for auth strategies."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..client import NexentaStorClient


class AuthStrategy(ABC):
    """Interface each authentication mechanism must implement."""

    @abstractmethod
    def apply(self, headers: MutableMapping[str, str]) -> None:
        """Mutate headers in-place with the necessary credentials."""

    def refresh(
        self, client: NexentaStorClient, rejected_headers: Mapping[str, str]
    ) -> bool:
        """Optional hook for refreshing credentials after a 401.

        ``rejected_headers`` are the headers the failed request was sent with.
        Returns ``True`` when new credentials are available and the request is
        worth retrying.
        """
        return False
