"""Common helpers for resource wrappers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from ..exceptions import InvalidArgumentError, UnexpectedResponseError

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..client import NexentaStorClient


def escape_path(path: str) -> str:
    """Escape a resource path (``pool/fs@snap``) for use as one URL segment."""
    return quote(path, safe="")


def require(value: Any, message: str) -> None:
    if not value:
        raise InvalidArgumentError(message)


def bool_param(value: bool) -> str:
    return "true" if value else "false"


class ResourceBase:
    """Provide shared helpers for resource modules."""

    def __init__(self, client: NexentaStorClient) -> None:
        self._client = client

    def _get(self, path: str, *, params: Mapping[str, str] | None = None) -> Any:
        return self._client.request("GET", path, params=params)

    def _post(self, path: str, payload: Mapping[str, Any] | None = None) -> Any:
        return self._client.request("POST", path, json_payload=payload)

    def _put(self, path: str, payload: Mapping[str, Any]) -> Any:
        return self._client.request("PUT", path, json_payload=payload)

    def _delete(self, path: str, *, params: Mapping[str, str] | None = None) -> Any:
        return self._client.request("DELETE", path, params=params)

    def _get_data(self, path: str, *, params: Mapping[str, str] | None = None) -> list[Any]:
        """GET a collection endpoint and unwrap its ``{"data": [...]}`` envelope."""
        payload = self._get(path, params=params)
        if payload is None:
            return []
        if not isinstance(payload, Mapping) or not isinstance(payload.get("data"), list):
            raise UnexpectedResponseError(
                f"GET {path}: expected an object with a 'data' list, got: {payload!r:.200}"
            )
        return payload["data"]
