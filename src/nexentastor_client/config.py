"""Configuration helpers for NexentaStor client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

# The appliance rejects list requests with limit >= 100.
PAGE_SIZE_LIMIT = 100

DEFAULT_PORT = 8443


@dataclass(slots=True)
class ClientConfig:
    """Typed configuration for `NexentaStorClient`."""

    base_url: str
    verify_ssl: bool | str = True
    timeout: float = 30.0
    default_headers: Mapping[str, str] | None = None
    query_defaults: Mapping[str, str] | None = None

    def resolved_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.default_headers:
            headers.update(self.default_headers)
        return headers

    def resolved_query(self) -> dict[str, str]:
        return dict(self.query_defaults or {})


def normalize_base_url(address: str) -> str:
    """Accept ``host``, ``host:port`` or a full URL and return an https base URL."""

    address = address.strip().rstrip("/")
    if "://" in address:
        return address
    if ":" not in address:
        address = f"{address}:{DEFAULT_PORT}"
    return f"https://{address}"
