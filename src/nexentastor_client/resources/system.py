"""Appliance-wide helpers: license, pools, HA clusters and node control."""
from __future__ import annotations

from typing import Any

from ..models import License, Pool
from .base import ResourceBase


class SystemResource(ResourceBase):
    """Expose appliance-level endpoints."""

    def license(self) -> License:
        return License.from_payload(self._get("settings/license") or {})

    def pools(self) -> list[Pool]:
        data = self._get_data("storage/pools", params={"fields": "poolName,health,status"})
        return [Pool.from_payload(item) for item in data]

    def rsf_clusters(self) -> list[dict[str, Any]]:
        """Return the RSF high-availability clusters with their services and health."""

        return self._get_data(
            "rsf/clusters", params={"fields": "clusterName,nodes,services,health"}
        )

    def reboot_node(self) -> None:
        self._post("node/reboot")
