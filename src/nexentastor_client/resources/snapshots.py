"""Snapshot helpers."""

from __future__ import annotations

from typing import Any

from ..models import Snapshot
from .base import ResourceBase, bool_param, escape_path, require

LIST_FIELDS = "path,name,parent,creationTime"
DETAIL_FIELDS = "path,name,parent,creationTime,clones,creationTxg"


class SnapshotsResource(ResourceBase):
    """Create, inspect and clone snapshots of filesystems and volumes."""

    def create(self, path: str) -> None:
        """Create a snapshot; ``path`` is ``<resource>@<name>``."""
        require(path, "Parameter 'path' is required to create a snapshot")
        self._post("storage/snapshots", {"path": path})

    def get(self, path: str) -> Snapshot:
        require(path, "Snapshot path is empty")
        payload = self._get(
            f"storage/snapshots/{escape_path(path)}", params={"fields": DETAIL_FIELDS}
        )
        return Snapshot.from_payload(payload or {})

    def list(self, parent: str, *, recursive: bool = False) -> list[Snapshot]:
        """List snapshots of ``parent``; ``clones`` and ``creation_txg`` are not populated."""
        require(parent, "Snapshots parent path is empty")
        data = self._get_data(
            "storage/snapshots",
            params={
                "parent": parent,
                "fields": LIST_FIELDS,
                "recursive": bool_param(recursive),
            },
        )
        return [Snapshot.from_payload(item) for item in data]

    def destroy(self, path: str) -> None:
        require(path, "Snapshot path is required")
        self._delete(f"storage/snapshots/{escape_path(path)}")

    def clone(
        self, path: str, target_path: str, referenced_quota_size: int | None = None
    ) -> None:
        """Clone snapshot ``path`` into a new filesystem at ``target_path``."""
        require(path, "Snapshot path is required")
        require(target_path, "Parameter 'target_path' is required to clone a snapshot")
        payload: dict[str, Any] = {"targetPath": target_path}
        if referenced_quota_size:
            payload["referencedQuotaSize"] = referenced_quota_size
        self._post(f"storage/snapshots/{escape_path(path)}/clone", payload)
