"""Filesystem operations."""

from __future__ import annotations

from typing import Any

from ..exceptions import NOT_FOUND, ApplianceError
from ..idempotency import ensure_created, ensure_destroyed
from ..models import Filesystem, Snapshot
from ..pagination import validate_slice_args, walk_all, walk_window
from ..reaper import Reaper
from .base import ResourceBase, bool_param, escape_path, require

FILESYSTEM_FIELDS = "path,mountPoint,bytesAvailable,bytesUsed,sharedOverNfs,sharedOverSmb"

# A ``parent=`` listing puts the parent filesystem itself at position 0.
FIRST_CHILD_OFFSET = 1


class FilesystemsResource(ResourceBase):
    """Interact with NexentaStor filesystems."""

    kind = "filesystem"

    def get(self, path: str) -> Filesystem:
        require(path, "Filesystem path is empty")
        data = self._get_data(
            "storage/filesystems", params={"path": path, "fields": FILESYSTEM_FIELDS}
        )
        if not data:
            raise ApplianceError(NOT_FOUND, f"Filesystem '{path}' not found")
        return Filesystem.from_payload(data[0])

    def get_available_capacity(self, path: str) -> int:
        data = self._get_data(
            "storage/filesystems", params={"path": path, "fields": "bytesAvailable"}
        )
        if not data:
            return 0
        return int(data[0].get("bytesAvailable") or 0)

    def list_slice(self, parent: str, limit: int, offset: int) -> list[Filesystem]:
        """Return up to ``limit`` children of ``parent`` starting at record ``offset``."""

        validate_slice_args("filesystems.list_slice()", limit, offset)
        data = self._get_data(
            "storage/filesystems",
            params={
                "parent": parent,
                "limit": str(limit + 1),  # the result includes the parent itself
                "offset": str(offset),
                "fields": FILESYSTEM_FIELDS,
            },
        )
        children = [Filesystem.from_payload(item) for item in data if item.get("path") != parent]
        # past offset 0 the parent is not in the result, so one extra child came back
        return children[:limit]

    def list(self, parent: str) -> list[Filesystem]:
        return walk_all(self.list_slice, parent, start_offset=FIRST_CHILD_OFFSET)

    def list_with_starting_token(
        self, parent: str, starting_token: str = "", limit: int = 0
    ) -> tuple[list[Filesystem], str]:
        """Return up to ``limit`` filesystems after ``starting_token`` and the next token."""
        return walk_window(
            self.list_slice,
            parent,
            starting_token,
            limit,
            start_offset=FIRST_CHILD_OFFSET,
        )

    def create(self, path: str, referenced_quota_size: int | None = None) -> None:
        require(path, "Parameter 'path' is required to create a filesystem")
        payload: dict[str, Any] = {"path": path}
        if referenced_quota_size:
            payload["referencedQuotaSize"] = referenced_quota_size
        self._post("storage/filesystems", payload)

    def ensure_created(self, path: str, referenced_quota_size: int | None = None) -> bool:
        return ensure_created(self.create, path, referenced_quota_size)

    def update(self, path: str, referenced_quota_size: int | None = None) -> None:
        require(path, "Parameter 'path' is required")
        payload: dict[str, Any] = {}
        if referenced_quota_size:
            payload["referencedQuotaSize"] = referenced_quota_size
        self._put(f"storage/filesystems/{escape_path(path)}", payload)

    def destroy(
        self,
        path: str,
        *,
        destroy_snapshots: bool = False,
        promote_most_recent_clone: bool = False,
    ) -> None:
        """Destroy a filesystem (path format ``pool/dataset/filesystem``).

        Args:
            path: The filesystem path.
            destroy_snapshots: Also destroy the filesystem's snapshots. Without
                it the appliance refuses (EBUSY) while snapshots exist.
            promote_most_recent_clone: When clones of the snapshots block the
                destroy, promote the clone of the most recent snapshot so it
                takes the snapshots over, then destroy again.
        """
        Reaper(self).destroy(
            path,
            destroy_snapshots=destroy_snapshots,
            promote_most_recent_clone=promote_most_recent_clone,
        )

    def ensure_destroyed(self, path: str, **kwargs: bool) -> bool:
        return ensure_destroyed(self.destroy, path, **kwargs)

    def destroy_once(self, path: str, destroy_snapshots: bool) -> None:
        require(path, "Filesystem path is required")
        self._delete(
            f"storage/filesystems/{escape_path(path)}",
            params={"force": "true", "snapshots": bool_param(destroy_snapshots)},
        )

    def promote(self, path: str) -> None:
        """Make a cloned filesystem independent of its origin snapshot."""
        require(path, "Filesystem path is required")
        self._post(f"storage/filesystems/{escape_path(path)}/promote")

    def list_snapshots(self, path: str) -> list[Snapshot]:
        return self._client.snapshots.list(path, recursive=True)

    def get_snapshot(self, path: str) -> Snapshot:
        return self._client.snapshots.get(path)

    def set_acl(self, path: str, *, read_only: bool = False) -> None:
        """Grant everyone@ access so NFS clients can write without a uid match."""
        require(path, "Filesystem path is required")
        payload = {
            "type": "allow",
            "principal": "everyone@",
            "flags": ["file_inherit", "dir_inherit"],
            "permissions": ["read_set"] if read_only else ["full_set"],
        }
        self._post(f"storage/filesystems/{escape_path(path)}/acl", payload)
