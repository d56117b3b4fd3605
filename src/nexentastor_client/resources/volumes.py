"""Volume operations."""

from __future__ import annotations

from typing import Any

from ..exceptions import NOT_FOUND, ApplianceError
from ..idempotency import ensure_destroyed
from ..models import Snapshot, Volume, VolumeGroup
from ..pagination import validate_slice_args, walk_all, walk_window
from ..reaper import Reaper
from .base import ResourceBase, bool_param, escape_path, require


class VolumesResource(ResourceBase):
    """Interact with NexentaStor block volumes and volume groups."""

    kind = "volume"

    def get(self, path: str) -> Volume:
        require(path, "Volume path is empty")
        data = self._get_data("storage/volumes", params={"path": path})
        if not data:
            raise ApplianceError(NOT_FOUND, f"Volume '{path}' not found")
        return Volume.from_payload(data[0])

    def get_group(self, path: str) -> VolumeGroup:
        require(path, "VolumeGroup path is empty")
        data = self._get_data("storage/volumeGroups", params={"path": path})
        if not data:
            raise ApplianceError(NOT_FOUND, f"VolumeGroup '{path}' not found")
        return VolumeGroup.from_payload(data[0])

    def list_slice(self, parent: str, limit: int, offset: int) -> list[Volume]:
        validate_slice_args("volumes.list_slice()", limit, offset)
        data = self._get_data(
            "storage/volumes",
            params={"parent": parent, "limit": str(limit), "offset": str(offset)},
        )
        return [Volume.from_payload(item) for item in data]

    def list(self, parent: str) -> list[Volume]:
        """Return every volume of the ``parent`` volume group."""
        return walk_all(self.list_slice, parent)

    def list_with_starting_token(
        self, parent: str, starting_token: str = "", limit: int = 0
    ) -> tuple[list[Volume], str]:
        return walk_window(self.list_slice, parent, starting_token, limit)

    def create(self, path: str, volume_size: int, *, sparse_volume: bool = False) -> None:
        require(path, "Parameter 'path' is required to create a volume")
        payload: dict[str, Any] = {
            "path": path,
            "volumeSize": volume_size,
            "sparseVolume": sparse_volume,
        }
        self._post("storage/volumes", payload)

    def update(self, path: str, volume_size: int | None = None) -> None:
        require(path, "Parameter 'path' is required")
        payload: dict[str, Any] = {}
        if volume_size:
            payload["volumeSize"] = volume_size
        self._put(f"storage/volumes/{escape_path(path)}", payload)

    def destroy(
        self,
        path: str,
        *,
        destroy_snapshots: bool = False,
        promote_most_recent_clone: bool = False,
    ) -> None:
        Reaper(self).destroy(
            path,
            destroy_snapshots=destroy_snapshots,
            promote_most_recent_clone=promote_most_recent_clone,
        )

    def ensure_destroyed(self, path: str, **kwargs: bool) -> bool:
        return ensure_destroyed(self.destroy, path, **kwargs)

    def destroy_once(self, path: str, destroy_snapshots: bool) -> None:
        require(path, "Volume path is required")
        self._delete(
            f"storage/volumes/{escape_path(path)}",
            params={"snapshots": bool_param(destroy_snapshots)},
        )

    def promote(self, path: str) -> None:
        """Make a cloned volume independent of its origin snapshot."""
        require(path, "Volume path is required")
        self._post(f"storage/volumes/{escape_path(path)}/promote")

    def list_snapshots(self, path: str) -> list[Snapshot]:
        return self._client.snapshots.list(path, recursive=True)

    def get_snapshot(self, path: str) -> Snapshot:
        return self._client.snapshots.get(path)
