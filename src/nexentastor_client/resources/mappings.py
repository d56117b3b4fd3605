"""LUN mapping helpers."""
from __future__ import annotations

from ..exceptions import NOT_FOUND, ApplianceError, InvalidArgumentError
from ..idempotency import ensure_created
from ..models import LunMapping
from ..pagination import validate_slice_args, walk_all
from .base import ResourceBase, escape_path, require

MAPPING_FIELDS = "id,volume,targetGroup,hostGroup,lun"


class LunMappingsResource(ResourceBase):
    """Define and list volume-to-host-group LUN mappings."""

    def list(
        self,
        *,
        volume: str | None = None,
        target_group: str | None = None,
        host_group: str | None = None,
    ) -> list[LunMapping]:
        """Return the mappings matching every filter given (a single unpaginated request)."""
        params = {"fields": MAPPING_FIELDS}
        if volume:
            params["volume"] = volume
        if target_group:
            params["targetGroup"] = target_group
        if host_group:
            params["hostGroup"] = host_group
        data = self._get_data("san/lunMappings", params=params)
        return [LunMapping.from_payload(item) for item in data]

    def list_slice(self, limit: int, offset: int) -> list[LunMapping]:
        validate_slice_args("lun_mappings.list_slice()", limit, offset)
        data = self._get_data(
            "san/lunMappings", params={"limit": str(limit), "offset": str(offset)}
        )
        return [LunMapping.from_payload(item) for item in data]

    def list_all(self) -> list[LunMapping]:
        return walk_all(lambda _parent, limit, offset: self.list_slice(limit, offset))

    def get(self, volume: str) -> LunMapping:
        """Return the mapping of ``volume``."""
        require(volume, "Volume path is empty")
        mappings = self.list(volume=volume)
        if not mappings:
            raise ApplianceError(NOT_FOUND, f"lunMapping '{volume}' not found")
        return mappings[0]

    def create(self, volume: str, host_group: str, target_group: str) -> bool:
        """Map ``volume``; an existing identical mapping counts as success.

        Returns ``False`` when the mapping already existed.
        """
        if not (volume and host_group and target_group):
            raise InvalidArgumentError(
                "Parameters 'volume', 'host_group' and 'target_group' are required, "
                f"received: volume={volume!r}, host_group={host_group!r}, "
                f"target_group={target_group!r}",
            )
        payload = {"hostGroup": host_group, "volume": volume, "targetGroup": target_group}
        return ensure_created(self._post, "san/lunMappings", payload)

    def destroy(self, mapping_id: str) -> None:
        require(mapping_id, "LunMapping id is required")
        self._delete(f"san/lunMappings/{escape_path(mapping_id)}")
