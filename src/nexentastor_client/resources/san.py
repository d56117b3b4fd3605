"""iSCSI targets, target/host groups, remote initiators and logical units."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..exceptions import NOT_FOUND, ApplianceError, InvalidArgumentError
from ..idempotency import ensure_created
from ..models import LogicalUnit
from ..pagination import validate_slice_args, walk_all
from .base import ResourceBase, escape_path, require

TARGET_FIELDS = "name,state,authentication,alias,chapSecretSet,chapUser,portals"
# Remote initiators are only served by this API revision.
REMOTE_INITIATORS_PATH = "v1.2.6/san/iscsi/remoteInitiators"


class LogicalUnitsResource(ResourceBase):
    """Enumerate SCSI logical units."""

    def list_slice(self, limit: int, offset: int) -> list[LogicalUnit]:
        validate_slice_args("logical_units.list_slice()", limit, offset)
        data = self._get_data(
            "san/logicalUnits", params={"limit": str(limit), "offset": str(offset)}
        )
        return [LogicalUnit.from_payload(item) for item in data]

    def list_all(self) -> list[LogicalUnit]:
        return walk_all(lambda _parent, limit, offset: self.list_slice(limit, offset))


class IscsiTargetsResource(ResourceBase):
    """Manage iSCSI targets."""

    def list(self, name: str = "") -> list[dict[str, Any]]:
        params = {"fields": TARGET_FIELDS}
        if name:
            params["name"] = name
        return self._get_data("san/iscsi/targets", params=params)

    def get(self, name: str) -> dict[str, Any]:
        require(name, "iSCSI target name is empty")
        targets = self.list(name)
        if not targets:
            raise ApplianceError(NOT_FOUND, f"iSCSI target '{name}' not found")
        return targets[0]

    def create(self, name: str, portals: Sequence[dict[str, Any]] = ()) -> bool:
        """Create a target; returns ``False`` if it already existed.

        Args:
            name: The target IQN.
            portals: ``{"address": ..., "port": ...}`` entries to listen on.
        """
        require(name, f"Parameter 'name' is required, received: {name!r}")
        payload = {"name": name, "portals": list(portals)}
        return ensure_created(self._post, "san/iscsi/targets", payload)

    def update(self, name: str, authentication: str) -> None:
        require(name, "iSCSI target name must not be empty.")
        self._put(
            f"san/iscsi/targets/{escape_path(name)}", {"authentication": authentication}
        )


class TargetGroupsResource(ResourceBase):
    """Manage target groups."""

    def list(self) -> list[dict[str, Any]]:
        return self._get_data("san/targetgroups")

    def get(self, name: str) -> dict[str, Any]:
        require(name, "targetGroup name is empty")
        return self._get(
            f"san/targetgroups/{escape_path(name)}", params={"fields": "name,members"}
        )

    def create_or_update(self, name: str, members: Sequence[str]) -> None:
        """Create the group, or replace the members of an existing group of that name."""
        if not name or not members:
            raise InvalidArgumentError(
                f"Parameters 'name' and 'members' are required, received: {name!r}, {members!r}"
            )
        created = ensure_created(
            self._post, "san/targetgroups", {"name": name, "members": list(members)}
        )
        if not created:
            self._put(f"san/targetgroups/{escape_path(name)}", {"members": list(members)})


class HostGroupsResource(ResourceBase):
    """Manage host groups (sets of initiator IQNs)."""

    def list(self) -> list[dict[str, Any]]:
        return self._get_data("san/hostgroups")

    def create(self, name: str, members: Sequence[str]) -> bool:
        if not name or not members:
            raise InvalidArgumentError(
                f"HostGroup name and members cannot be empty, got {name!r}, {members!r}"
            )
        return ensure_created(
            self._post, "san/hostgroups", {"name": name, "members": list(members)}
        )

    def update(self, name: str, members: Sequence[str]) -> None:
        require(name, "Parameter 'name' is required to update hostGroup")
        self._put(f"san/hostgroups/{escape_path(name)}", {"members": list(members)})


class RemoteInitiatorsResource(ResourceBase):
    """CHAP credentials of remote iSCSI initiators."""

    def get(self, name: str) -> dict[str, Any]:
        require(name, "Remote Initiator name is empty")
        return self._get(f"{REMOTE_INITIATORS_PATH}/{escape_path(name)}")

    def create(self, name: str, chap_user: str, chap_secret: str) -> None:
        if not name or not chap_secret:
            raise InvalidArgumentError(
                "Parameters 'name' and 'chap_secret' are required, "
                f"received name: {name!r}"
            )
        payload = {"name": name, "chapUser": chap_user, "chapSecret": chap_secret}
        self._post(REMOTE_INITIATORS_PATH, payload)

    def update(self, name: str, chap_user: str, chap_secret: str) -> None:
        require(name, f"Parameter 'name' is required, received: {name!r}")
        self._put(
            f"{REMOTE_INITIATORS_PATH}/{escape_path(name)}",
            {"chapUser": chap_user, "chapSecret": chap_secret},
        )
