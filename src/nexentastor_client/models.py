"""Typed views of NexentaStor resource records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _int(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(value)


@dataclass(slots=True)
class Filesystem:
    path: str
    mount_point: str = ""
    shared_over_nfs: bool = False
    shared_over_smb: bool = False
    bytes_available: int = 0
    bytes_used: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Filesystem:
        return cls(
            path=payload.get("path", ""),
            mount_point=payload.get("mountPoint") or "",
            shared_over_nfs=bool(payload.get("sharedOverNfs")),
            shared_over_smb=bool(payload.get("sharedOverSmb")),
            bytes_available=_int(payload.get("bytesAvailable")),
            bytes_used=_int(payload.get("bytesUsed")),
        )

    @property
    def referenced_quota_size(self) -> int:
        return self.bytes_available + self.bytes_used

    @property
    def default_smb_share_name(self) -> str:
        """Default SMB share name: ``/pool/dataset/fs`` becomes ``pool_dataset_fs``."""
        return self.path.lstrip("/").replace("/", "_")

    def __str__(self) -> str:
        return self.path


@dataclass(slots=True)
class Volume:
    path: str
    bytes_available: int = 0
    bytes_used: int = 0
    volume_size: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Volume:
        return cls(
            path=payload.get("path", ""),
            bytes_available=_int(payload.get("bytesAvailable")),
            bytes_used=_int(payload.get("bytesUsed")),
            volume_size=_int(payload.get("volumeSize")),
        )

    def __str__(self) -> str:
        return self.path


@dataclass(slots=True)
class VolumeGroup:
    path: str
    bytes_available: int = 0
    bytes_used: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> VolumeGroup:
        return cls(
            path=payload.get("path", ""),
            bytes_available=_int(payload.get("bytesAvailable")),
            bytes_used=_int(payload.get("bytesUsed")),
        )


@dataclass(slots=True)
class Snapshot:
    """A snapshot record.

    List responses carry only path, name, parent and creation time; ``clones``
    and ``creation_txg`` are filled in by the single-snapshot endpoint.
    ``creation_txg`` stays a string as the appliance sends it.
    """

    path: str
    name: str = ""
    parent: str = ""
    creation_time: str | None = None
    clones: list[str] = field(default_factory=list)
    creation_txg: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Snapshot:
        txg = payload.get("creationTxg")
        return cls(
            path=payload.get("path", ""),
            name=payload.get("name") or "",
            parent=payload.get("parent") or "",
            creation_time=payload.get("creationTime"),
            clones=list(payload.get("clones") or []),
            creation_txg="" if txg is None else str(txg),
        )

    def __str__(self) -> str:
        return self.path


@dataclass(slots=True)
class LunMapping:
    id: str
    volume: str = ""
    target_group: str = ""
    host_group: str = ""
    lun: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> LunMapping:
        return cls(
            id=str(payload.get("id", "")),
            volume=payload.get("volume") or "",
            target_group=payload.get("targetGroup") or "",
            host_group=payload.get("hostGroup") or "",
            lun=_int(payload.get("lun")),
        )


@dataclass(slots=True)
class LogicalUnit:
    guid: str
    alias: str = ""
    volume: str = ""
    vol_size: int = 0
    block_size: int = 0
    write_protect: bool = False
    writeback_cache_disabled: bool = False
    state: str = ""
    access_state: str = ""
    mapping_count: int = 0
    exposed_over_iscsi: bool = False
    exposed_over_fc: bool = False
    href: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> LogicalUnit:
        return cls(
            guid=payload.get("guid", ""),
            alias=payload.get("alias") or "",
            volume=payload.get("volume") or "",
            vol_size=_int(payload.get("volSize")),
            block_size=_int(payload.get("blockSize")),
            write_protect=bool(payload.get("writeProtect")),
            writeback_cache_disabled=bool(payload.get("writebackCacheDisabled")),
            state=payload.get("state") or "",
            access_state=payload.get("accessState") or "",
            mapping_count=_int(payload.get("mappingCount")),
            exposed_over_iscsi=bool(payload.get("exposedOverIscsi")),
            exposed_over_fc=bool(payload.get("exposedOverFC")),
            href=payload.get("href") or "",
        )


@dataclass(slots=True)
class Pool:
    name: str
    health: str = ""
    status: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Pool:
        return cls(
            name=payload.get("poolName", ""),
            health=payload.get("health") or "",
            status=payload.get("status") or "",
        )


@dataclass(slots=True)
class License:
    valid: bool
    expires: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> License:
        return cls(valid=bool(payload.get("valid")), expires=payload.get("expires") or "")
