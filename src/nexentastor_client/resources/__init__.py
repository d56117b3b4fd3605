"""Resource-specific convenience wrappers."""
from .filesystems import FilesystemsResource
from .jobs import JobsResource, JobStatus
from .mappings import LunMappingsResource
from .san import (
    HostGroupsResource,
    IscsiTargetsResource,
    LogicalUnitsResource,
    RemoteInitiatorsResource,
    TargetGroupsResource,
)
from .shares import NfsSharesResource, SmbSharesResource
from .snapshots import SnapshotsResource
from .system import SystemResource
from .volumes import VolumesResource

__all__ = [
    "FilesystemsResource",
    "VolumesResource",
    "SnapshotsResource",
    "LunMappingsResource",
    "LogicalUnitsResource",
    "IscsiTargetsResource",
    "TargetGroupsResource",
    "HostGroupsResource",
    "RemoteInitiatorsResource",
    "NfsSharesResource",
    "SmbSharesResource",
    "JobsResource",
    "JobStatus",
    "SystemResource",
]
