"""NFS and SMB share helpers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .base import ResourceBase, escape_path, require

DEFAULT_ENTITY_TYPE = "fqdn"

NfsRule = dict[str, Any]


def _rule(entity: str) -> NfsRule:
    return {"entity": entity, "etype": DEFAULT_ENTITY_TYPE}


def default_nfs_rules(
    read_write: Sequence[NfsRule], read_only: Sequence[NfsRule]
) -> tuple[list[NfsRule], list[NfsRule]]:
    """Fill in whichever access list is missing.

    With neither list everybody gets read-write access; with only one list
    the other one is closed with an explicit ``none`` entry.
    """

    read_write = list(read_write)
    read_only = list(read_only)
    if not read_write:
        if not read_only:
            read_only = [_rule("none")]
            read_write = [_rule("*")]
        else:
            read_write = [_rule("none")]
    elif not read_only:
        read_only = [_rule("none")]
    return read_write, read_only


class NfsSharesResource(ResourceBase):
    """Share filesystems over NFS.

    To check a share from a client::

        showmount -e HOST
        mkdir -p /mnt/test && sudo mount -v -t nfs HOST:/pool/fs /mnt/test
    """

    def create(
        self,
        filesystem: str,
        *,
        read_write: Sequence[NfsRule] = (),
        read_only: Sequence[NfsRule] = (),
    ) -> None:
        require(filesystem, "Parameter 'filesystem' is required to create an NFS share")
        rw_list, ro_list = default_nfs_rules(read_write, read_only)
        payload = {
            "filesystem": filesystem,
            "anon": "root",
            "securityContexts": [
                {
                    "securityModes": ["sys"],
                    "readWriteList": rw_list,
                    "readOnlyList": ro_list,
                }
            ],
        }
        self._post("nas/nfs", payload)

    def delete(self, filesystem: str) -> None:
        require(filesystem, "Filesystem path is empty")
        self._delete(f"nas/nfs/{escape_path(filesystem)}")


class SmbSharesResource(ResourceBase):
    """Share filesystems over SMB (CIFS)."""

    def create(self, filesystem: str, share_name: str = "") -> None:
        """Leave ``share_name`` empty to let the appliance generate one."""
        require(filesystem, "Parameter 'filesystem' is required to create an SMB share")
        payload = {"filesystem": filesystem}
        if share_name:
            payload["shareName"] = share_name
        self._post("nas/smb", payload)

    def get_share_name(self, filesystem: str) -> str:
        require(filesystem, "Filesystem path is required")
        payload = self._get(
            f"nas/smb/{escape_path(filesystem)}", params={"fields": "shareName,shareState"}
        )
        return (payload or {}).get("shareName", "")

    def delete(self, filesystem: str) -> None:
        require(filesystem, "Filesystem path is empty")
        self._delete(f"nas/smb/{escape_path(filesystem)}")
