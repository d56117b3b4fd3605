"""Destroy filesystems and volumes whose snapshots are held by clones.

The appliance refuses (``EEXIST``) to destroy a resource while any snapshot
of it has a live clone. Promoting one of the clones hands the snapshot chain
over to that clone, after which the original resource can go.

Initial state::

    [fsSource]---+                       source filesystem
                 |    [snapshot1]        source filesystem snapshots
                 |    [snapshot2]
                 `--->[snapshot3]<---+
                                     |
    [fsClone1]-----------------------+   clone of snapshot3
    [fsClone2]-----------------------+   another clone of snapshot3

After destroying ``fsSource`` with clone promotion and snapshot removal::

    [fsClone1]<----------------------+   still linked to snapshot3
    [fsClone2]---+                   |   promoted, owns the snapshots now
                 |    [snapshot1]    |
                 |    [snapshot2]    |
                 `--->[snapshot3]<---+

Promotion cannot be undone. If the destroy still fails afterwards the
appliance is left in the promoted state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from .exceptions import (
    DestroyError,
    NexentaStorError,
    is_already_exists_error,
    is_appliance_error,
)
from .models import Snapshot

logger = logging.getLogger(__name__)

MAX_DESTROY_ATTEMPTS = 3


class ReapTarget(Protocol):
    """Operations the reaper needs from one resource kind."""

    kind: str

    def destroy_once(self, path: str, destroy_snapshots: bool) -> None: ...

    def list_snapshots(self, path: str) -> Sequence[Snapshot]: ...

    def get_snapshot(self, path: str) -> Snapshot: ...

    def promote(self, path: str) -> None: ...


class ReapAttemptError(NexentaStorError):
    """One promotion attempt could not find or promote the most recent clone."""


def most_recent_clone(target: ReapTarget, snapshots: Sequence[Snapshot]) -> str:
    """Return the first clone of the newest snapshot that has clones, or ``""``.

    Newest means the greatest creation transaction number. Snapshot listings
    omit clones and txg, so every snapshot is fetched individually. On equal
    txg values the snapshot seen first is kept.
    """

    max_txg = 0
    candidate = ""
    for listed in snapshots:
        try:
            snapshot = target.get_snapshot(listed.path)
        except NexentaStorError as exc:
            raise ReapAttemptError(
                f"failed to get '{listed.path}' snapshot's info: {exc}"
            ) from exc
        try:
            txg = int(snapshot.creation_txg)
        except ValueError as exc:
            raise ReapAttemptError(
                f"snapshot '{listed.path}': failed to convert 'creationTxg' value "
                f"'{snapshot.creation_txg}' to integer"
            ) from exc
        if snapshot.clones and txg > max_txg:
            candidate = snapshot.clones[0]
            max_txg = txg
    return candidate


class Reaper:
    """Destroy a resource, promoting its most recent clone when clones block it."""

    def __init__(self, target: ReapTarget, *, max_attempts: int = MAX_DESTROY_ATTEMPTS) -> None:
        self._target = target
        self._max_attempts = max_attempts

    def destroy(
        self,
        path: str,
        *,
        destroy_snapshots: bool = False,
        promote_most_recent_clone: bool = False,
    ) -> None:
        last_error: NexentaStorError
        try:
            self._target.destroy_once(path, destroy_snapshots)
            return
        except NexentaStorError as exc:
            if not promote_most_recent_clone or not is_already_exists_error(exc):
                raise
            last_error = exc
            logger.info(
                "%s '%s' has dependent clones, promoting the most recent one",
                self._target.kind,
                path,
            )

        for attempt in range(1, self._max_attempts + 1):
            try:
                snapshots = self._target.list_snapshots(path)
            except NexentaStorError as exc:
                last_error = ReapAttemptError(f"failed to get snapshot list: {exc}")
                last_error.__cause__ = exc
                break

            try:
                clone = most_recent_clone(self._target, snapshots)
            except ReapAttemptError as exc:
                # e.g. a snapshot removed between the list and the detail request
                logger.warning(
                    "attempt %d/%d to destroy %s '%s': %s",
                    attempt,
                    self._max_attempts,
                    self._target.kind,
                    path,
                    exc,
                )
                last_error = exc
                continue

            if clone:
                try:
                    self._target.promote(clone)
                except NexentaStorError as exc:
                    logger.warning(
                        "attempt %d/%d: failed to promote clone '%s': %s",
                        attempt,
                        self._max_attempts,
                        clone,
                        exc,
                    )
                    last_error = ReapAttemptError(f"failed to promote clone '{clone}': {exc}")
                    last_error.__cause__ = exc
                    continue
                logger.info("promoted clone '%s' of %s '%s'", clone, self._target.kind, path)

            try:
                self._target.destroy_once(path, destroy_snapshots)
                return
            except NexentaStorError as exc:
                last_error = exc
                if not is_already_exists_error(exc):
                    break
                logger.info(
                    "attempt %d/%d: %s '%s' still has dependent clones",
                    attempt,
                    self._max_attempts,
                    self._target.kind,
                    path,
                )

        if is_appliance_error(last_error):
            raise last_error
        raise DestroyError(
            f"Failed to delete {self._target.kind} '{path}': {last_error}",
            details=last_error,
        ) from last_error
