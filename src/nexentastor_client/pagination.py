"""Walk appliance collections that are only served in bounded, offset-addressed slices."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from .config import PAGE_SIZE_LIMIT
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# fetch_slice(parent, limit, offset) -> records
SliceFetcher = Callable[[str, int, int], Sequence[T]]

# Slices are requested one short of the appliance maximum so a filesystem
# listing that also returns its parent still fits in one response.
SLICE_SIZE = PAGE_SIZE_LIMIT - 1


def validate_slice_args(caller: str, limit: int, offset: int) -> None:
    """Reject a slice request the appliance would refuse, before sending it."""

    if limit <= 0 or limit >= PAGE_SIZE_LIMIT:
        raise InvalidArgumentError(
            f"{caller}: parameter 'limit' must be greater than 0 and less than "
            f"{PAGE_SIZE_LIMIT}, got: {limit}"
        )
    if offset < 0:
        raise InvalidArgumentError(
            f"{caller}: parameter 'offset' must be greater or equal to 0, got: {offset}"
        )


def record_path(record: Any) -> str:
    if isinstance(record, dict):
        return record.get("path", "")
    return getattr(record, "path", "")


def walk_all(
    fetch_slice: SliceFetcher[T],
    parent: str = "",
    *,
    start_offset: int = 0,
    slice_size: int = SLICE_SIZE,
) -> list[T]:
    """Return every record of the collection under ``parent``.

    Slices are fetched until one comes back shorter than ``slice_size``; a full
    slice is never taken as the end, the next slice is always requested.
    """

    records: list[T] = []
    offset = start_offset
    while True:
        chunk = fetch_slice(parent, slice_size, offset)
        records.extend(chunk)
        offset += len(chunk)
        if len(chunk) < slice_size:
            break
    logger.debug("walked %d records under '%s'", len(records), parent)
    return records


def walk_window(
    fetch_slice: SliceFetcher[T],
    parent: str = "",
    starting_token: str = "",
    limit: int = 0,
    *,
    start_offset: int = 0,
    slice_size: int = SLICE_SIZE,
    key: Callable[[T], str] = record_path,
) -> tuple[list[T], str]:
    """Return up to ``limit`` records that follow ``starting_token``, plus the next token.

    ``starting_token`` is the path of a record already seen: the window starts
    strictly after it, or at the first record when it is empty. ``limit=0``
    means no limit. The collection is re-walked from the start on every call,
    so the window stays correct when records before it were added or removed.

    The next token is the path of the last returned record when the limit was
    reached, and ``""`` when the collection ran out first. A token that is not
    in the collection yields an empty window rather than an error.
    """

    if limit < 0:
        raise InvalidArgumentError(f"parameter 'limit' must not be negative, got: {limit}")

    token_found = starting_token == ""
    no_limit = limit == 0
    records: list[T] = []
    next_token = ""

    offset = start_offset
    last_count = slice_size
    while (no_limit or len(records) < limit) and last_count >= slice_size:
        chunk = fetch_slice(parent, slice_size, offset)
        for record in chunk:
            if token_found:
                records.append(record)
                if len(records) == limit:
                    next_token = key(record)
                    break
            elif key(record) == starting_token:
                token_found = True
        last_count = len(chunk)
        offset += last_count

    if not token_found:
        logger.info(
            "starting token '%s' not found under '%s', returning an empty window",
            starting_token,
            parent,
        )
    return records, next_token
