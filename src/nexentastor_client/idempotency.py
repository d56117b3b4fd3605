"""Best-effort create/destroy helpers with explicit tolerance rules.

Cleanup and setup paths often do not care whether an object was already
there (or already gone). These helpers make that tolerance explicit: only
the single expected appliance code is accepted, everything else propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .exceptions import NexentaStorError, is_already_exists_error, is_not_found_error

logger = logging.getLogger(__name__)


def ensure_created(call: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
    """Run a create call, treating ``EEXIST`` as success.

    Returns ``True`` if the object was created and ``False`` if it already existed.
    """

    try:
        call(*args, **kwargs)
    except NexentaStorError as exc:
        if not is_already_exists_error(exc):
            raise
        logger.debug("already exists, nothing to create: %s", exc)
        return False
    return True


def ensure_destroyed(call: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
    """Run a destroy call, treating ``ENOENT`` as success.

    Returns ``True`` if the object was destroyed and ``False`` if it was already gone.
    """

    try:
        call(*args, **kwargs)
    except NexentaStorError as exc:
        if not is_not_found_error(exc):
            raise
        logger.debug("not found, nothing to destroy: %s", exc)
        return False
    return True
