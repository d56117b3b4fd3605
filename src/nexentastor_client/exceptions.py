"""Custom exception hierarchy and appliance error classification."""
from __future__ import annotations

import json
from typing import Any

NOT_FOUND = "ENOENT"
ALREADY_EXISTS = "EEXIST"
BUSY = "EBUSY"


class NexentaStorError(RuntimeError):
    """Base error for NexentaStor failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class InvalidArgumentError(NexentaStorError, ValueError):
    """Raised when a call is rejected before reaching the appliance."""


class AuthenticationError(NexentaStorError):
    """Raised when credentials fail or tokens expire."""


class RequestError(NexentaStorError):
    """Raised when an HTTP request cannot be fulfilled."""


class UnexpectedResponseError(NexentaStorError):
    """Raised when the API returns an unexpected payload structure."""


class ApplianceError(NexentaStorError):
    """Error reported by the appliance with a symbolic code (ENOENT, EEXIST, ...)."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        name: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.code = code
        self.name = name

    def __str__(self) -> str:
        return f"{super().__str__()} [code: {self.code}]"


class DestroyError(NexentaStorError):
    """Raised when a destroy sequence fails for a reason the appliance did not classify."""


def parse_appliance_error(
    body: Any,
    context: str,
    *,
    status_code: int | None = None,
) -> ApplianceError | None:
    """Build an `ApplianceError` from an error response body.

    The appliance answers failures with ``{"name": ..., "code": ..., "message": ...}``.
    Returns ``None`` when ``body`` does not have that shape so the caller can fall
    back to a generic message with the raw status and body.
    """

    payload = body
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        if not body.strip():
            return None
        try:
            payload = json.loads(body)
        except ValueError:
            return None
    if not isinstance(payload, dict):
        return None

    code = payload.get("code")
    name = payload.get("name")
    if not code and name == "AuthenticationError":
        code = name
    if not isinstance(code, str) or not code:
        return None

    message = payload.get("message") or name or code
    return ApplianceError(
        code,
        f"{context}: {message}",
        name=name if isinstance(name, str) else None,
        status_code=status_code,
        details=payload,
    )


def is_appliance_error(error: BaseException | None) -> bool:
    return isinstance(error, ApplianceError)


def is_authentication_error(error: BaseException | None) -> bool:
    if isinstance(error, AuthenticationError):
        return True
    if isinstance(error, ApplianceError):
        return error.name == "AuthenticationError" or error.status_code == 401
    return False


def _has_code(error: BaseException | None, code: str) -> bool:
    return isinstance(error, ApplianceError) and error.code == code


def is_not_found_error(error: BaseException | None) -> bool:
    return _has_code(error, NOT_FOUND)


def is_already_exists_error(error: BaseException | None) -> bool:
    """EEXIST; on destroy it means the resource still has dependent clones."""
    return _has_code(error, ALREADY_EXISTS)


def is_busy_error(error: BaseException | None) -> bool:
    """EBUSY; on destroy it means snapshots exist and were not asked to be destroyed."""
    return _has_code(error, BUSY)
