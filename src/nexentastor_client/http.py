"""HTTP utilities for NexentaStor API access."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from requests import Response, Session

from .exceptions import RequestError, UnexpectedResponseError, parse_appliance_error


@dataclass(slots=True)
class HttpResponse:
    """Typed response wrapper with helper accessors."""

    status_code: int
    data: Any
    text: str
    headers: Mapping[str, str]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def ensure_success(response: HttpResponse, context: str) -> None:
    """Raise the classified appliance error, or `RequestError`, if the response failed."""

    if response.ok:
        return
    appliance_error = parse_appliance_error(
        response.text, context, status_code=response.status_code
    )
    if appliance_error is not None:
        raise appliance_error
    message = (
        f"{context}: NexentaStor API error {response.status_code}, "
        f"response: {response.text[:200]}"
    )
    raise RequestError(message, status_code=response.status_code, details=response.text)


def parse_json(response: Response) -> Any:
    """Parse JSON with helpful error context."""

    try:
        return response.json()
    except ValueError as exc:
        raise UnexpectedResponseError(
            f"Response did not contain valid JSON: '{response.text[:200]}'",
            status_code=response.status_code,
            details=response.text,
        ) from exc


def request(
    session: Session,
    method: str,
    url: str,
    *,
    params: Mapping[str, str] | None = None,
    headers: MutableMapping[str, str] | None = None,
    json_payload: Mapping[str, Any] | None = None,
    timeout: float | tuple[float, float] | None = None,
    verify: bool | str = True,
) -> HttpResponse:
    """Make one round trip; the body of a successful response is decoded as JSON.

    Non-2xx statuses are returned as-is so callers can inspect them (job
    polling treats 202 specially); use `ensure_success` to turn them into errors.
    """

    response = session.request(
        method=method,
        url=url,
        params=params,
        headers=headers,
        json=json_payload,
        timeout=timeout,
        verify=verify,
    )

    data: Any = None
    if 200 <= response.status_code < 300 and response.content:
        data = parse_json(response)

    return HttpResponse(
        status_code=response.status_code,
        data=data,
        text=response.text,
        headers=response.headers,
    )
