"""High-level NexentaStor REST client."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any
from urllib.parse import urljoin, urlparse

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .auth.base import AuthStrategy
from .auth.login import LoginAuth
from .config import ClientConfig, normalize_base_url
from .exceptions import AuthenticationError, RequestError
from .http import HttpResponse, ensure_success
from .http import request as http_request
from .resources import (
    FilesystemsResource,
    HostGroupsResource,
    IscsiTargetsResource,
    JobsResource,
    LogicalUnitsResource,
    LunMappingsResource,
    NfsSharesResource,
    RemoteInitiatorsResource,
    SmbSharesResource,
    SnapshotsResource,
    SystemResource,
    TargetGroupsResource,
    VolumesResource,
)


logger = logging.getLogger(__name__)


class NexentaStorClient:
    """Wrap NexentaStor REST endpoints with helper methods."""

    def __init__(
        self,
        *,
        base_url: str,
        auth_strategy: AuthStrategy,
        verify_ssl: bool | str = True,
        timeout: float = 30.0,
        default_headers: Mapping[str, str] | None = None,
        query_defaults: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = ClientConfig(
            base_url=normalize_base_url(base_url),
            verify_ssl=verify_ssl,
            timeout=timeout,
            default_headers=default_headers,
            query_defaults=query_defaults,
        )
        self._suppress_insecure_warning_if_needed()
        self._session = session or requests.Session()
        self._auth = auth_strategy
        self.filesystems = FilesystemsResource(self)
        self.volumes = VolumesResource(self)
        self.snapshots = SnapshotsResource(self)
        self.lun_mappings = LunMappingsResource(self)
        self.logical_units = LogicalUnitsResource(self)
        self.iscsi_targets = IscsiTargetsResource(self)
        self.target_groups = TargetGroupsResource(self)
        self.host_groups = HostGroupsResource(self)
        self.remote_initiators = RemoteInitiatorsResource(self)
        self.nfs = NfsSharesResource(self)
        self.smb = SmbSharesResource(self)
        self.jobs = JobsResource(self)
        self.system = SystemResource(self)

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> NexentaStorClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    # Public API --------------------------------------------------------------
    def login(self) -> None:
        """Obtain a fresh session token from the appliance."""
        if not isinstance(self._auth, LoginAuth):
            raise AuthenticationError(
                "Login requires username/password credentials (LoginAuth)."
            )
        self._auth.login(self)

    def send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
        authenticate: bool = True,
    ) -> HttpResponse:
        """Perform one round trip and return the response whatever its status.

        A 401 answer triggers a single credential refresh and retry when the
        auth strategy supports it.
        """

        url = self._resolve_url(path)
        merged_params = self._prepare_params(params)
        self._log_request(method, url)
        headers = self._prepare_headers(authenticate)
        response = self._perform_request(
            method,
            url,
            params=merged_params,
            headers=dict(headers),
            json_payload=json_payload,
        )
        if (
            response.status_code == 401
            and authenticate
            and self._auth.refresh(self, headers)
        ):
            logger.info("NexentaStor token refreshed, retrying %s %s", method.upper(), url)
            response = self._perform_request(
                method,
                url,
                params=merged_params,
                headers=self._prepare_headers(authenticate),
                json_payload=json_payload,
            )
        return response

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform a request and return the decoded body; failures raise classified errors."""
        response = self.send(method, path, params=params, json_payload=json_payload)
        ensure_success(response, f"{method.upper()} {path}")
        return response.data

    def close(self) -> None:
        self._session.close()

    # Internal helpers -------------------------------------------------------
    def _resolve_url(self, path: str) -> str:
        parsed = urlparse(path)
        if parsed.scheme and parsed.netloc:
            return path
        return urljoin(f"{self.config.base_url}/", path.lstrip("/"))

    def _prepare_headers(self, authenticate: bool) -> MutableMapping[str, str]:
        headers = self.config.resolved_headers()
        if authenticate:
            self._auth.apply(headers)
        return headers

    def _prepare_params(self, params: Mapping[str, str] | None) -> MutableMapping[str, str]:
        merged: MutableMapping[str, str] = self.config.resolved_query()
        if params:
            merged.update(params)
        return merged

    def _perform_request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None,
        headers: MutableMapping[str, str],
        json_payload: Mapping[str, Any] | None,
    ) -> HttpResponse:
        try:
            return http_request(
                self._session,
                method,
                url,
                params=params,
                headers=headers,
                json_payload=json_payload,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            reason = str(exc).strip() or exc.__class__.__name__
            raise RequestError(
                f"Failed to communicate with NexentaStor API: {reason}", details=reason
            ) from exc

    def _log_request(self, method: str, url: str) -> None:
        logger.info("NexentaStor request %s %s", method.upper(), url)

    def _suppress_insecure_warning_if_needed(self) -> None:
        if isinstance(self.config.verify_ssl, bool) and not self.config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)
