"""Asynchronous job status polling."""
from __future__ import annotations

import enum

from ..exceptions import RequestError, parse_appliance_error
from .base import ResourceBase, escape_path, require


class JobStatus(enum.Enum):
    DONE = "done"
    IN_PROGRESS = "in_progress"


class JobsResource(ResourceBase):
    """Check the state of jobs the appliance runs in the background.

    There is no wait loop here; callers decide how often to poll.
    """

    def status(self, job_id: str) -> JobStatus:
        """Return the job state, or raise the error the job finished with."""

        require(job_id, "Job id is required")
        response = self._client.send("GET", f"jobStatus/{escape_path(job_id)}")
        if response.status_code in (200, 201):
            return JobStatus.DONE
        if response.status_code == 202:
            return JobStatus.IN_PROGRESS

        error = parse_appliance_error(
            response.text, "Job was finished with error", status_code=response.status_code
        )
        if error is not None:
            raise error
        raise RequestError(
            f"Job request returned {response.status_code} code, but response body "
            f"doesn't contain explanation: {response.text[:200]}",
            status_code=response.status_code,
            details=response.text,
        )

    def is_done(self, job_id: str) -> bool:
        return self.status(job_id) is JobStatus.DONE
