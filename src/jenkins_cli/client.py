"""Thin Jenkins REST client used by the command-line interface."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from requests.auth import HTTPBasicAuth

from .errors import JenkinsAPIError, JenkinsRequestError, ResponseDecodeError
from .formatting import job_url_path
from .log import debug_log
from .session import Session

REQUEST_TIMEOUT = 30

JOB_TREE = (
    "name,url,description,color,"
    "lastBuild[number,result],lastSuccessfulBuild[number],lastFailedBuild[number]"
)


class JenkinsClient:
    """Issue authenticated requests against a single Jenkins instance.

    Every method performs exactly one HTTP request. Job names may address
    nested jobs as ``folder/job/name``.
    """

    def __init__(self, session: Session, timeout: float = REQUEST_TIMEOUT):
        self.session = session
        self.timeout = timeout
        self._http = requests.Session()
        self._http.auth = HTTPBasicAuth(session.username, session.token)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        action: str,
        params: Optional[Dict[str, str]] = None,
        ok_statuses=(200,),
    ) -> requests.Response:
        url = self.session.url + path
        debug_log(f"{method} {url}")
        try:
            response = self._http.request(method, url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise JenkinsRequestError(f"failed to {action}: {e}") from e

        if response.status_code not in ok_statuses:
            raise JenkinsAPIError(
                f"failed to {action}: {response.status_code} {response.reason} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    def _get_json(self, path: str, action: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        response = self._request("GET", path, action, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(f"failed to decode response: {e}") from e

    def list_jobs(self) -> List[Dict[str, Any]]:
        """List top-level jobs with their name, url and color."""
        data = self._get_json("/api/json", "list jobs", params={"tree": "jobs[name,url,color]"})
        return data.get("jobs") or []

    def get_job(self, job_name: str) -> Dict[str, Any]:
        return self._get_json(f"{job_url_path(job_name)}/api/json", "get job", params={"tree": JOB_TREE})

    def build_job(self, job_name: str) -> None:
        """Trigger a build. Jenkins answers 201 (queued) or 200."""
        self._request("POST", f"{job_url_path(job_name)}/build", "trigger build", ok_statuses=(200, 201))

    def get_build(self, job_name: str, build_number: str) -> Dict[str, Any]:
        path = f"{job_url_path(job_name)}/{quote(str(build_number), safe='')}/api/json"
        return self._get_json(path, "get build")

    def get_last_build(self, job_name: str) -> Dict[str, Any]:
        return self._get_json(f"{job_url_path(job_name)}/lastBuild/api/json", "get last build")

    def get_build_log(self, job_name: str, build_number: str) -> bytes:
        """Return the raw console output, undecoded."""
        path = f"{job_url_path(job_name)}/{quote(str(build_number), safe='')}/consoleText"
        return self._request("GET", path, "get build log").content
