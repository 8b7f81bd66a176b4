"""GitLab API client used to register CI/CD variables."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any

import requests

from cc_ci_setup.logging_utils import LOGGER_NAME
from cc_ci_setup.models import API_V4, REQUEST_TIMEOUT


class GitLabClient:
    """Thin wrapper around GitLab REST API v4. One attempt per call, no retries."""

    def __init__(self, base_url: str, token: str, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{API_V4}"
        self.session = requests.Session()
        self.session.headers.update(
            {
                "PRIVATE-TOKEN": token,
                "Content-Type": "application/json",
            }
        )
        self.timeout = timeout
        self.logger = logging.getLogger(LOGGER_NAME)

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        url = f"{self.api_url}{endpoint}"
        self.logger.debug(f"{method.upper()} {url}")
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if resp.status_code >= 400:
            self.logger.debug(f"API error {resp.status_code}: {resp.text[:500]}")
        resp.raise_for_status()
        return resp

    def get(self, endpoint: str, params: dict | None = None) -> Any:
        return self._request("GET", endpoint, params=params).json()

    def post(self, endpoint: str, data: dict | None = None) -> Any:
        return self._request("POST", endpoint, json=data).json()

    def put(self, endpoint: str, data: dict | None = None) -> Any:
        return self._request("PUT", endpoint, json=data).json()

    # -- Project variables --

    @staticmethod
    def _variables_endpoint(project_path: str) -> str:
        return f"/projects/{urllib.parse.quote(project_path, safe='')}/variables"

    def get_variable(self, project_path: str, key: str) -> dict | None:
        """Return the project variable, or None if GitLab answers 404."""
        try:
            return self.get(f"{self._variables_endpoint(project_path)}/{key}")
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                return None
            raise

    def create_variable(self, project_path: str, key: str, value: str, masked: bool, protected: bool) -> dict:
        return self.post(
            self._variables_endpoint(project_path),
            data={"key": key, "value": value, "masked": masked, "protected": protected},
        )

    def update_variable(self, project_path: str, key: str, value: str, masked: bool, protected: bool) -> dict:
        return self.put(
            f"{self._variables_endpoint(project_path)}/{key}",
            data={"value": value, "masked": masked, "protected": protected},
        )
