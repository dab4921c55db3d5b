# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""GitHub REST client.

A thin wrapper over `requests` that:
- attaches the token (see config.resolve_token) and the v3 Accept header
- counts REST calls per label for --verbose output
- turns every non-2xx response (and every transport error) into a typed
  GitHubAPIError carrying status, GitHub's message and the Retry-After hint

It never retries; rate-limited calls fail and the operator re-runs.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests

from . import __version__
from .exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubForbiddenError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRequestError,
)

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT_S = 10

_ERROR_CLASS_BY_STATUS = {
    401: GitHubAuthError,
    403: GitHubForbiddenError,
    404: GitHubNotFoundError,
    429: GitHubRateLimitError,
}


def _retry_after_s(resp: requests.Response) -> Optional[int]:
    """Seconds to wait, from Retry-After, else from an exhausted X-RateLimit-Reset."""
    headers = resp.headers or {}
    retry_after = headers.get("Retry-After")
    if retry_after is not None:
        try:
            return max(0, int(retry_after))
        except (ValueError, TypeError):
            return None
    if headers.get("X-RateLimit-Remaining") == "0" and headers.get("X-RateLimit-Reset"):
        try:
            return max(0, int(headers["X-RateLimit-Reset"]) - int(time.time()))
        except (ValueError, TypeError):
            return None
    return None


def _error_message(resp: requests.Response) -> str:
    """GitHub's `message` field, else the first 300 chars of the body."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    try:
        return (resp.text or "")[:300]
    except (ValueError, TypeError):
        return ""


class GitHubAPIClient:
    """GitHub API client.

    Example:
        client = GitHubAPIClient(token="ghp_...")
        pulls = client.get("/repos/owner/repo/pulls", params={"state": "open", "page": 1})
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT_S,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = int(timeout)
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"ghf/{__version__}",
        }
        if self.token:
            self.headers["Authorization"] = f"token {self.token}"
        self.logger = logging.getLogger(self.__class__.__name__)

        self.rest_calls_total = 0
        self.rest_calls_by_label: Dict[str, int] = {}

    def has_token(self) -> bool:
        return bool(self.token)

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}" if endpoint.startswith("/") else f"{self.base_url}/{endpoint}"

    @staticmethod
    def _label_for_endpoint(endpoint: str) -> str:
        """Coarse label for stats, e.g. "/repos/a/b/pulls" -> "repos.pulls"."""
        parts = [p for p in endpoint.strip("/").split("/") if p]
        if not parts:
            return "root"
        if parts[0] == "repos" and len(parts) >= 4:
            return f"repos.{parts[3]}"
        if parts[0] == "search" and len(parts) >= 2:
            return f"search.{parts[1]}"
        return parts[0]

    def _rest_get(self, endpoint: str, *, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """requests.get wrapper: counts the call and maps failures to GitHubAPIError."""
        label = self._label_for_endpoint(endpoint)
        url = self._url(endpoint)
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}

        self.rest_calls_total += 1
        self.rest_calls_by_label[label] = self.rest_calls_by_label.get(label, 0) + 1
        self.logger.debug("GH REST GET [%s] %s %s", label, url, clean_params or "")

        t0 = time.monotonic()
        try:
            resp = requests.get(url, headers=dict(self.headers), params=clean_params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise GitHubRequestError(
                status_code=None,
                endpoint=endpoint,
                message=f"GitHub API request failed for {endpoint}: {e}",
            ) from e
        dt = max(0.0, time.monotonic() - t0)
        self.logger.debug(
            "GH REST RESP [%s] status=%s remaining=%s (%.2fs)",
            label, resp.status_code, resp.headers.get("X-RateLimit-Remaining"), dt,
        )

        if resp.status_code >= 400:
            error_cls = _ERROR_CLASS_BY_STATUS.get(resp.status_code, GitHubRequestError)
            raise error_cls(
                status_code=resp.status_code,
                endpoint=endpoint,
                message=_error_message(resp),
                retry_after_s=_retry_after_s(resp),
            )
        return resp

    def get_response(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """GET and return the raw response (for callers that need headers)."""
        return self._rest_get(endpoint, params=params)

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET and return the decoded JSON body (dict or list).

        Raises:
            GitHubAPIError (or a subclass) on HTTP >= 400, transport errors,
            and bodies that are not JSON.
        """
        resp = self._rest_get(endpoint, params=params)
        try:
            return resp.json()
        except ValueError as e:
            raise GitHubRequestError(
                status_code=resp.status_code,
                endpoint=endpoint,
                message=f"GitHub API returned a non-JSON body for {endpoint}",
            ) from e

    def get_rest_call_stats(self) -> Dict[str, Any]:
        return {"total": self.rest_calls_total, "by_label": dict(self.rest_calls_by_label)}


__all__ = ["DEFAULT_BASE_URL", "GitHubAPIClient", "GitHubAPIError"]
