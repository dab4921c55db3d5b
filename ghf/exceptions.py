# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""GitHub API error types and the user-facing failure classifier.

The error classes live here, not in client.py, so commands and the pagination
controller can catch them without importing the REST client.

friendly_error() is the single place that turns a failed call into the line
printed for the operator:

  401                      -> re-authenticate (`ghf auth login`)
  403 + "rate limit"       -> primary rate limit, wait hint (Retry-After if known)
  403                      -> token probably missing a scope
  404                      -> not found, check owner/repo
  422                      -> validation error (+ GitHub's message)
  429                      -> secondary rate limit (+ Retry-After if known)
  451                      -> blocked for legal reasons / region
  anything else            -> GitHub's message, else the exception text
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class GitHubAPIError(Exception):
    def __init__(
        self,
        *,
        status_code: Optional[int],
        endpoint: str,
        message: str,
        retry_after_s: Optional[int] = None,
    ):
        super().__init__(message)
        self.status_code = int(status_code) if status_code is not None else None
        self.endpoint = str(endpoint or "")
        self.message = str(message or "")
        self.retry_after_s = retry_after_s


class GitHubAuthError(GitHubAPIError):
    pass


class GitHubForbiddenError(GitHubAPIError):
    pass


class GitHubNotFoundError(GitHubAPIError):
    pass


class GitHubRateLimitError(GitHubAPIError):
    pass


class GitHubRequestError(GitHubAPIError):
    pass


class CommandError(Exception):
    """A command failed; the message is already fit for the operator."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = int(exit_code)


class ErrorCategory(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    RATE_LIMITED = "rate_limited"
    FORBIDDEN_SCOPES = "forbidden_scopes"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    SECONDARY_RATE_LIMITED = "secondary_rate_limited"
    BLOCKED = "blocked"
    UNKNOWN = "unknown"


def _failure_fields(err: BaseException):
    """(status, provider message, retry-after seconds) for any exception."""
    if isinstance(err, GitHubAPIError):
        return err.status_code, err.message, err.retry_after_s
    status = getattr(err, "status_code", None)
    return (status if isinstance(status, int) else None), "", None


def classify_error(err: BaseException) -> ErrorCategory:
    status, message, _ = _failure_fields(err)
    if status == 401:
        return ErrorCategory.UNAUTHENTICATED
    if status == 403:
        if "rate limit" in (message or "").lower():
            return ErrorCategory.RATE_LIMITED
        return ErrorCategory.FORBIDDEN_SCOPES
    if status == 404:
        return ErrorCategory.NOT_FOUND
    if status == 422:
        return ErrorCategory.VALIDATION
    if status == 429:
        return ErrorCategory.SECONDARY_RATE_LIMITED
    if status == 451:
        return ErrorCategory.BLOCKED
    return ErrorCategory.UNKNOWN


def friendly_error(err: BaseException) -> str:
    """Return a human-readable, actionable message for a failed API call."""
    category = classify_error(err)
    _, message, retry_after_s = _failure_fields(err)

    if category is ErrorCategory.UNAUTHENTICATED:
        return "Authentication failed - run `ghf auth login` to refresh your token."
    if category is ErrorCategory.RATE_LIMITED:
        wait = f" Try again in {retry_after_s}s." if retry_after_s is not None else " Wait a few minutes."
        return f"API rate limit exceeded.{wait} Authenticate with a token for higher limits."
    if category is ErrorCategory.FORBIDDEN_SCOPES:
        detail = f" GitHub says: {message}" if message else ""
        return f"Forbidden (403) - your token may be missing required scopes.{detail}"
    if category is ErrorCategory.NOT_FOUND:
        return "Resource not found (404) - check the owner/repo name is correct."
    if category is ErrorCategory.VALIDATION:
        return f"Validation error (422): {message}" if message else "Validation error (422) - check your input."
    if category is ErrorCategory.SECONDARY_RATE_LIMITED:
        wait = f" Retry after {retry_after_s}s." if retry_after_s is not None else ""
        return f"Secondary rate limit hit (429).{wait}"
    if category is ErrorCategory.BLOCKED:
        return "Content blocked (451) - this resource is unavailable in your region."
    if message:
        return message
    return str(err) or err.__class__.__name__
