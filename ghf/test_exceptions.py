"""
Pytest tests for the failure classifier (exceptions.friendly_error / classify_error).

Run from the repo root:
    pytest ghf/test_exceptions.py -v
"""

import pytest

from ghf.exceptions import (
    ErrorCategory,
    GitHubAPIError,
    GitHubAuthError,
    GitHubForbiddenError,
    classify_error,
    friendly_error,
)


def _err(status, message="", retry_after_s=None):
    return GitHubAPIError(status_code=status, endpoint="/x", message=message, retry_after_s=retry_after_s)


@pytest.mark.parametrize(
    "status,message,category",
    [
        (401, "Bad credentials", ErrorCategory.UNAUTHENTICATED),
        (403, "API rate limit exceeded for 1.2.3.4", ErrorCategory.RATE_LIMITED),
        (403, "Resource not accessible by integration", ErrorCategory.FORBIDDEN_SCOPES),
        (404, "Not Found", ErrorCategory.NOT_FOUND),
        (422, "Validation Failed", ErrorCategory.VALIDATION),
        (429, "", ErrorCategory.SECONDARY_RATE_LIMITED),
        (451, "", ErrorCategory.BLOCKED),
        (500, "Server Error", ErrorCategory.UNKNOWN),
        (None, "connection reset", ErrorCategory.UNKNOWN),
    ],
)
def test_classify_error(status, message, category):
    assert classify_error(_err(status, message)) is category


def test_401_names_reauth_command():
    assert "ghf auth login" in friendly_error(GitHubAuthError(status_code=401, endpoint="/user", message="Bad credentials"))


def test_403_rate_limit_uses_retry_after():
    msg = friendly_error(_err(403, "API rate limit exceeded", retry_after_s=120))
    assert "120" in msg
    assert "rate limit" in msg.lower()


def test_403_rate_limit_without_retry_after_says_wait():
    msg = friendly_error(_err(403, "API rate limit exceeded"))
    assert "wait" in msg.lower()


def test_403_other_mentions_scopes():
    msg = friendly_error(GitHubForbiddenError(status_code=403, endpoint="/x", message="Must have admin rights"))
    assert "scopes" in msg
    assert "Must have admin rights" in msg


def test_404_not_found():
    assert "not found" in friendly_error(_err(404, "Not Found")).lower()


def test_422_includes_provider_message():
    assert "Validation Failed" in friendly_error(_err(422, "Validation Failed"))
    assert "422" in friendly_error(_err(422))


def test_429_retry_after():
    assert "30" in friendly_error(_err(429, retry_after_s=30))
    assert "429" in friendly_error(_err(429))


def test_451_blocked():
    assert "451" in friendly_error(_err(451))


def test_unknown_falls_back_to_provider_message():
    assert friendly_error(_err(999, "weird failure")) == "weird failure"


def test_unknown_without_message_uses_exception_text():
    assert friendly_error(RuntimeError("network timeout")) == "network timeout"
    assert friendly_error(ValueError()) == "ValueError"


def test_classifier_is_deterministic():
    e = _err(403, "API rate limit exceeded", retry_after_s=5)
    assert friendly_error(e) == friendly_error(e)
