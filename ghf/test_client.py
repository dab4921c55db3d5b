"""
Pytest tests for GitHubAPIClient (requests wrapper and error mapping).

No network: requests.get is monkeypatched to return canned Response objects.

Run from the repo root:
    pytest ghf/test_client.py -v
"""

import json

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from ghf import client as client_mod
from ghf.client import GitHubAPIClient
from ghf.exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubForbiddenError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRequestError,
    friendly_error,
)


def _response(status, body=None, *, headers=None, raw=None):
    resp = requests.Response()
    resp.status_code = status
    if raw is not None:
        resp._content = raw.encode("utf-8")
    else:
        resp._content = json.dumps(body if body is not None else {}).encode("utf-8")
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.encoding = "utf-8"
    return resp


class FakeGet:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def __call__(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def fake_get(monkeypatch):
    def install(**kw):
        fg = FakeGet(**kw)
        monkeypatch.setattr(client_mod.requests, "get", fg)
        return fg
    return install


# ============================================================================
# success path
# ============================================================================

def test_get_returns_json_and_sends_headers(fake_get):
    fg = fake_get(response=_response(200, [{"number": 1}]))
    c = GitHubAPIClient(token="ghp_abc", base_url="https://ghe.example.com/api/v3/")

    data = c.get("/repos/acme/widgets/pulls", params={"state": "open", "base": None, "page": 2})

    assert data == [{"number": 1}]
    call = fg.calls[0]
    assert call["url"] == "https://ghe.example.com/api/v3/repos/acme/widgets/pulls"
    assert call["params"] == {"state": "open", "page": 2}
    assert call["headers"]["Authorization"] == "token ghp_abc"
    assert call["headers"]["Accept"] == "application/vnd.github.v3+json"
    assert call["timeout"] == 10


def test_anonymous_client_sends_no_authorization(fake_get):
    fg = fake_get(response=_response(200, {"login": "octocat"}))
    c = GitHubAPIClient()
    assert not c.has_token()
    c.get("/users/octocat")
    assert "Authorization" not in fg.calls[0]["headers"]


def test_rest_call_stats_by_label(fake_get):
    fake_get(response=_response(200, {}))
    c = GitHubAPIClient(token="t")
    c.get("/repos/a/b/pulls")
    c.get("/repos/a/b/pulls/3")
    c.get("/search/repositories")
    c.get("/user")
    assert c.get_rest_call_stats() == {
        "total": 4,
        "by_label": {"repos.pulls": 2, "search.repositories": 1, "user": 1},
    }


def test_get_response_exposes_headers(fake_get):
    fake_get(response=_response(200, {"login": "me"}, headers={"X-OAuth-Scopes": "repo, gist"}))
    resp = GitHubAPIClient(token="t").get_response("/user")
    assert resp.headers["x-oauth-scopes"] == "repo, gist"


def test_non_json_body_is_request_error(fake_get):
    fake_get(response=_response(200, raw="<html>oops</html>"))
    with pytest.raises(GitHubRequestError):
        GitHubAPIClient(token="t").get("/user")


# ============================================================================
# failure mapping
# ============================================================================

@pytest.mark.parametrize(
    "status,cls",
    [
        (401, GitHubAuthError),
        (403, GitHubForbiddenError),
        (404, GitHubNotFoundError),
        (429, GitHubRateLimitError),
        (422, GitHubRequestError),
        (500, GitHubRequestError),
    ],
)
def test_status_maps_to_error_class(fake_get, status, cls):
    fake_get(response=_response(status, {"message": "boom"}))
    with pytest.raises(cls) as ei:
        GitHubAPIClient(token="t").get("/repos/a/b")
    assert ei.value.status_code == status
    assert ei.value.message == "boom"
    assert ei.value.endpoint == "/repos/a/b"


def test_rate_limit_carries_retry_after(fake_get):
    fake_get(response=_response(
        403,
        {"message": "API rate limit exceeded for 1.2.3.4."},
        headers={"Retry-After": "42"},
    ))
    with pytest.raises(GitHubAPIError) as ei:
        GitHubAPIClient().get("/users/octocat")
    assert ei.value.retry_after_s == 42
    assert "42" in friendly_error(ei.value)


def test_rate_limit_reset_header_used_when_exhausted(fake_get, monkeypatch):
    monkeypatch.setattr(client_mod.time, "time", lambda: 1_000.0)
    fake_get(response=_response(
        403,
        {"message": "API rate limit exceeded"},
        headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1090"},
    ))
    with pytest.raises(GitHubAPIError) as ei:
        GitHubAPIClient().get("/users/octocat")
    assert ei.value.retry_after_s == 90


def test_error_message_falls_back_to_body_text(fake_get):
    fake_get(response=_response(502, raw="Bad Gateway"))
    with pytest.raises(GitHubRequestError) as ei:
        GitHubAPIClient().get("/user")
    assert ei.value.message == "Bad Gateway"


def test_transport_failure_has_no_status(fake_get):
    fake_get(exc=requests.exceptions.ConnectionError("connection refused"))
    with pytest.raises(GitHubRequestError) as ei:
        GitHubAPIClient().get("/user")
    assert ei.value.status_code is None
    assert "connection refused" in friendly_error(ei.value)
