from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
import requests

from accessibility_lab.adapters import GitHubClient, GitHubError


class FakeSession:
    """Stands in for ``requests.Session`` and replays canned responses."""

    def __init__(self, responses: List[Any]) -> None:
        self.headers: Dict[str, str] = {}
        self.requests: List[Dict[str, Any]] = []
        self._responses = list(responses)

    def request(self, method: str, url: str, **kwargs: Any) -> Any:
        self.requests.append({"method": method, "url": url, **kwargs})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _response(status_code: int = 200, payload: Any = None) -> SimpleNamespace:
    return SimpleNamespace(
        status_code=status_code,
        ok=200 <= status_code < 300,
        text="" if payload is None else str(payload),
        json=lambda: payload,
    )


def test_post_comment_targets_issue_comments_endpoint():
    session = FakeSession([_response(201, {"id": 10})])
    client = GitHubClient("octo", "app", "secret", session=session)

    created = client.post_comment("42", "## Accessibility Test Result")

    assert created == {"id": 10}
    request = session.requests[0]
    assert request["method"] == "POST"
    assert request["url"] == "https://api.github.com/repos/octo/app/issues/42/comments"
    assert request["json"] == {"body": "## Accessibility Test Result"}
    assert session.headers["Authorization"] == "token secret"


def test_non_success_status_raises_github_error():
    session = FakeSession([_response(404, {"message": "Not Found"})])
    client = GitHubClient("octo", "app", "secret", session=session)

    with pytest.raises(GitHubError) as excinfo:
        client.post_comment(1, "body")

    assert excinfo.value.status_code == 404


def test_transport_errors_raise_github_error():
    session = FakeSession([requests.ConnectionError("connection refused")])
    client = GitHubClient("octo", "app", "secret", session=session)

    with pytest.raises(GitHubError, match="connection refused"):
        client.post_comment(1, "body")


def test_list_comments_follows_pages():
    first_page = [{"id": index, "body": ""} for index in range(100)]
    session = FakeSession([_response(200, first_page), _response(200, [{"id": 100}])])
    client = GitHubClient("octo", "app", "secret", session=session)

    comments = client.list_comments(7)

    assert len(comments) == 101
    assert [request["params"]["page"] for request in session.requests] == [1, 2]


def test_fold_comments_wraps_previous_results_only():
    existing = [
        {"id": 1, "body": "## Accessibility Test Result\n### :x: 1 error found."},
        {"id": 2, "body": "LGTM"},
    ]
    session = FakeSession([_response(200, existing), _response(200, {"id": 1})])
    client = GitHubClient("octo", "app", "secret", session=session)

    folded = client.fold_comments(7, "## Accessibility Test Result", "Open past result")

    assert folded == 1
    patch = session.requests[1]
    assert patch["method"] == "PATCH"
    assert patch["url"] == "https://api.github.com/repos/octo/app/issues/comments/1"
    assert patch["json"]["body"].startswith("<details>\n<summary>Open past result</summary>")
