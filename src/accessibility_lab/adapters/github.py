"""Minimal GitHub REST client for pull request comments."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
_TIMEOUT = (30, 60)
_PAGE_SIZE = 100


class GitHubError(RuntimeError):
    """Raised when the GitHub API rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Post and fold issue comments on a single repository."""

    def __init__(
        self,
        owner: str,
        repository: str,
        token: str,
        *,
        api_url: str = GITHUB_API_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.owner = owner
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github+json",
                "Content-Type": "application/json",
            }
        )

    def comments_url(self, pr_number: str | int) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repository}/issues/{pr_number}/comments"

    def post_comment(self, pr_number: str | int, body: str) -> Dict[str, Any]:
        url = self.comments_url(pr_number)
        logger.info("Posting comment to %s", url)
        response = self._request("POST", url, json={"body": body})
        return response.json()

    def list_comments(self, pr_number: str | int) -> List[Dict[str, Any]]:
        comments: List[Dict[str, Any]] = []
        page = 1
        while True:
            response = self._request(
                "GET",
                self.comments_url(pr_number),
                params={"per_page": _PAGE_SIZE, "page": page},
            )
            batch = response.json()
            comments.extend(batch)
            if len(batch) < _PAGE_SIZE:
                return comments
            page += 1

    def update_comment(self, comment_id: int, body: str) -> Dict[str, Any]:
        url = f"{self.api_url}/repos/{self.owner}/{self.repository}/issues/comments/{comment_id}"
        response = self._request("PATCH", url, json={"body": body})
        return response.json()

    def fold_comments(self, pr_number: str | int, header: str, summary: str) -> int:
        """Collapse earlier comments starting with ``header`` into a ``<details>`` block.

        Returns the number of comments that were folded.
        """

        folded = 0
        for comment in self.list_comments(pr_number):
            body = comment.get("body") or ""
            if not body.startswith(header):
                continue
            self.update_comment(
                comment["id"],
                f"<details>\n<summary>{summary}</summary>\n\n{body}\n</details>\n",
            )
            folded += 1

        logger.debug("Folded %d previous comment(s) on #%s", folded, pr_number)
        return folded

    # ------------------------------------------------------------------
    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=_TIMEOUT, **kwargs)
        except requests.RequestException as exc:
            raise GitHubError(f"{method} {url} failed: {exc}") from exc

        if not response.ok:
            raise GitHubError(
                f"{method} {url} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response


__all__ = ["GITHUB_API_URL", "GitHubClient", "GitHubError"]
