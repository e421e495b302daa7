"""GitHub REST and GraphQL client.

Only the calls the drafter needs are implemented: listing releases,
walking commit history with associated pull requests, and creating or
updating a release. Transient failures of idempotent REST requests and of
GraphQL queries are retried by the session adapters.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from release_drafter import __version__
from release_drafter.config.models import GitHubConfig
from release_drafter.core.models import Commit, CommitPage, PullRequest, Release
from release_drafter.exceptions import GitHubAuthError, GitHubError, GitHubNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

COMMITS_QUERY = """
query findCommitsWithAssociatedPullRequests(
  $name: String!
  $owner: String!
  $ref: String!
  $first: Int!
  $after: String
  $since: GitTimestamp
) {
  repository(name: $name, owner: $owner) {
    object(expression: $ref) {
      ... on Commit {
        history(first: $first, since: $since, after: $after) {
          pageInfo {
            hasNextPage
            endCursor
          }
          nodes {
            oid
            message
            committedDate
            author {
              name
              user {
                login
              }
            }
            associatedPullRequests(first: 5) {
              nodes {
                number
                title
                body
                url
                mergedAt
                isCrossRepository
                baseRefName
                headRefName
                author {
                  login
                }
                labels(first: 100) {
                  nodes {
                    name
                  }
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


def parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_release(data: dict[str, Any]) -> Release:
    return Release(
        id=int(data["id"]),
        tag_name=data.get("tag_name") or "",
        name=data.get("name") or "",
        body=data.get("body") or "",
        draft=bool(data.get("draft", False)),
        prerelease=bool(data.get("prerelease", False)),
        created_at=parse_datetime(data.get("created_at")),
        published_at=parse_datetime(data.get("published_at")),
        html_url=data.get("html_url") or "",
        upload_url=data.get("upload_url") or "",
    )


def parse_pull_request(node: dict[str, Any]) -> PullRequest:
    author = node.get("author") or {}
    labels = (node.get("labels") or {}).get("nodes") or []
    return PullRequest(
        number=int(node["number"]),
        title=node.get("title") or "",
        body=node.get("body") or "",
        author=author.get("login"),
        merged_at=parse_datetime(node.get("mergedAt")),
        labels=frozenset(label["name"] for label in labels),
        is_fork=bool(node.get("isCrossRepository", False)),
        base_ref=node.get("baseRefName") or "",
        head_ref=node.get("headRefName") or "",
        url=node.get("url") or "",
    )


def parse_commit(node: dict[str, Any]) -> Commit:
    author = node.get("author") or {}
    user = author.get("user") or {}
    pull_requests = (node.get("associatedPullRequests") or {}).get("nodes") or []
    committed_at = parse_datetime(node.get("committedDate"))
    if committed_at is None:
        raise GitHubError(f"Commit {node.get('oid')} has no committedDate")
    return Commit(
        sha=node["oid"],
        message=node.get("message") or "",
        author=user.get("login"),
        committed_at=committed_at,
        associated_pull_requests=tuple(parse_pull_request(pr) for pr in pull_requests),
    )


def _retry(allowed_methods: list[str]) -> Retry:
    return Retry(
        total=3,
        status_forcelist=[429, 500, 502, 503, 504],
        backoff_factor=1,
        allowed_methods=allowed_methods,
    )


class GitHubClient:
    """Thin GitHub API client bound to one token."""

    def __init__(
        self,
        token: str | None,
        config: GitHubConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise GitHubAuthError("A GitHub token is required (set GITHUB_TOKEN)")

        self.config = config or GitHubConfig()
        self.api_url = self.config.api_url.rstrip("/")
        self.graphql_url = self.config.effective_graphql_url
        self.timeout_s = self.config.timeout_s

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": f"release-drafter/{__version__}",
            }
        )
        rest_adapter = HTTPAdapter(max_retries=_retry(["HEAD", "GET", "OPTIONS"]))
        self.session.mount("https://", rest_adapter)
        # Only read queries go to the GraphQL endpoint; the longer prefix wins
        self.session.mount(self.graphql_url, HTTPAdapter(max_retries=_retry(["POST"])))

    # -------- HTTP helpers --------

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.RequestException as e:
            raise GitHubError(f"{method} {url} failed: {e}") from e

        status = response.status_code
        if status in (401, 403):
            raise GitHubAuthError(
                f"{method} {url}: unauthorized (HTTP {status})", status_code=status
            )
        if status == 404:
            raise GitHubNotFoundError(f"{method} {url}: not found", status_code=status)
        if status >= 400:
            raise GitHubError(f"{method} {url}: HTTP {status}", status_code=status)
        return response

    def graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run a GraphQL query and return its ``data``."""
        response = self._request(
            "POST", self.graphql_url, json={"query": query, "variables": variables}
        )
        payload = response.json()
        if payload.get("errors"):
            messages = "; ".join(err.get("message", "unknown error") for err in payload["errors"])
            raise GitHubError(f"GraphQL query failed: {messages}")
        return payload.get("data") or {}

    # -------- Releases --------

    def list_releases(self, owner: str, repo: str) -> list[Release]:
        """Fetch every release of a repository, following Link pagination."""
        url: str | None = f"{self.api_url}/repos/{owner}/{repo}/releases"
        params: dict[str, Any] | None = {"per_page": self.config.page_size}
        releases: list[Release] = []

        while url:
            response = self._request("GET", url, params=params)
            releases.extend(parse_release(item) for item in response.json())
            url = response.links.get("next", {}).get("url")
            params = None  # the next link carries the query string

        logger.debug("Fetched %d release(s) of %s/%s", len(releases), owner, repo)
        return releases

    def create_release(self, owner: str, repo: str, payload: dict[str, Any]) -> Release:
        url = f"{self.api_url}/repos/{owner}/{repo}/releases"
        return parse_release(self._request("POST", url, json=payload).json())

    def update_release(
        self, owner: str, repo: str, release_id: int, payload: dict[str, Any]
    ) -> Release:
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/{release_id}"
        return parse_release(self._request("PATCH", url, json=payload).json())

    # -------- Commits --------

    def iter_commit_pages(
        self,
        owner: str,
        repo: str,
        ref: str,
        since: datetime | None = None,
    ) -> Iterator[CommitPage]:
        """Yield commit history pages of ``ref``, newest first.

        Pages are requested lazily; each request needs the previous
        page's cursor.
        """
        variables: dict[str, Any] = {
            "owner": owner,
            "name": repo,
            "ref": ref,
            "first": self.config.page_size,
            "after": None,
            "since": since.isoformat() if since else None,
        }

        while True:
            data = self.graphql(COMMITS_QUERY, variables)
            target = (data.get("repository") or {}).get("object")
            if target is None:
                raise GitHubNotFoundError(f"Ref {ref!r} not found in {owner}/{repo}")

            # The `... on Commit` fragment is empty for annotated tags, trees and blobs
            history = target.get("history")
            if history is None:
                raise GitHubNotFoundError(
                    f"Ref {ref!r} in {owner}/{repo} does not point to a commit"
                )
            page_info = history.get("pageInfo") or {}
            page = CommitPage(
                commits=tuple(parse_commit(node) for node in history.get("nodes") or []),
                end_cursor=page_info.get("endCursor"),
                has_next_page=bool(page_info.get("hasNextPage")),
            )
            logger.debug("Fetched commit page with %d commit(s)", len(page.commits))
            yield page

            if not page.has_next_page or not page.end_cursor:
                return
            variables = {**variables, "after": page.end_cursor}
