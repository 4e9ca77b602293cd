"""GitHub REST API client.

Synchronous: probes call it from their worker threads, one call at a time per
plugin. Rate-limited (429, or 403 with an exhausted quota) and server-error
responses are retried with exponential backoff and jitter.
"""

import logging
import os
import time
from typing import Any

import httpx

from pluginhealth.clients.rate_limiter import RateLimiter
from pluginhealth.consts import GITHUB_API_URL, GITHUB_MAX_PAGES, GITHUB_MAX_RETRIES, GITHUB_TIMEOUT
from pluginhealth.errors import GitHubError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


class Repository:
    """A GitHub repository, backed by the payload of ``GET /repos/{name}``."""

    def __init__(self, client: "GitHubClient", data: dict[str, Any]):
        self._client = client
        self._data = data

    @property
    def full_name(self) -> str:
        return self._data["full_name"]

    @property
    def archived(self) -> bool:
        return bool(self._data.get("archived", False))

    @property
    def open_issues_count(self) -> int:
        """Open issues and pull requests, as counted by GitHub."""
        return int(self._data.get("open_issues_count", 0))

    @property
    def default_branch(self) -> str:
        return self._data.get("default_branch") or "main"

    def get_pull_requests(self, state: str = "open") -> list[dict[str, Any]]:
        """List pull requests in the given state ('open', 'closed' or 'all')."""
        return self._client.get_paginated(
            f"/repos/{self.full_name}/pulls", params={"state": state, "per_page": 100}
        )

    def get_check_runs(self, ref: str) -> list[dict[str, Any]]:
        """List the check runs reported on a commit, branch or tag."""
        pages = self._client.get_paginated(
            f"/repos/{self.full_name}/commits/{ref}/check-runs", params={"per_page": 100}
        )
        return [run for page in pages for run in page.get("check_runs", [])]

    def get_commit_statuses(self, ref: str) -> list[dict[str, Any]]:
        """List the commit statuses reported on a ref, most recent first."""
        return self._client.get_paginated(
            f"/repos/{self.full_name}/commits/{ref}/statuses", params={"per_page": 100}
        )


class GitHubClient:
    """Client for the GitHub REST API.

    The token is read from GITHUB_TOKEN unless given explicitly. Without a
    token, requests are anonymous and heavily rate-limited.
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str = GITHUB_API_URL,
        timeout: float = GITHUB_TIMEOUT,
        max_pages: int = GITHUB_MAX_PAGES,
        transport: httpx.BaseTransport | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        token = token if token is not None else os.getenv("GITHUB_TOKEN")
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "plugin-health-scoring",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            logger.warning("GITHUB_TOKEN not set, GitHub requests are anonymous")

        self.max_pages = max_pages
        self._rate_limiter = rate_limiter or RateLimiter(max_retries=GITHUB_MAX_RETRIES)
        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers,
            transport=transport,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _is_rate_limited(self, response: httpx.Response) -> bool:
        if response.status_code in RETRYABLE_STATUS:
            return True
        return response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0"

    def _request(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET with retries.

        Raises:
            GitHubError: On transport errors, non-retryable HTTP errors, or
                when the retry budget is exhausted.
        """
        limiter = self._rate_limiter.fresh()
        while True:
            try:
                response = self._client.get(url, params=params)
            except httpx.HTTPError as e:
                raise GitHubError(f"GitHub request failed for {url}: {e}") from e

            if self._is_rate_limited(response) and not limiter.exhausted:
                delay = limiter.backoff(response.headers.get("retry-after"))
                logger.warning(
                    f"GitHub answered {response.status_code} for {url}, retrying in {delay:.1f}s"
                )
                time.sleep(delay)
                continue

            if response.is_error:
                raise GitHubError(
                    f"GitHub request failed ({response.status_code}) for {url}",
                    status_code=response.status_code,
                )

            return response

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = self._request(url, params)
        try:
            return response.json()
        except ValueError as e:
            raise GitHubError(f"GitHub response was not valid JSON for {url}") from e

    def get_paginated(self, url: str, params: dict[str, Any] | None = None) -> list[Any]:
        """Fetch a paginated endpoint following Link headers, capped by max_pages.

        List payloads are concatenated; object payloads are returned one per page.
        """
        items: list[Any] = []
        next_url: str | None = url
        page_params = params
        pages = 0
        while next_url and pages < self.max_pages:
            response = self._request(next_url, page_params)
            try:
                payload = response.json()
            except ValueError as e:
                raise GitHubError(f"GitHub response was not valid JSON for {next_url}") from e

            if isinstance(payload, list):
                items.extend(payload)
            else:
                items.append(payload)

            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            page_params = None
            pages += 1
        return items

    def get_repository(self, name: str) -> Repository:
        """Fetch a repository by its full name (owner/repo).

        Raises:
            GitHubError: If the repository does not exist (status_code 404)
                or GitHub could not be reached.
        """
        logger.debug(f"Fetching GitHub repository {name}")
        return Repository(self, self.get_json(f"/repos/{name}"))
