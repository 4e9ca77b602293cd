"""Jira REST API client, counting the open issues of a plugin component."""

import logging
from urllib.parse import parse_qs, urlsplit

import httpx

from pluginhealth.consts import JIRA_TIMEOUT, JIRA_URL
from pluginhealth.errors import JiraError

logger = logging.getLogger(__name__)

SEARCH_PATH = "/rest/api/latest/search"


def jql_from_view_url(view_url: str) -> str | None:
    """Extract the JQL query of an issue list URL such as ``.../issues/?jql=component=15525``."""
    values = parse_qs(urlsplit(view_url).query).get("jql")
    return values[0] if values else None


class JiraClient:
    """Synchronous client for the Jira search API. Requests are anonymous."""

    def __init__(
        self,
        base_url: str = JIRA_URL,
        timeout: float = JIRA_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json", "User-Agent": "plugin-health-scoring"},
            transport=transport,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def count_open_issues(self, jql: str) -> int:
        """Number of open issues matching a JQL query.

        Raises:
            JiraError: On transport errors, HTTP errors, or when Jira reports
                error messages for the query.
        """
        query = f"{jql} AND status=open"
        try:
            response = self._client.get(SEARCH_PATH, params={"jql": query, "maxResults": 0})
        except httpx.HTTPError as e:
            raise JiraError(f"Jira request failed for {query!r}: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise JiraError(f"Jira response was not valid JSON ({response.status_code})") from e

        if not isinstance(payload, dict):
            raise JiraError(f"Unexpected Jira response for {query!r}")
        if payload.get("errorMessages"):
            raise JiraError(f"Jira rejected {query!r}: {'; '.join(payload['errorMessages'])}")
        if response.is_error:
            raise JiraError(f"Jira request failed ({response.status_code}) for {query!r}")

        total = payload.get("total")
        if not isinstance(total, int):
            raise JiraError(f"Jira response has no total for {query!r}")
        logger.debug(f"{total} open Jira issues for {query!r}")
        return total
