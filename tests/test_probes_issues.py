"""Tests for the probes counting open issues."""

from unittest.mock import MagicMock

import pytest

from pluginhealth.errors import GitHubError, JiraError
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_update_center import UpdateCenter
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.issues import GitHubOpenIssuesProbe, JiraOpenIssuesProbe

JIRA_VIEW_URL = "https://issues.jenkins.io/issues/?jql=component=15525"
GITHUB_VIEW_URL = "https://github.com/jenkinsci/mailer-plugin/issues"


@pytest.fixture
def tracked_plugin(plugin: Plugin) -> Plugin:
    plugin.add_result(ProbeResult.success("scm", "valid"))
    plugin.add_result(ProbeResult.success("issue-tracker", {"github": GITHUB_VIEW_URL}))
    return plugin


@pytest.fixture
def github() -> MagicMock:
    github = MagicMock()
    github.get_repository.return_value.open_issues_count = 12
    return github


@pytest.fixture
def jira() -> MagicMock:
    jira = MagicMock()
    jira.count_open_issues.return_value = 7
    return jira


def _context(
    update_center: UpdateCenter,
    trackers: dict[str, str] | None,
    github: MagicMock | None = None,
    jira: MagicMock | None = None,
) -> ProbeContext:
    context = ProbeContext("mailer", update_center, github=github, jira=jira)
    if trackers is not None:
        context.publish_issue_trackers(trackers)
    return context


class TestGitHubOpenIssuesProbe:
    """Tests for GitHubOpenIssuesProbe."""

    def test_count(self, tracked_plugin: Plugin, update_center: UpdateCenter, github: MagicMock) -> None:
        context = _context(update_center, {"github": GITHUB_VIEW_URL}, github=github)
        result = GitHubOpenIssuesProbe().apply(tracked_plugin, context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == "12 open issues found in GitHub."
        github.get_repository.assert_called_once_with("jenkinsci/mailer-plugin")

    def test_issues_tracked_elsewhere(
        self, tracked_plugin: Plugin, update_center: UpdateCenter, github: MagicMock
    ) -> None:
        context = _context(update_center, {"jira": JIRA_VIEW_URL}, github=github)
        result = GitHubOpenIssuesProbe().apply(tracked_plugin, context)
        assert result.status == ResultStatus.FAILURE
        assert result.message == "GitHub issues not found in Update Center for mailer plugin."
        github.get_repository.assert_not_called()

    def test_github_error(self, tracked_plugin: Plugin, update_center: UpdateCenter, github: MagicMock) -> None:
        github.get_repository.side_effect = GitHubError("rate limited", status_code=403)
        context = _context(update_center, {"github": GITHUB_VIEW_URL}, github=github)
        assert GitHubOpenIssuesProbe().apply(tracked_plugin, context).status == ResultStatus.ERROR

    def test_requires_issue_tracker(self, plugin: Plugin, update_center: UpdateCenter) -> None:
        plugin.add_result(ProbeResult.success("scm", "valid"))
        result = GitHubOpenIssuesProbe().apply(plugin, _context(update_center, None))
        assert result.message == "requirement issue-tracker not satisfied"


class TestJiraOpenIssuesProbe:
    """Tests for JiraOpenIssuesProbe."""

    def test_count(self, tracked_plugin: Plugin, update_center: UpdateCenter, jira: MagicMock) -> None:
        context = _context(update_center, {"jira": JIRA_VIEW_URL}, jira=jira)
        result = JiraOpenIssuesProbe().apply(tracked_plugin, context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == "7 open issues found in JIRA."
        jira.count_open_issues.assert_called_once_with("component=15525")

    def test_issues_tracked_elsewhere(
        self, tracked_plugin: Plugin, update_center: UpdateCenter, jira: MagicMock
    ) -> None:
        context = _context(update_center, {"github": GITHUB_VIEW_URL}, jira=jira)
        result = JiraOpenIssuesProbe().apply(tracked_plugin, context)
        assert result.status == ResultStatus.FAILURE
        assert result.message == "JIRA issues not found in Update Center for mailer plugin."
        jira.count_open_issues.assert_not_called()

    def test_view_url_without_query(
        self, tracked_plugin: Plugin, update_center: UpdateCenter, jira: MagicMock
    ) -> None:
        context = _context(update_center, {"jira": "https://issues.jenkins.io/browse/JENKINS"}, jira=jira)
        assert JiraOpenIssuesProbe().apply(tracked_plugin, context).status == ResultStatus.ERROR

    def test_jira_error(self, tracked_plugin: Plugin, update_center: UpdateCenter, jira: MagicMock) -> None:
        jira.count_open_issues.side_effect = JiraError("Jira rejected the query")
        context = _context(update_center, {"jira": JIRA_VIEW_URL}, jira=jira)
        result = JiraOpenIssuesProbe().apply(tracked_plugin, context)
        assert result.status == ResultStatus.ERROR
        assert result.message == "Cannot fetch information from JIRA API for plugin mailer."

    def test_no_jira_client(self, tracked_plugin: Plugin, update_center: UpdateCenter) -> None:
        result = JiraOpenIssuesProbe().apply(tracked_plugin, _context(update_center, {"jira": JIRA_VIEW_URL}))
        assert result.message == "No Jira client configured."
