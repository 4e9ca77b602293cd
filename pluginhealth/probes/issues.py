"""Probes counting the open issues of the plugin on its issue trackers.

Each probe only runs against a tracker the update-center lists for the plugin,
as published in the context by the issue-tracker probe.
"""

import logging

from pluginhealth.clients.github import Repository
from pluginhealth.clients.jira import jql_from_view_url
from pluginhealth.errors import JiraError
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.github_api import GitHubRepositoryProbe
from pluginhealth.probes.scm import SCMLinkValidationProbe
from pluginhealth.probes.update_center import IssueTrackerDetectionProbe

logger = logging.getLogger(__name__)

OPEN_ISSUES_REQUIREMENTS = (SCMLinkValidationProbe.key, IssueTrackerDetectionProbe.key)


def _tracker_url(context: ProbeContext, tracker_type: str) -> str | None:
    return (context.issue_trackers or {}).get(tracker_type)


class GitHubOpenIssuesProbe(GitHubRepositoryProbe):
    key = "github-open-issues"
    description = "Returns the total number of open issues in GitHub."
    requirements = OPEN_ISSUES_REQUIREMENTS

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        if not _tracker_url(context, "github"):
            return self.failure(f"GitHub issues not found in Update Center for {plugin.name} plugin.")
        return super().do_apply(plugin, context)

    def check(self, plugin: Plugin, repository: Repository, context: ProbeContext) -> ProbeResult:
        return self.success(f"{repository.open_issues_count} open issues found in GitHub.")


class JiraOpenIssuesProbe(Probe):
    key = "jira-open-issues"
    description = "Returns the total number of open issues in JIRA."
    requirements = OPEN_ISSUES_REQUIREMENTS

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        view_url = _tracker_url(context, "jira")
        if not view_url:
            return self.failure(f"JIRA issues not found in Update Center for {plugin.name} plugin.")

        jql = jql_from_view_url(view_url)
        if jql is None:
            return self.error(f"Cannot find the JIRA query of {plugin.name} plugin in {view_url}.")
        if context.jira is None:
            return self.error("No Jira client configured.")

        try:
            count = context.jira.count_open_issues(jql)
        except JiraError as e:
            logger.warning(f"Jira request failed for {plugin.name}: {e}")
            return self.error(f"Cannot fetch information from JIRA API for plugin {plugin.name}.")
        return self.success(f"{count} open issues found in JIRA.")
