"""Probes querying the GitHub API about the plugin repository."""

import logging
from abc import abstractmethod
from typing import Any

from pluginhealth.clients.github import Repository
from pluginhealth.errors import GitHubError
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.scm import SCMLinkValidationProbe

logger = logging.getLogger(__name__)

DEPENDENCIES_LABEL = "dependencies"
FAILED_CONCLUSIONS = ("failure", "timed_out", "cancelled", "action_required", "startup_failure")
PASSED_CONCLUSIONS = ("success", "neutral", "skipped")


class GitHubRepositoryProbe(Probe):
    """Base of the probes needing the GitHub repository of the plugin.

    Resolves the repository and turns GitHub errors into ERROR results, so
    subclasses only implement ``check``.
    """

    requirements = (SCMLinkValidationProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        if not plugin.scm:
            return self.error("Plugin SCM is unknown, cannot access the repository.")
        repository_name = context.repository_name(plugin.scm)
        if repository_name is None:
            return self.error(f"Cannot find repository for {plugin.name}.")
        if context.github is None:
            return self.error("No GitHub client configured.")

        try:
            repository = context.github.get_repository(repository_name)
            return self.check(plugin, repository, context)
        except GitHubError as e:
            logger.warning(f"GitHub request failed for {repository_name} during {self.key}: {e}")
            return self.error(f"Cannot access repository {repository_name}.")

    @abstractmethod
    def check(self, plugin: Plugin, repository: Repository, context: ProbeContext) -> ProbeResult:
        """Perform the check on the resolved repository."""


class RepositoryArchivedStatusProbe(GitHubRepositoryProbe):
    key = "repository-archived"
    description = "Detects if the plugin repository is archived."

    def check(self, plugin: Plugin, repository: Repository, context: ProbeContext) -> ProbeResult:
        if repository.archived:
            return self.failure("The plugin repository is archived.")
        return self.success("The plugin repository is not archived.")


class PullRequestProbe(GitHubRepositoryProbe):
    key = "pull-request"
    description = "Counts the open pull requests on the plugin repository."

    def check(self, plugin: Plugin, repository: Repository, context: ProbeContext) -> ProbeResult:
        return self.success(len(repository.get_pull_requests(state="open")))


def _has_label(pull_request: dict[str, Any], name: str) -> bool:
    return any(label.get("name") == name for label in pull_request.get("labels", []))


class DependabotPullRequestProbe(GitHubRepositoryProbe):
    """Counts the open dependency update pull requests.

    The message is the number of open pull requests labelled ``dependencies``.
    """

    key = "dependabot-pull-requests"
    description = "Counts the open pull requests opened by Dependabot."
    requirements = ("dependabot",)

    def check(self, plugin: Plugin, repository: Repository, context: ProbeContext) -> ProbeResult:
        count = sum(
            1 for pr in repository.get_pull_requests(state="open") if _has_label(pr, DEPENDENCIES_LABEL)
        )
        if count > 0:
            return self.failure(count)
        return self.success(0)


class DefaultBranchBuildStatusProbe(GitHubRepositoryProbe):
    key = "default-branch-build-status"
    description = "Detects whether the last build of the default branch passed."

    def check(self, plugin: Plugin, repository: Repository, context: ProbeContext) -> ProbeResult:
        uc_plugin = context.update_center.get_plugin(plugin.name)
        branch = (uc_plugin.default_branch if uc_plugin else None) or repository.default_branch

        check_runs = repository.get_check_runs(branch)
        if check_runs:
            latest = max(check_runs, key=lambda run: run.get("started_at") or "")
            conclusion = latest.get("conclusion")
            if conclusion in FAILED_CONCLUSIONS:
                return self.failure(f"Build failed on default branch {branch}.")
            if conclusion in PASSED_CONCLUSIONS:
                return self.success(f"Build passed on default branch {branch}.")
            return self.error(f"Build still running on default branch {branch}.")

        # Commit statuses are returned most recent first
        statuses = repository.get_commit_statuses(branch)
        if not statuses:
            return self.error(f"No build reported on default branch {branch}.")
        state = statuses[0].get("state")
        if state == "success":
            return self.success(f"Build passed on default branch {branch}.")
        if state in ("failure", "error"):
            return self.failure(f"Build failed on default branch {branch}.")
        return self.error(f"Build still running on default branch {branch}.")
