"""Probes validating the plugin repository and locating the plugin inside it."""

import logging
import re
from pathlib import Path

from pluginhealth.clients.git import EMPTY_TREE
from pluginhealth.clients.maven import read_pom
from pluginhealth.consts import GITHUB_SCM_PATTERN
from pluginhealth.errors import DescriptorError, GitError, GitHubError
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.update_center import UpdateCenterPluginPublicationProbe

logger = logging.getLogger(__name__)

_SCM_PATTERN = re.compile(GITHUB_SCM_PATTERN)

# Multi-module repositories rarely nest the plugin deeper than this
MAX_MODULE_DEPTH = 3


class SCMLinkValidationProbe(Probe):
    key = "scm"
    description = "Validates with the GitHub API that the plugin SCM link points to an existing repository."
    requires_release = True
    requirements = (UpdateCenterPluginPublicationProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        if not plugin.scm or not plugin.scm.strip():
            logger.warning(f"{plugin.name} has no SCM link")
            return self.error("The plugin SCM link is empty.")

        repository_name = context.repository_name(plugin.scm)
        if repository_name is None:
            logger.debug(f"{plugin.scm} does not match the GitHub plugin repository pattern")
            return self.failure("SCM link doesn't match GitHub plugin repositories.")

        if context.github is None:
            return self.error("No GitHub client configured.")
        try:
            context.github.get_repository(repository_name)
        except GitHubError as e:
            if e.status_code == 404:
                return self.failure("The plugin SCM link is invalid.")
            return self.error(f"Cannot access repository {repository_name}.")
        return self.success("The plugin SCM link is valid.")


def find_plugin_folder(repository: Path, plugin_name: str) -> str | None:
    """Locate the module of a plugin inside a multi-module repository.

    Args:
        repository: Root of the local clone
        plugin_name: Plugin artifactId

    Returns:
        Folder of the plugin module relative to the repository root, or None
        when the plugin is the root module or cannot be found
    """
    candidates = sorted(
        path
        for path in repository.rglob("pom.xml")
        if len(path.relative_to(repository).parts) <= MAX_MODULE_DEPTH + 1
        and not any(part.startswith(".") or part in ("src", "target") for part in path.relative_to(repository).parts)
    )
    for pom in candidates:
        try:
            project = read_pom(pom)
        except DescriptorError as e:
            logger.debug(f"Ignoring unreadable descriptor {pom}: {e}")
            continue
        if project.artifact_id == plugin_name and project.packaging == "hpi":
            folder = pom.parent.relative_to(repository).as_posix()
            return None if folder == "." else folder
    return None


class LastCommitDateProbe(Probe):
    """Clones the plugin repository and registers the date of its last commit.

    Also resolves the plugin folder for multi-module repositories, from the
    SCM link when it points to a sub-folder, from the module descriptors
    otherwise. Both the clone and the commit date are published in the
    context for the source code related probes.
    """

    key = "last-commit-date"
    description = "Registers the last commit date on the plugin repository."
    requirements = (SCMLinkValidationProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        if not plugin.scm:
            return self.error("The plugin SCM link is empty.")
        if context.git is None:
            return self.error("No git client configured.")
        try:
            repository = context.clone_repository(plugin.scm)
        except GitError as e:
            logger.error(f"Could not clone the repository of {plugin.name}: {e}")
            return self.error("Could not access the plugin repository.")

        folder = context.scm_folder_path
        if folder is None:
            match = _SCM_PATTERN.search(plugin.scm)
            folder = match.group("folder") if match and match.group("folder") else None
            if folder is None:
                folder = find_plugin_folder(repository, plugin.name)
            if folder:
                folder = folder.strip("/")
                context.publish_scm_folder_path(folder)

        try:
            commit_date = context.git.last_commit_date(repository, folder)
        except GitError as e:
            logger.error(f"Could not read the history of {plugin.name}: {e}")
            return self.error("Could not access the plugin repository.")
        if commit_date is None:
            return self.error("Last commit cannot be extracted. Please validate sub-folder if any.")

        commit_date = commit_date.replace(microsecond=0)
        context.publish_last_commit_date(commit_date)
        return self.success(commit_date.isoformat())


def production_paths(folder: str | None) -> list[str]:
    """Paths whose changes end up in a release: descriptors and main sources."""
    if not folder:
        return ["pom.xml", "src/main"]
    return ["pom.xml", f"{folder}/pom.xml", f"{folder}/src/main"]


class HasUnreleasedProductionChangesProbe(Probe):
    """Lists the production files changed by commits made after the latest release.

    Changes reverted before HEAD do not count: the files are the difference
    between the last production commit before the release and HEAD.
    """

    key = "unreleased-production-changes"
    description = "Reports production code modified since the latest release of the plugin."
    requirements = (SCMLinkValidationProbe.key, LastCommitDateProbe.key)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        repository = context.scm_repository
        if repository is None:
            return self.error(f"There is no local repository for plugin {plugin.name}.")
        if context.git is None:
            return self.error("No git client configured.")
        if plugin.release_timestamp is None:
            return self.error("The plugin has no release date.")

        paths = production_paths(context.scm_folder_path)
        try:
            commits = context.git.log(repository, paths)
            if not any(c.committed_at > plugin.release_timestamp for c in commits):
                return self.success("All production modifications were released.")
            released = next((c for c in commits if c.committed_at <= plugin.release_timestamp), None)
            from_ref = released.sha if released else EMPTY_TREE
            files = context.git.diff_names(repository, from_ref, "HEAD", paths)
        except GitError as e:
            logger.error(f"Could not read the history of {plugin.name}: {e}")
            return self.error("Could not access the plugin repository.")

        if not files:
            return self.success("All production modifications were released.")
        return self.failure(
            "Unreleased production modifications might exist in the plugin source code at "
            + ", ".join(sorted(files))
        )
