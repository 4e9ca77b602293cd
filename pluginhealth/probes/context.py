"""Per-plugin discovery cache shared by the probes of one pass."""

import logging
import re
import shutil
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any

from pluginhealth.clients.git import GitClient
from pluginhealth.clients.github import GitHubClient
from pluginhealth.clients.jira import JiraClient
from pluginhealth.consts import GITHUB_SCM_PATTERN
from pluginhealth.errors import ContextConflictError, GitError
from pluginhealth.models.model_update_center import UpdateCenter

logger = logging.getLogger(__name__)

_SCM_PATTERN = re.compile(GITHUB_SCM_PATTERN)


class ProbeContext:
    """Values discovered by one probe and read by later probes of the same pass.

    Discovered values start as None and can be published once. Publishing the
    same value again is a no-op; publishing a different value raises
    ContextConflictError. The temporary clone directory is removed when the
    context is closed, whether or not a probe failed:

        with ProbeContext("git", update_center, git=GitClient()) as context:
            engine.run_on(plugin, context)
    """

    def __init__(
        self,
        plugin_name: str,
        update_center: UpdateCenter,
        github: GitHubClient | None = None,
        git: GitClient | None = None,
        jira: JiraClient | None = None,
        documentation_links: dict[str, str] | None = None,
        work_dir: Path | None = None,
    ):
        """Initialize ProbeContext.

        Args:
            plugin_name: Name of the plugin being probed
            update_center: Update-center snapshot of the pass
            github: GitHub API client, if available
            git: git client used to clone the plugin repository
            jira: Jira client, if available
            documentation_links: Plugin name to documentation URL table
            work_dir: Parent directory of the temporary clone. Defaults to the
                system temporary directory.
        """
        self._plugin_name = plugin_name
        self._update_center = update_center
        self._github = github
        self._git = git
        self._jira = jira
        self._work_dir = work_dir
        self._lock = threading.Lock()
        self._temp_dir: Path | None = None
        self._closed = False

        self._scm_repository: Path | None = None
        self._scm_folder_path: str | None = None
        self._last_commit_date: datetime | None = None
        self._documentation_links: dict[str, str] | None = (
            dict(documentation_links) if documentation_links is not None else None
        )
        self._issue_trackers: dict[str, str] | None = None

    # === READ-ONLY COLLABORATORS ===

    @property
    def plugin_name(self) -> str:
        return self._plugin_name

    @property
    def update_center(self) -> UpdateCenter:
        return self._update_center

    @property
    def github(self) -> GitHubClient | None:
        return self._github

    @property
    def git(self) -> GitClient | None:
        return self._git

    @property
    def jira(self) -> JiraClient | None:
        return self._jira

    # === PUBLISH-ONCE VALUES ===

    @property
    def scm_repository(self) -> Path | None:
        """Local clone of the plugin repository."""
        return self._scm_repository

    @property
    def scm_folder_path(self) -> str | None:
        """Path of the plugin inside its repository, for multi-module repositories."""
        return self._scm_folder_path

    @property
    def last_commit_date(self) -> datetime | None:
        return self._last_commit_date

    @property
    def documentation_links(self) -> dict[str, str] | None:
        return self._documentation_links

    @property
    def issue_trackers(self) -> dict[str, str] | None:
        """Issue tracker type to view URL."""
        return self._issue_trackers

    def _publish(self, attribute: str, value: Any) -> None:
        with self._lock:
            current = getattr(self, attribute)
            if current is None:
                setattr(self, attribute, value)
            elif current != value:
                raise ContextConflictError(
                    f"{attribute.lstrip('_')} already published for {self._plugin_name}: "
                    f"{current!r} != {value!r}"
                )

    def publish_scm_repository(self, path: Path) -> None:
        self._publish("_scm_repository", Path(path))

    def publish_scm_folder_path(self, folder: str) -> None:
        self._publish("_scm_folder_path", folder)

    def publish_last_commit_date(self, date: datetime) -> None:
        self._publish("_last_commit_date", date)

    def publish_documentation_links(self, links: dict[str, str]) -> None:
        self._publish("_documentation_links", dict(links))

    def publish_issue_trackers(self, trackers: dict[str, str]) -> None:
        self._publish("_issue_trackers", dict(trackers))

    # === REPOSITORY HELPERS ===

    @staticmethod
    def repository_name(scm: str | None) -> str | None:
        """Extract the 'jenkinsci/<repo>' name from a GitHub URL.

        Returns:
            Repository full name, or None if the URL is not a jenkinsci GitHub URL
        """
        if not scm:
            return None
        match = _SCM_PATTERN.search(scm)
        if not match:
            return None
        return match.group("repo").removesuffix(".git")

    def clone_repository(self, scm: str) -> Path:
        """Clone the plugin repository once and publish its path.

        Args:
            scm: Repository URL. Tree/folder suffixes are stripped before cloning.

        Returns:
            Path of the local clone

        Raises:
            GitError: If no git client is configured or the clone failed
        """
        if self._scm_repository is not None:
            return self._scm_repository
        if self._git is None:
            raise GitError("No git client configured")

        match = _SCM_PATTERN.search(scm)
        url = f"https://{match.group('server')}/{match.group('repo')}" if match else scm

        with self._lock:
            if self._closed:
                raise GitError(f"Context of {self._plugin_name} is closed, not cloning {url}")
            if self._temp_dir is None:
                if self._work_dir is not None:
                    self._work_dir.mkdir(parents=True, exist_ok=True)
                self._temp_dir = Path(tempfile.mkdtemp(prefix=f"{self._plugin_name}-", dir=self._work_dir))
            temp_dir = self._temp_dir
        destination = temp_dir / "repository"
        if destination.exists():
            shutil.rmtree(destination)

        self._git.clone(url, destination)

        # A clone outliving its pass (probe timed out) must not leak on disk
        with self._lock:
            closed = self._closed
        if closed:
            shutil.rmtree(temp_dir, ignore_errors=True)
            logger.warning(f"Discarded clone of {url} finished after the pass of {self._plugin_name} ended")
            raise GitError(f"Context of {self._plugin_name} closed while cloning {url}")

        self.publish_scm_repository(destination)
        return destination

    # === CLEANUP ===

    @property
    def closed(self) -> bool:
        """True once the pass ended. No clone can be made afterwards."""
        return self._closed

    def cleanup(self) -> None:
        """Remove the temporary clone directory and refuse further clones.

        Safe to call several times.
        """
        with self._lock:
            self._closed = True
            temp_dir, self._temp_dir = self._temp_dir, None
        if temp_dir is None:
            return
        try:
            if temp_dir.exists():
                shutil.rmtree(temp_dir)
                logger.debug(f"Cleaned up clone directory: {temp_dir}")
        except OSError as e:
            logger.warning(f"Failed to cleanup clone directory {temp_dir}: {e}")

    def __enter__(self) -> "ProbeContext":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.cleanup()
