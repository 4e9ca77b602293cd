"""Thin wrapper around the ``git`` executable.

Every command runs with a timeout; failures and timeouts both surface as
GitError.
"""

import logging
import subprocess
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from pluginhealth.consts import GIT_CLONE_TIMEOUT, GIT_COMMAND_TIMEOUT
from pluginhealth.errors import GitError

logger = logging.getLogger(__name__)

# Unit separator, cannot appear in commit metadata
_FIELD_SEP = "\x1f"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%cI", "%s"])

# Object id of the empty tree, diffing against it lists every file
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


@dataclass(frozen=True)
class Commit:
    """One commit as reported by ``git log``."""

    sha: str
    author: str
    committed_at: datetime
    subject: str


def _parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value.strip()).astimezone(UTC)


class GitClient:
    """Runs git commands against local clones."""

    def __init__(
        self,
        executable: str = "git",
        clone_timeout: float = GIT_CLONE_TIMEOUT,
        command_timeout: float = GIT_COMMAND_TIMEOUT,
    ):
        self.executable = executable
        self.clone_timeout = clone_timeout
        self.command_timeout = command_timeout

    def _run(self, args: list[str], cwd: Path | None = None, timeout: float | None = None) -> str:
        command = [self.executable, *args]
        timeout = timeout or self.command_timeout
        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise GitError(f"git {args[0]} timed out after {timeout}s") from e
        except FileNotFoundError as e:
            raise GitError(f"git executable not found: {self.executable}") from e

        if completed.returncode != 0:
            raise GitError(f"git {args[0]} failed ({completed.returncode}): {completed.stderr.strip()}")
        return completed.stdout

    def clone(self, url: str, destination: Path) -> Path:
        """Clone a repository into ``destination``.

        Args:
            url: Remote repository URL
            destination: Directory to clone into. Must not exist or be empty.

        Returns:
            The destination path
        """
        logger.info(f"Cloning {url} into {destination}")
        self._run(["clone", "--quiet", "--no-tags", url, str(destination)], timeout=self.clone_timeout)
        return destination

    def last_commit_date(self, repository: Path, path: str | None = None) -> datetime | None:
        """Date of the most recent commit, optionally restricted to a sub-path.

        Returns:
            Commit date in UTC, or None if no commit touches ``path``
        """
        args = ["log", "-1", "--format=%cI"]
        if path:
            args += ["--", path]
        output = self._run(args, cwd=repository).strip()
        if not output:
            return None
        return _parse_date(output)

    def log(
        self,
        repository: Path,
        paths: list[str] | None = None,
        max_count: int | None = None,
    ) -> list[Commit]:
        """Commits reachable from HEAD, most recent first."""
        args = ["log", f"--format={_LOG_FORMAT}"]
        if max_count is not None:
            args.append(f"--max-count={max_count}")
        if paths:
            args += ["--", *paths]

        commits = []
        for line in self._run(args, cwd=repository).splitlines():
            if not line.strip():
                continue
            sha, author, date, subject = line.split(_FIELD_SEP, 3)
            commits.append(Commit(sha=sha, author=author, committed_at=_parse_date(date), subject=subject))
        return commits

    def diff_names(
        self,
        repository: Path,
        from_ref: str,
        to_ref: str = "HEAD",
        paths: list[str] | None = None,
    ) -> list[str]:
        """Paths changed between two refs, optionally restricted to some paths."""
        args = ["diff", "--name-only", from_ref, to_ref]
        if paths:
            args += ["--", *paths]
        output = self._run(args, cwd=repository)
        return [line for line in output.splitlines() if line.strip()]
