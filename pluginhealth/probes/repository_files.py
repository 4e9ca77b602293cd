"""Probes detecting files in the cloned plugin repository.

One generic probe class is configured with a matcher strategy instead of one
class per file:

    RepositoryFileProbe(
        key="jenkinsfile",
        description="...",
        matcher=FileMatcher(names=("Jenkinsfile",)),
        found_message="Jenkinsfile found",
        missing_message="No Jenkinsfile found",
    )
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.scm import LastCommitDateProbe

logger = logging.getLogger(__name__)

JENKINSFILE_KEY = "jenkinsfile"
CONTRIBUTING_GUIDELINES_KEY = "contributing-guidelines"
CODE_OWNERSHIP_KEY = "code-ownership"
DEPENDABOT_KEY = "dependabot"
RENOVATE_KEY = "renovate"
RELEASE_DRAFTER_KEY = "release-drafter"


class Matcher(Protocol):
    def find(self, repository: Path) -> Path | None:
        """Return the first matching file, or None."""
        ...


def _walk(directory: Path, max_depth: int) -> Iterator[Path]:
    """Yield regular files up to ``max_depth`` levels deep, skipping .git."""
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.warning(f"Could not browse {directory}: {e}")
        return
    for entry in entries:
        if entry.is_file():
            yield entry
        elif entry.is_dir() and max_depth > 1 and entry.name != ".git":
            yield from _walk(entry, max_depth - 1)


@dataclass(frozen=True)
class FileMatcher:
    """Matches files by name, anywhere up to ``max_depth`` levels deep.

    A depth of 1 only looks at the repository root.
    """

    names: tuple[str, ...]
    max_depth: int = 1
    case_sensitive: bool = True

    def _matches(self, name: str) -> bool:
        if self.case_sensitive:
            return name in self.names
        return name.lower() in {n.lower() for n in self.names}

    def find(self, repository: Path) -> Path | None:
        return next((f for f in _walk(repository, self.max_depth) if self._matches(f.name)), None)


@dataclass(frozen=True)
class BotMatcher:
    """Matches the configuration file of a dependency update bot at known locations."""

    bot_name: str
    paths: tuple[str, ...]

    def find(self, repository: Path) -> Path | None:
        return next((repository / p for p in self.paths if (repository / p).is_file()), None)


class RepositoryFileProbe(Probe):
    """Reports whether the repository contains a file found by its matcher."""

    is_source_code_related = True
    requirements = (LastCommitDateProbe.key,)

    def __init__(
        self,
        key: str,
        description: str,
        matcher: Matcher,
        found_message: str,
        missing_message: str,
        version: int = 1,
    ):
        self.key = key
        self.description = description
        self.matcher = matcher
        self.found_message = found_message
        self.missing_message = missing_message
        self.version = version

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        repository = context.scm_repository
        if repository is None:
            return self.error(f"There is no local repository for plugin {plugin.name}.")

        found = self.matcher.find(repository)
        if found is None:
            return self.failure(self.missing_message)
        logger.debug(f"{self.key}: found {found.relative_to(repository)} for {plugin.name}")
        return self.success(self.found_message)


class BotConfigurationProbe(RepositoryFileProbe):
    """Reports whether a dependency update bot is configured."""

    def __init__(self, key: str, matcher: BotMatcher, version: int = 1):
        super().__init__(
            key=key,
            description=f"Checks if {matcher.bot_name} is configured on the plugin repository.",
            matcher=matcher,
            found_message=f"{matcher.bot_name} is configured.",
            missing_message=f"No configuration file for {matcher.bot_name}.",
            version=version,
        )


def jenkinsfile_probe() -> RepositoryFileProbe:
    return RepositoryFileProbe(
        key=JENKINSFILE_KEY,
        description="Validates the existence of a Jenkinsfile configuring the plugin CI on ci.jenkins.io.",
        matcher=FileMatcher(names=("Jenkinsfile",)),
        found_message="Jenkinsfile found.",
        missing_message="No Jenkinsfile found.",
    )


def contributing_guidelines_probe() -> RepositoryFileProbe:
    return RepositoryFileProbe(
        key=CONTRIBUTING_GUIDELINES_KEY,
        description="Validates the existence of a CONTRIBUTING.md or CONTRIBUTING.adoc file.",
        matcher=FileMatcher(names=("CONTRIBUTING.md", "CONTRIBUTING.adoc"), max_depth=2, case_sensitive=False),
        found_message="Contributing guidelines found.",
        missing_message="No contributing guidelines found.",
    )


def code_ownership_probe() -> RepositoryFileProbe:
    return RepositoryFileProbe(
        key=CODE_OWNERSHIP_KEY,
        description="Detects if the repository declares its code owners.",
        matcher=FileMatcher(names=("CODEOWNERS",), max_depth=2),
        found_message="CODEOWNERS file found.",
        missing_message="No CODEOWNERS file found in plugin repository.",
    )


def dependabot_probe() -> BotConfigurationProbe:
    return BotConfigurationProbe(
        key=DEPENDABOT_KEY,
        matcher=BotMatcher(
            bot_name="Dependabot",
            paths=(".github/dependabot.yml", ".github/dependabot.yaml"),
        ),
    )


def renovate_probe() -> BotConfigurationProbe:
    return BotConfigurationProbe(
        key=RENOVATE_KEY,
        matcher=BotMatcher(
            bot_name="Renovate",
            paths=(
                "renovate.json",
                "renovate.json5",
                ".renovaterc",
                ".renovaterc.json",
                ".github/renovate.json",
                ".github/renovate.json5",
            ),
        ),
        version=2,
    )


def release_drafter_probe() -> RepositoryFileProbe:
    return RepositoryFileProbe(
        key=RELEASE_DRAFTER_KEY,
        description="Checks if Release Drafter manages the changelog of the plugin.",
        matcher=BotMatcher(
            bot_name="Release Drafter",
            paths=(".github/release-drafter.yml", ".github/release-drafter.yaml"),
        ),
        found_message="Release Drafter is configured.",
        missing_message="Release Drafter is not configured.",
    )
