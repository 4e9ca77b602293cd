"""Base probe: applicability rules, requirement check and error containment."""

import logging
from abc import ABC, abstractmethod

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeMessage, ProbeResult, ResultStatus
from pluginhealth.probes.context import ProbeContext

logger = logging.getLogger(__name__)


class Probe(ABC):
    """A named, versioned check executed on a plugin.

    Subclasses implement ``do_apply`` and set the traits below, either as class
    attributes or, for probes configured with a strategy, in ``__init__``.

    Attributes:
        key: Unique identifier, also the id of every result produced
        description: Human readable summary of the check
        requires_release: Re-run when the plugin was released since the last result
        is_source_code_related: Re-run when the repository changed since the last result
        version: Bumped when the check logic changes, forcing a re-run
        requirements: Keys of probes which must have succeeded before this one runs
    """

    key: str
    description: str = ""
    requires_release: bool = False
    is_source_code_related: bool = False
    version: int = 1
    requirements: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, version={self.version})"

    def apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        """Run the probe on a plugin, unless the previous result is still current.

        Never raises: an exception escaping the check becomes an ERROR result.

        Args:
            plugin: The plugin to check. Not modified.
            context: Discovery cache of the current pass

        Returns:
            The new result, or a SKIPPED result when the check was not executed
        """
        if not self.is_applicable(plugin, context):
            return ProbeResult.skipped(
                self.key,
                f"{self.key} does not meet the criteria to be executed on {plugin.name}",
                self.version,
            )

        unmet = self.unmet_requirement(plugin)
        if unmet is not None:
            return self.error(f"requirement {unmet} not satisfied")

        try:
            result = self.do_apply(plugin, context)
        except Exception as e:
            logger.warning(f"Probe {self.key} failed on {plugin.name}: {type(e).__name__}: {e}")
            return self.error(f"{type(e).__name__}: {e}")

        if result.id != self.key:
            logger.error(f"Probe {self.key} produced a result for {result.id} on {plugin.name}")
            return self.error(f"probe produced a result for {result.id}")
        return result

    def is_applicable(self, plugin: Plugin, context: ProbeContext) -> bool:
        """Decide whether the check must run, from the previous stored result."""
        previous = plugin.get_result(self.key)
        if previous is None:
            return True
        if previous.status == ResultStatus.ERROR:
            return True
        if previous.schema_version < self.version:
            return True
        if not self.requires_release and not self.is_source_code_related:
            return True
        if (
            self.requires_release
            and plugin.release_timestamp is not None
            and previous.timestamp < plugin.release_timestamp
        ):
            return True
        if self.is_source_code_related:
            last_commit = context.last_commit_date
            # No known commit date: run rather than trust a possibly stale result
            if last_commit is None or previous.timestamp < last_commit:
                return True
        return False

    def unmet_requirement(self, plugin: Plugin) -> str | None:
        """Return the first required probe key without a SUCCESS result, if any."""
        for requirement in self.requirements:
            result = plugin.get_result(requirement)
            if result is None or result.status != ResultStatus.SUCCESS:
                return requirement
        return None

    @abstractmethod
    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        """Perform the check. Only called by ``apply``."""

    def success(self, message: ProbeMessage) -> ProbeResult:
        return ProbeResult.success(self.key, message, self.version)

    def failure(self, message: ProbeMessage) -> ProbeResult:
        return ProbeResult.failure(self.key, message, self.version)

    def error(self, message: ProbeMessage) -> ProbeResult:
        return ProbeResult.error(self.key, message, self.version)
