"""Probes checking where the plugin documentation and description live."""

import logging

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.scm import LastCommitDateProbe, SCMLinkValidationProbe

logger = logging.getLogger(__name__)


def _normalize(url: str) -> str:
    return url.strip().removesuffix("/").removesuffix(".git").lower()


class DocumentationMigrationProbe(Probe):
    """Reports if the plugin documentation was moved from the wiki to its repository.

    The documentation link of the plugin must live in the plugin repository,
    i.e. start with its SCM link.
    """

    key = "documentation-migration"
    description = "Reports if the plugin documentation was migrated from the Wiki to GitHub."
    requires_release = True
    requirements = (SCMLinkValidationProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        links = context.documentation_links
        if not links:
            return self.error("No link to documentation can be confirmed.")

        link = links.get(plugin.name)
        if link is None:
            return self.failure("Plugin is not listed in documentation migration source.")

        if plugin.scm and _normalize(link).startswith(_normalize(plugin.scm)):
            return self.success("Documentation is located in the plugin repository.")
        logger.debug(f"Documentation of {plugin.name} is at {link}, outside {plugin.scm}")
        return self.failure("Documentation is not located in the plugin repository.")


class PluginDescriptionMigrationProbe(Probe):
    """Reports if the plugin description was written in ``src/main/resources/index.jelly``.

    The plugin archetype generates that file with a TODO placeholder, which
    counts as not migrated.
    """

    key = "description-migration"
    description = "Checks if the plugin description is located in the index.jelly file."
    requires_release = True
    requirements = (LastCommitDateProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        repository = context.scm_repository
        if repository is None:
            return self.error("Cannot access plugin repository.")

        module = repository / context.scm_folder_path if context.scm_folder_path else repository
        resources = module / "src" / "main" / "resources"
        if not resources.is_dir():
            return self.error("Cannot browse plugin source code folder.")

        index = resources / "index.jelly"
        if not index.is_file():
            return self.failure("There is no `index.jelly` file in `src/main/resources`.")

        try:
            content = index.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Could not read {index}: {e}")
            return self.error("Cannot browse plugin source code folder.")

        if "TODO" in content:
            return self.failure("Plugin is using description from the plugin archetype.")
        return self.success("Plugin seems to have a correct description.")
