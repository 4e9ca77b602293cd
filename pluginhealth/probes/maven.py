"""Probes reading the Maven build descriptor of the plugin."""

import logging
from abc import abstractmethod

from pluginhealth.clients.maven import MavenProject, read_pom
from pluginhealth.errors import DescriptorError
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.scm import LastCommitDateProbe

logger = logging.getLogger(__name__)

# Scopes not packaged with the plugin by the build
NON_BUNDLED_SCOPES = ("provided", "runtime")


class MavenDescriptorProbe(Probe):
    """Base of the probes reading the ``pom.xml`` of the plugin module.

    Locates and parses the descriptor, so subclasses only implement ``check``.
    """

    is_source_code_related = True
    requirements = (LastCommitDateProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        repository = context.scm_repository
        if repository is None:
            return self.error(f"There is no local repository for plugin {plugin.name}.")

        module = repository / context.scm_folder_path if context.scm_folder_path else repository
        pom = module / "pom.xml"
        if not pom.is_file():
            return self.error("There is no descriptor file for the plugin.")

        try:
            project = read_pom(pom)
        except DescriptorError as e:
            logger.warning(f"Could not parse descriptor of {plugin.name}: {e}")
            return self.error("Could not parse the descriptor file of the plugin.")
        return self.check(project)

    @abstractmethod
    def check(self, project: MavenProject) -> ProbeResult:
        """Inspect the parsed descriptor."""


class ParentPomVersionProbe(MavenDescriptorProbe):
    key = "parent-pom"
    description = "Registers the parent POM used by the plugin."

    def check(self, project: MavenProject) -> ProbeResult:
        if project.parent is None:
            return self.failure("No parent POM declared in the descriptor file.")
        return self.success(project.parent.coordinates)


class MavenDependenciesProbe(MavenDescriptorProbe):
    """Lists the dependencies bundled with the plugin.

    Entries read ``groupId:artifactId:version:optional``. Provided and runtime
    dependencies are left out.
    """

    key = "maven-dependencies"
    description = "List of dependencies used by the plugin."
    version = 2

    def check(self, project: MavenProject) -> ProbeResult:
        return self.success(
            [
                f"{dep.coordinates}:{str(dep.optional).lower()}"
                for dep in project.dependencies
                if dep.scope not in NON_BUNDLED_SCOPES
            ]
        )


class MavenDependencyManagementProbe(MavenDescriptorProbe):
    key = "maven-dependency-management"
    description = "List of dependencies whose versions are managed by the plugin descriptor."

    def check(self, project: MavenProject) -> ProbeResult:
        return self.success([dep.coordinates for dep in project.dependency_management])
