"""Probes reading the update-center snapshot only."""

import logging

from pluginhealth.consts import LABEL_ADOPT_THIS_PLUGIN, LABEL_DEPRECATED
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext

logger = logging.getLogger(__name__)


class DeprecatedPluginProbe(Probe):
    key = "deprecation"
    description = "Detects if the plugin is deprecated in the update-center."

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        update_center = context.update_center
        deprecation = update_center.deprecations.get(plugin.name)
        if deprecation is not None:
            return self.failure(deprecation.url)

        uc_plugin = update_center.get_plugin(plugin.name)
        if uc_plugin is None:
            return self.error("This plugin is not in the update-center.")
        if LABEL_DEPRECATED in uc_plugin.labels:
            return self.failure("This plugin is marked as deprecated.")
        return self.success("This plugin is NOT deprecated.")


class UpForAdoptionProbe(Probe):
    key = "up-for-adoption"
    description = "Detects if the plugin is declared as up for adoption."

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        uc_plugin = context.update_center.get_plugin(plugin.name)
        if uc_plugin is None:
            logger.info(f"Could not find {plugin.name} in the update-center")
            return self.error("This plugin is not in the update-center.")
        if LABEL_ADOPT_THIS_PLUGIN in uc_plugin.labels:
            return self.failure("This plugin is up for adoption.")
        return self.success("This plugin is not up for adoption.")


class UpdateCenterPluginPublicationProbe(Probe):
    key = "update-center-plugin-publication"
    description = "Detects if the plugin is still actively published by the update-center."

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        if context.update_center.get_plugin(plugin.name) is None:
            return self.failure("This plugin's publication has been stopped by the update-center.")
        return self.success("This plugin is still actively published by the update-center.")


class InstallationStatProbe(Probe):
    key = "stat"
    description = "Registers the latest installation count of the plugin."
    requirements = (UpdateCenterPluginPublicationProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        return self.success(context.update_center.plugins[plugin.name].popularity)


class JenkinsCoreProbe(Probe):
    key = "jenkins-version"
    description = "Registers the minimum Jenkins core version required by the plugin."
    requires_release = True
    requirements = (UpdateCenterPluginPublicationProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        required_core = context.update_center.plugins[plugin.name].required_core
        if not required_core:
            return self.error(f"No required core version published for {plugin.name}.")
        return self.success(required_core)


class KnownSecurityVulnerabilityProbe(Probe):
    """Lists the security warnings affecting the latest release.

    The failure message is a list of ``{"id", "url"}`` mappings, one per
    active warning, so the scoring can link to the advisories.
    """

    key = "security"
    description = "Detects security warnings affecting the latest release of the plugin."
    requirements = (UpdateCenterPluginPublicationProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        version = plugin.version or context.update_center.plugins[plugin.name].version
        warnings = context.update_center.active_warnings(plugin.name, version)
        if not warnings:
            return self.success("Plugin is OK")
        return self.failure([{"id": w.id, "url": w.url} for w in warnings])


class IssueTrackerDetectionProbe(Probe):
    key = "issue-tracker"
    description = "Detects the issue trackers configured for the plugin."
    requirements = (UpdateCenterPluginPublicationProbe.key,)

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        trackers = {
            tracker.type: tracker.view_url
            for tracker in context.update_center.plugins[plugin.name].issue_trackers
            if tracker.view_url
        }
        if not trackers:
            return self.failure("No issue tracker is configured for this plugin.")
        context.publish_issue_trackers(trackers)
        return self.success(trackers)
