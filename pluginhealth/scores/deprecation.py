"""Deprecation category: deprecated plugins score 0."""

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.update_center import DeprecatedPluginProbe
from pluginhealth.scores.base import ProbeStatusComponent, Scoring, ScoringComponent


class NotDeprecatedComponent(ProbeStatusComponent):
    """Links to the deprecation notice when the update-center published one."""

    def __init__(self) -> None:
        super().__init__(
            probe_key=DeprecatedPluginProbe.key,
            description="The plugin must not be marked as deprecated.",
            success_reason="Plugin is not marked as deprecated.",
            failure_reason="Plugin is marked as deprecated.",
            missing_reason="Cannot determine if the plugin is marked as deprecated or not.",
        )

    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        component_result = super().get_score(plugin, results)
        result = results.get(self.probe_key)
        if (
            result is not None
            and result.status == ResultStatus.FAILURE
            and isinstance(result.message, str)
            and result.message.startswith("http")
        ):
            return component_result.model_copy(
                update={"resolutions": [Resolution(text="See the deprecation notice", link=result.message)]}
            )
        return component_result


class DeprecatedPluginScoring(Scoring):
    key = "deprecation"
    weight = 0.8
    description = "Scores plugin based on its deprecation status."

    def components(self) -> list[ScoringComponent]:
        return [NotDeprecatedComponent()]
