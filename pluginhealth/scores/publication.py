"""Publication category: is the plugin still distributed by the update-center?"""

from pluginhealth.probes.update_center import UpdateCenterPluginPublicationProbe
from pluginhealth.scores.base import ProbeStatusComponent, Scoring, ScoringComponent


class UpdateCenterPublishedPluginScoring(Scoring):
    key = "update-center-plugin-publication"
    weight = 1.0
    description = "Scores a plugin based on its presence or not in the update-center."

    def components(self) -> list[ScoringComponent]:
        return [
            ProbeStatusComponent(
                probe_key=UpdateCenterPluginPublicationProbe.key,
                description="Plugin should be present in the update-center to be distributed.",
                success_reason="The plugin appears in the update-center.",
                failure_reason="The plugin is not part of the update-center.",
                missing_reason="Cannot determine if the plugin is part of the update-center.",
                mandatory=True,
            )
        ]
