"""Documentation category: contributing guide, documentation and description location, changelog tooling."""

from pluginhealth.consts import (
    CONTRIBUTING_GUIDE_LINK,
    DESCRIPTION_MIGRATION_LINK,
    DOCUMENTATION_MIGRATION_LINK,
    RELEASE_DRAFTER_LINK,
)
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.documentation import DocumentationMigrationProbe, PluginDescriptionMigrationProbe
from pluginhealth.probes.repository_files import CONTRIBUTING_GUIDELINES_KEY, RELEASE_DRAFTER_KEY
from pluginhealth.probes.workflows import CONTINUOUS_DELIVERY_KEY
from pluginhealth.scores.base import ProbeStatusComponent, Scoring, ScoringComponent


class ReleaseDrafterComponent(ScoringComponent):
    """Advisory only: weight 0, reported without moving the category value."""

    description = "Recommend to setup Release Drafter on the plugin repository."
    weight = 0

    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        cd = results.get(CONTINUOUS_DELIVERY_KEY)
        if cd is not None and cd.status == ResultStatus.SUCCESS:
            return self.result(100, ["Plugin using Release Drafter because it has CD configured."])
        drafter = results.get(RELEASE_DRAFTER_KEY)
        if drafter is not None and drafter.status == ResultStatus.SUCCESS:
            return self.result(100, ["Plugin is using Release Drafter."])
        return self.result(
            0,
            ["Plugin is not using Release Drafter to manage its changelog."],
            [Resolution(text="Plugin could benefit from using Release Drafter.", link=RELEASE_DRAFTER_LINK)],
        )


class DescriptionMigrationComponent(ScoringComponent):
    description = "Plugin description should be located in the index.jelly file."
    weight = 4

    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        result = results.get(PluginDescriptionMigrationProbe.key)
        if result is None or result.status == ResultStatus.ERROR:
            return self.result(0, ["Cannot determine if the plugin description was correctly migrated."])
        if result.status == ResultStatus.SUCCESS:
            return self.result(100, [str(result.message)])
        return self.result(
            0,
            [str(result.message)],
            [
                Resolution(
                    text="Please see how to migrate the plugin description for the plugin.",
                    link=DESCRIPTION_MIGRATION_LINK,
                )
            ],
        )


class DocumentationScoring(Scoring):
    key = "documentation"
    weight = 0.5
    description = "Validates that the plugin has a specific contributing guide and a documentation."
    version = 3

    def components(self) -> list[ScoringComponent]:
        return [
            ProbeStatusComponent(
                probe_key=CONTRIBUTING_GUIDELINES_KEY,
                description="The plugin should have a specific contributing guide.",
                success_reason="Plugin seems to have a dedicated contributing guide.",
                failure_reason="The plugin relies on the global contributing guide.",
                missing_reason="Cannot determine if the plugin has contributing guide.",
                weight=2,
                resolution=Resolution(
                    text="See why and how to add a contributing guide", link=CONTRIBUTING_GUIDE_LINK
                ),
            ),
            ProbeStatusComponent(
                probe_key=DocumentationMigrationProbe.key,
                description="Plugin documentation should be migrated from the wiki.",
                success_reason="Documentation is in plugin repository.",
                failure_reason="Documentation should be migrated in plugin repository.",
                missing_reason="Cannot confirm or not the documentation migration.",
                weight=4,
                resolution=Resolution.from_link(DOCUMENTATION_MIGRATION_LINK),
            ),
            ReleaseDrafterComponent(),
            DescriptionMigrationComponent(),
        ]
