"""Repository configuration category: how the plugin repository is set up for CI and maintenance."""

from pluginhealth.consts import CD_LINK, CONTRIBUTING_GUIDE_LINK, DEPENDABOT_LINK, JENKINSFILE_LINK
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.github_api import DependabotPullRequestProbe
from pluginhealth.probes.repository_files import (
    CONTRIBUTING_GUIDELINES_KEY,
    DEPENDABOT_KEY,
    JENKINSFILE_KEY,
    RENOVATE_KEY,
)
from pluginhealth.probes.workflows import CONTINUOUS_DELIVERY_KEY
from pluginhealth.scores.base import ProbeStatusComponent, Scoring, ScoringComponent


def _succeeded(results: dict[str, ProbeResult], key: str) -> bool:
    result = results.get(key)
    return result is not None and result.status == ResultStatus.SUCCESS


class DependencyBotComponent(ScoringComponent):
    """Credits a dependency update bot, unless its pull requests are left open."""

    description = "The plugin should use a dependency update bot and merge its pull requests."
    weight = 15

    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        if not (_succeeded(results, DEPENDABOT_KEY) or _succeeded(results, RENOVATE_KEY)):
            return self.result(
                0,
                ["No dependency update bot is configured."],
                [Resolution(text="See how to automate dependency updates", link=DEPENDABOT_LINK)],
            )

        open_prs = results.get(DependabotPullRequestProbe.key)
        if open_prs is not None and open_prs.status == ResultStatus.FAILURE:
            return self.result(0, [f"{open_prs.message} open dependency update pull requests."])
        return self.result(100, ["A dependency update bot is configured."])


class RepositoryConfigurationScoring(Scoring):
    key = "repository-configuration"
    weight = 0.5
    description = (
        "Scores plugin based on Jenkinsfile presence, contributing guidelines presence, "
        "dependency update bot and JEP-229 configuration."
    )

    def components(self) -> list[ScoringComponent]:
        return [
            ProbeStatusComponent(
                probe_key=JENKINSFILE_KEY,
                description="The plugin should be built on ci.jenkins.io.",
                success_reason="Jenkinsfile found.",
                failure_reason="No Jenkinsfile found.",
                missing_reason="Cannot determine if the plugin has a Jenkinsfile.",
                weight=65,
                resolution=Resolution(text="See how to add a Jenkinsfile", link=JENKINSFILE_LINK),
            ),
            ProbeStatusComponent(
                probe_key=CONTRIBUTING_GUIDELINES_KEY,
                description="The plugin should have contributing guidelines.",
                success_reason="Contributing guidelines found.",
                failure_reason="No contributing guidelines found.",
                missing_reason="Cannot determine if the plugin has contributing guidelines.",
                weight=15,
                resolution=Resolution(text="See how to add a contributing guide", link=CONTRIBUTING_GUIDE_LINK),
            ),
            DependencyBotComponent(),
            ProbeStatusComponent(
                probe_key=CONTINUOUS_DELIVERY_KEY,
                description="The plugin should be released with continuous delivery.",
                success_reason="JEP-229 continuous delivery is configured.",
                failure_reason="JEP-229 continuous delivery is not configured.",
                missing_reason="Cannot determine if JEP-229 continuous delivery is configured.",
                weight=5,
                resolution=Resolution(text="See how to enable continuous delivery", link=CD_LINK),
            ),
        ]
