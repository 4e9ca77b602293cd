"""Dependency management category: update bots and their pending pull requests."""

from pluginhealth.consts import DEPENDABOT_LINK
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.github_api import DependabotPullRequestProbe
from pluginhealth.probes.maven import MavenDependenciesProbe
from pluginhealth.probes.repository_files import DEPENDABOT_KEY, RENOVATE_KEY
from pluginhealth.scores.base import Scoring, ScoringComponent


class DependencyUpdateComponent(ScoringComponent):
    """Full score with a bot configured and no dependency pull request left open.

    A plugin without dependencies is not judged: the component then has no
    weight.
    """

    description = "The plugin should keep its dependencies up to date with a bot."
    weight = 1

    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        dependencies = results.get(MavenDependenciesProbe.key)
        if dependencies is not None and dependencies.status == ResultStatus.SUCCESS and not dependencies.message:
            return self.result(100, ["The plugin is not using any dependencies."], weight=0)

        bots = [results.get(DEPENDABOT_KEY), results.get(RENOVATE_KEY)]
        bot = next((r for r in bots if r is not None and r.status == ResultStatus.SUCCESS), None)
        if bot is not None:
            return self._pull_requests(plugin, bot, results.get(DependabotPullRequestProbe.key))

        if any(r is not None and r.status == ResultStatus.FAILURE for r in bots):
            return self.result(
                0,
                ["No dependency update bot is configured."],
                [Resolution(text="See how to automate dependency updates", link=DEPENDABOT_LINK)],
            )
        return self.result(0, ["Could not retrieve details required to score the plugin."])

    def _pull_requests(
        self, plugin: Plugin, bot: ProbeResult, pull_requests: ProbeResult | None
    ) -> ScoringComponentResult:
        if pull_requests is None or pull_requests.status == ResultStatus.ERROR:
            return self.result(
                0,
                [
                    str(bot.message),
                    "Cannot determine if there is any dependency pull request opened on the repository.",
                ],
            )
        if not pull_requests.message:
            return self.result(100, [str(bot.message), "0 open dependency pull request."])
        return self.result(
            50,
            [str(bot.message), f"{pull_requests.message} open dependency pull request."],
            [
                Resolution(
                    text="See the open pull requests of the plugin",
                    link=f"{plugin.scm}/pulls?q=is%3Aopen+is%3Apr+label%3Adependencies",
                )
            ],
        )


class DependencyManagementScoring(Scoring):
    key = "dependency-management"
    weight = 0.2
    description = "We encourage the usage of dependency management tools."

    def components(self) -> list[ScoringComponent]:
        return [DependencyUpdateComponent()]
