"""Scoring building blocks: weighted components reduced into a category score."""

import logging
from abc import ABC, abstractmethod

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_score import Resolution, ScoreResult, ScoringComponentResult
from pluginhealth.scores.composite import weighted_value

logger = logging.getLogger(__name__)

# Applied when a mandatory probe result is missing: drags the category down
MISSING_INPUT_SCORE = -100
MISSING_INPUT_WEIGHT = 100


class ScoringComponent(ABC):
    """A weighted judgment over the probe results of a plugin.

    Components are pure: they only read the plugin and its results.
    """

    description: str = ""
    weight: float = 1

    @abstractmethod
    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        """Judge the plugin.

        Args:
            plugin: The plugin being scored
            results: Probe results of the plugin, keyed by probe key

        Returns:
            Score, weight, reasons and resolutions of this component
        """

    def result(
        self,
        score: float,
        reasons: list[str],
        resolutions: list[Resolution] | None = None,
        weight: float | None = None,
    ) -> ScoringComponentResult:
        return ScoringComponentResult(
            score=score,
            weight=self.weight if weight is None else weight,
            reasons=reasons,
            resolutions=resolutions or [],
        )


class ProbeStatusComponent(ScoringComponent):
    """Scores 100 when a probe succeeded and 0 when it failed.

    A missing or ERROR result scores 0 at the component weight, or the
    missing input penalty when the probe result is mandatory.
    """

    def __init__(
        self,
        probe_key: str,
        description: str,
        success_reason: str,
        failure_reason: str,
        missing_reason: str,
        weight: float = 1,
        resolution: Resolution | None = None,
        mandatory: bool = False,
    ):
        self.probe_key = probe_key
        self.description = description
        self.success_reason = success_reason
        self.failure_reason = failure_reason
        self.missing_reason = missing_reason
        self.weight = weight
        self.resolution = resolution
        self.mandatory = mandatory

    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        result = results.get(self.probe_key)
        if result is None or result.status == ResultStatus.ERROR:
            if self.mandatory:
                return self.result(MISSING_INPUT_SCORE, [self.missing_reason], weight=MISSING_INPUT_WEIGHT)
            return self.result(0, [self.missing_reason])
        if result.status == ResultStatus.SUCCESS:
            return self.result(100, [self.success_reason])
        resolutions = [self.resolution] if self.resolution else []
        return self.result(0, [self.failure_reason], resolutions)


class Scoring(ABC):
    """A named, versioned collection of components reduced into a category score.

    Attributes:
        key: Unique identifier of the category
        weight: Coefficient of the category in the overall score, between 0 and 1
        description: Human readable summary
        version: Bumped when the scoring logic changes
    """

    key: str
    weight: float = 1.0
    description: str = ""
    version: int = 1

    @abstractmethod
    def components(self) -> list[ScoringComponent]:
        """Components of this scoring, in reporting order."""

    def apply(self, plugin: Plugin) -> ScoreResult:
        """Score a plugin.

        Never raises because of a component: a component raising an exception
        counts as a score of 0 at its full weight, with a reason naming the
        exception, and the other components still contribute.

        Args:
            plugin: The plugin to score. Not modified.

        Returns:
            ScoreResult of this category
        """
        component_results = []
        for component in self.components():
            try:
                component_results.append(component.get_score(plugin, plugin.details))
            except Exception as e:
                logger.warning(
                    f"Scoring component of {self.key} failed on {plugin.name}: {type(e).__name__}: {e}"
                )
                component_results.append(
                    ScoringComponentResult(
                        score=0,
                        weight=component.weight,
                        reasons=[f"{component.description}: could not be evaluated ({type(e).__name__})."],
                    )
                )

        return ScoreResult(
            key=self.key,
            value=weighted_value((r.score, r.weight) for r in component_results),
            weight=self.weight,
            component_results=component_results,
            version=self.version,
        )
