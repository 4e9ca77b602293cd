"""Scoring registry for computing every category score of a plugin."""

import logging
from datetime import datetime

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_score import Score
from pluginhealth.scores.adoption import AdoptionScoring
from pluginhealth.scores.base import Scoring
from pluginhealth.scores.composite import build_score
from pluginhealth.scores.dependency_management import DependencyManagementScoring
from pluginhealth.scores.deprecation import DeprecatedPluginScoring
from pluginhealth.scores.documentation import DocumentationScoring
from pluginhealth.scores.publication import UpdateCenterPublishedPluginScoring
from pluginhealth.scores.repository_configuration import RepositoryConfigurationScoring
from pluginhealth.scores.security import SecurityWarningScoring

logger = logging.getLogger(__name__)


def default_scorings() -> list[Scoring]:
    return [
        DeprecatedPluginScoring(),
        AdoptionScoring(),
        UpdateCenterPublishedPluginScoring(),
        SecurityWarningScoring(),
        DocumentationScoring(),
        RepositoryConfigurationScoring(),
        DependencyManagementScoring(),
    ]


class ScoringRegistry:
    """Runs every registered scoring on plugins and combines the category scores.

    Handles:
    - Running each scoring, in registration order
    - Combining category scores into the overall score
    - Reporting the version of every scoring for auditing
    """

    def __init__(self, scorings: list[Scoring] | None = None):
        """Initialize registry.

        Args:
            scorings: Scorings to run. Defaults to the built-in scorings.

        Raises:
            ValueError: If two scorings share a key or a weight is outside 0-1
        """
        self.scorings = scorings if scorings is not None else default_scorings()

        keys = [scoring.key for scoring in self.scorings]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValueError(f"Duplicate scoring keys: {duplicates}")
        for scoring in self.scorings:
            if not 0 <= scoring.weight <= 1:
                raise ValueError(f"Scoring {scoring.key} weight must be between 0 and 1, got {scoring.weight}")

    def versions(self) -> dict[str, int]:
        return {scoring.key: scoring.version for scoring in self.scorings}

    def score_plugin(self, plugin: Plugin, computed_at: datetime | None = None) -> Score:
        """Compute the overall score of a plugin from its probe results.

        Args:
            plugin: The plugin to score. Not modified.
            computed_at: Timestamp of the score (defaults to now)

        Returns:
            Score with one ScoreResult per scoring
        """
        results = [scoring.apply(plugin) for scoring in self.scorings]
        score = build_score(plugin.name, results, computed_at)
        logger.debug(f"{plugin.name}: {score.value}")
        return score

    def score_batch(self, plugins: list[Plugin], computed_at: datetime | None = None) -> dict[str, Score]:
        """Score several plugins. Returns scores keyed by plugin name."""
        return {plugin.name: self.score_plugin(plugin, computed_at) for plugin in plugins}
