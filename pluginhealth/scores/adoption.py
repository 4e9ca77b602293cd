"""Adoption scoring: is the plugin looked after?

Besides the up-for-adoption label, looks at the time between the last commit
and the last release. Each period is its own component and only the one
matching the actual delay scores:

    delay <= 6 months   -> 100
    delay <= 1 year     -> 75
    delay <= 2 years    -> 50
    delay <= 4 years    -> 25
"""

from datetime import datetime

from pluginhealth.models.common import _ensure_utc
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_score import ScoringComponentResult
from pluginhealth.probes.scm import LastCommitDateProbe
from pluginhealth.probes.update_center import UpForAdoptionProbe
from pluginhealth.scores.base import (
    MISSING_INPUT_SCORE,
    MISSING_INPUT_WEIGHT,
    ProbeStatusComponent,
    Scoring,
    ScoringComponent,
)

COMMIT_PERIODS = [
    # (min days exclusive, max days inclusive, score, label)
    (None, 6 * 30, 100, "6 months"),
    (6 * 30, 365, 75, "year"),
    (365, 2 * 365, 50, "2 years"),
    (2 * 365, 4 * 365, 25, "4 years"),
]


class CommitRecencyComponent(ScoringComponent):
    """Scores when the last commit happened within a period before the last release."""

    weight = 1

    def __init__(self, min_days: int | None, max_days: int, score: float, label: str):
        self.min_days = min_days
        self.max_days = max_days
        self.score = score
        self.label = label
        self.description = f"The plugin must have a commit in the last {label}."

    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        result = results.get(LastCommitDateProbe.key)
        if result is None or result.status != ResultStatus.SUCCESS:
            return self.result(
                MISSING_INPUT_SCORE, ["Cannot determine the last commit date."], weight=MISSING_INPUT_WEIGHT
            )
        if plugin.release_timestamp is None:
            return self.result(0, ["Cannot determine the last release date."])

        commit_date = _ensure_utc(datetime.fromisoformat(str(result.message)))
        delay = (plugin.release_timestamp - commit_date).days
        if delay <= self.max_days and (self.min_days is None or delay > self.min_days):
            return self.result(self.score, [f"At least one commit happened in the last {self.label}."])
        return self.result(0, [f"No commit in the last {self.label}."])


class AdoptionScoring(Scoring):
    key = "adoption"
    weight = 0.8
    description = "Scores plugin based on its adoption status and the time between the last commit and the last release."

    def components(self) -> list[ScoringComponent]:
        return [
            ProbeStatusComponent(
                probe_key=UpForAdoptionProbe.key,
                description="The plugin must not be marked as up for adoption.",
                success_reason="The plugin is not marked as up for adoption.",
                failure_reason="The plugin is marked as up for adoption.",
                missing_reason="Cannot determine if the plugin is up for adoption.",
                weight=10,
                mandatory=True,
            ),
            *[CommitRecencyComponent(*period) for period in COMMIT_PERIODS],
        ]
