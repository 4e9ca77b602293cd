"""Security category: active security warnings on the latest release."""

import logging

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.update_center import KnownSecurityVulnerabilityProbe
from pluginhealth.scores.base import Scoring, ScoringComponent

logger = logging.getLogger(__name__)


class NoActiveWarningComponent(ScoringComponent):
    description = "The latest release must not be affected by a security warning."
    weight = 1

    def get_score(self, plugin: Plugin, results: dict[str, ProbeResult]) -> ScoringComponentResult:
        result = results.get(KnownSecurityVulnerabilityProbe.key)
        if result is None or result.status == ResultStatus.ERROR:
            return self.result(0, ["Cannot determine if the plugin has active security warnings."])
        if result.status == ResultStatus.SUCCESS:
            return self.result(100, ["The plugin does not have any active security warning."])

        warnings = result.message if isinstance(result.message, list) else []
        reasons = [f"Active security warning {w.get('id')}." for w in warnings]
        resolutions = [
            Resolution(text=f"See advisory {w.get('id')}", link=w["url"]) for w in warnings if w.get("url")
        ]
        return self.result(0, reasons or ["The plugin has active security warnings."], resolutions)


class SecurityWarningScoring(Scoring):
    key = "security"
    weight = 1.0
    description = "Scores plugin based on current and active security warnings."

    def components(self) -> list[ScoringComponent]:
        return [NoActiveWarningComponent()]
