"""Pydantic models for plugin health scoring."""

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeMessage, ProbeResult, ResultStatus
from pluginhealth.models.model_score import (
    Resolution,
    Score,
    ScoreResult,
    ScoringComponentResult,
)
from pluginhealth.models.model_storage import PluginsFile, ScoresFile
from pluginhealth.models.model_update_center import (
    Deprecation,
    IssueTracker,
    SecurityWarning,
    SecurityWarningVersion,
    UpdateCenter,
    UpdateCenterPlugin,
)

__all__ = [
    # Probe models
    "Plugin",
    "ProbeMessage",
    "ProbeResult",
    "ResultStatus",
    # Scoring models
    "Resolution",
    "Score",
    "ScoreResult",
    "ScoringComponentResult",
    # Update-center models
    "Deprecation",
    "IssueTracker",
    "SecurityWarning",
    "SecurityWarningVersion",
    "UpdateCenter",
    "UpdateCenterPlugin",
    # Storage models
    "PluginsFile",
    "ScoresFile",
]
