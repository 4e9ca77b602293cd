"""Scorings: weighted reductions of probe results into category and overall scores."""

from pluginhealth.scores.base import ProbeStatusComponent, Scoring, ScoringComponent
from pluginhealth.scores.composite import (
    build_score,
    calculate_overall_score,
    round_half_up,
    weighted_value,
)
from pluginhealth.scores.registry import ScoringRegistry, default_scorings

__all__ = [
    "ProbeStatusComponent",
    "Scoring",
    "ScoringComponent",
    "ScoringRegistry",
    "build_score",
    "calculate_overall_score",
    "default_scorings",
    "round_half_up",
    "weighted_value",
]
