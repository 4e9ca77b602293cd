"""Weighted reduction shared by category scores and the overall score."""

import math
from collections.abc import Iterable
from datetime import datetime

from pluginhealth.models.model_score import Score, ScoreResult

MAX_SCORE = 100
MIN_SCORE = 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (72.5 -> 73)."""
    return math.floor(value + 0.5)


def weighted_value(pairs: Iterable[tuple[float, float]]) -> int:
    """Reduce (score, weight) pairs to a 0-100 integer.

    Algorithm:
        value = round_half_up(clamp(sum(score * weight) / sum(weight), 0, 100))

    A total weight of 0 (no pair, or only zero weights) yields 100: nothing
    was held against the plugin.

    Args:
        pairs: (score, weight) pairs. Weights must be >= 0.

    Returns:
        Integer between 0 and 100
    """
    total_weight = 0.0
    weighted_sum = 0.0
    for score, weight in pairs:
        total_weight += weight
        weighted_sum += score * weight

    if total_weight == 0:
        return MAX_SCORE

    mean = weighted_sum / total_weight
    return round_half_up(min(max(mean, MIN_SCORE), MAX_SCORE))


def calculate_overall_score(results: list[ScoreResult]) -> int:
    """Combine category scores into the overall plugin score.

    Args:
        results: Category scores, each weighted by its coefficient

    Returns:
        Overall score between 0-100
    """
    return weighted_value((result.value, result.weight) for result in results)


def build_score(plugin_name: str, results: list[ScoreResult], computed_at: datetime | None = None) -> Score:
    """Wrap category scores into the overall Score record of a plugin."""
    fields = {"computed_at": computed_at} if computed_at is not None else {}
    return Score(plugin=plugin_name, value=calculate_overall_score(results), details=results, **fields)
