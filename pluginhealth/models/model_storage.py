"""Storage file models for persisting plugin records and score runs."""

from datetime import datetime

from pydantic import BaseModel, Field

from pluginhealth.models.common import _utc_now
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_score import Score


class PluginsFile(BaseModel):
    """Plugin records stored in data/processed/plugins.json.

    Version field enables schema migrations on load.
    """

    version: str = Field(default="1.0", description="Schema version for migrations")
    updated_at: datetime = Field(default_factory=_utc_now)
    plugins: list[Plugin] = Field(default_factory=list)


class ScoresFile(BaseModel):
    """Scores stored in data/processed/scores.json and the score history.

    Records the version of every probe and scoring registered when the run
    happened, so a change of logic can be told apart from a change of health.
    """

    version: str = Field(default="1.0")
    computed_at: datetime = Field(default_factory=_utc_now)
    probe_versions: dict[str, int] = Field(default_factory=dict, description="Key: probe key")
    scoring_versions: dict[str, int] = Field(default_factory=dict, description="Key: scoring key")
    scores: dict[str, Score] = Field(default_factory=dict, description="Key: plugin name")
