"""Scoring result models: component results, category results and overall scores."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from pluginhealth.models.common import _ensure_utc, _utc_now


class Resolution(BaseModel):
    """A remediation hint attached to a scoring reason."""

    text: str
    link: str

    @classmethod
    def from_link(cls, link: str) -> "Resolution":
        return cls(text=link, link=link)


class ScoringComponentResult(BaseModel):
    """Outcome of one scoring component.

    ``score`` is conventionally 0-100 but may be negative to express a strong
    penalty. A component with weight 0 is reported but does not move the
    category value.
    """

    score: float = Field(description="Component score, usually 0-100")
    weight: float = Field(ge=0.0, description="Relative importance within the scoring")
    reasons: list[str] = Field(default_factory=list)
    resolutions: list[Resolution] = Field(default_factory=list)


class ScoreResult(BaseModel):
    """Category score produced by one scoring."""

    key: str
    value: int = Field(ge=0, le=100)
    weight: float = Field(ge=0.0, le=1.0, description="Coefficient of the category in the overall score")
    component_results: list[ScoringComponentResult] = Field(default_factory=list)
    version: int = Field(default=1, ge=0, description="Version of the producing scoring")

    @property
    def reasons(self) -> list[str]:
        """All reasons of all components, in component order."""
        return [reason for component in self.component_results for reason in component.reasons]


class Score(BaseModel):
    """Overall score of a plugin, combining every category score."""

    plugin: str
    computed_at: datetime = Field(default_factory=_utc_now)
    value: int = Field(ge=0, le=100)
    details: list[ScoreResult] = Field(default_factory=list)

    @field_validator("computed_at")
    @classmethod
    def _computed_in_utc(cls, value: datetime) -> datetime:
        return _ensure_utc(value)

    def get_detail(self, key: str) -> ScoreResult | None:
        return next((detail for detail in self.details if detail.key == key), None)
