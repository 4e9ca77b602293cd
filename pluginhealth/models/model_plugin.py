"""Plugin record holding identity, release metadata and accumulated probe results."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from pluginhealth.models.common import _ensure_utc
from pluginhealth.models.model_result import ProbeResult, ResultStatus


class Plugin(BaseModel):
    """A plugin and the latest result of every probe executed on it.

    ``details`` is replaced wholesale on every update (copy-on-write), so a
    reader holding a reference to the previous mapping never observes a
    half-updated map.
    """

    name: str = Field(description="Stable plugin identifier (artifactId)")
    version: str | None = Field(default=None, description="Latest released version")
    scm: str | None = Field(default=None, description="Source repository URL")
    release_timestamp: datetime | None = Field(default=None, description="Latest release date")
    details: dict[str, ProbeResult] = Field(
        default_factory=dict, description="Key: probe key"
    )

    @field_validator("release_timestamp")
    @classmethod
    def _release_in_utc(cls, value: datetime | None) -> datetime | None:
        return _ensure_utc(value)

    def get_result(self, key: str) -> ProbeResult | None:
        """Return the stored result for a probe key, if any."""
        return self.details.get(key)

    def add_result(self, result: ProbeResult) -> bool:
        """Store a result, replacing any previous result for the same probe key.

        Skipped results are control signals and are ignored. Any other result
        replaces the stored one, even with an identical outcome, so the stored
        timestamp always records the latest evaluation.

        Args:
            result: The result to store

        Returns:
            True if the result was stored
        """
        if result.status == ResultStatus.SKIPPED:
            return False

        self.details = {**self.details, result.id: result}
        return True

    def add_results(self, results: list[ProbeResult]) -> int:
        """Store several results. Returns the number of results stored."""
        return sum(1 for result in results if self.add_result(result))
