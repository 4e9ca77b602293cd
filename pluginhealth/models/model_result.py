"""Probe result model: the immutable outcome of a single probe invocation."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pluginhealth.models.common import _ensure_utc, _utc_now

ProbeMessage = str | int | float | list[Any] | dict[str, Any]


class ResultStatus(str, Enum):
    """Outcome of a probe invocation.

    SUCCESS and FAILURE are verdicts. ERROR means no verdict could be reached.
    SKIPPED is a control signal returned when the previous result is still
    current; it is never stored on a plugin.
    """

    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"
    SKIPPED = "skipped"


class ProbeResult(BaseModel):
    """Immutable record of one probe outcome."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Key of the probe which produced this result")
    status: ResultStatus
    message: ProbeMessage = Field(default="", description="Producer-defined payload")
    timestamp: datetime = Field(default_factory=_utc_now)
    schema_version: int = Field(default=1, ge=0, description="Version of the producing probe")

    @field_validator("timestamp")
    @classmethod
    def _timestamp_in_utc(cls, value: datetime) -> datetime:
        return _ensure_utc(value)

    @classmethod
    def success(cls, key: str, message: ProbeMessage, version: int = 1) -> "ProbeResult":
        return cls(id=key, status=ResultStatus.SUCCESS, message=message, schema_version=version)

    @classmethod
    def failure(cls, key: str, message: ProbeMessage, version: int = 1) -> "ProbeResult":
        return cls(id=key, status=ResultStatus.FAILURE, message=message, schema_version=version)

    @classmethod
    def error(cls, key: str, message: ProbeMessage, version: int = 1) -> "ProbeResult":
        return cls(id=key, status=ResultStatus.ERROR, message=message, schema_version=version)

    @classmethod
    def skipped(cls, key: str, message: ProbeMessage, version: int = 1) -> "ProbeResult":
        return cls(id=key, status=ResultStatus.SKIPPED, message=message, schema_version=version)

    @property
    def is_verdict(self) -> bool:
        """True when the probe reached a verdict (SUCCESS or FAILURE)."""
        return self.status in (ResultStatus.SUCCESS, ResultStatus.FAILURE)

    def same_outcome(self, other: "ProbeResult | None") -> bool:
        """Compare two results ignoring when they were produced."""
        if other is None:
            return False
        return (
            self.id == other.id
            and self.status == other.status
            and self.message == other.message
            and self.schema_version == other.schema_version
        )
