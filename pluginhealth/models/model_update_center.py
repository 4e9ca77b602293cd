"""Update-center snapshot models.

Field aliases follow the camelCase keys of the upstream
``update-center.actual.json`` document so a downloaded snapshot validates
as-is, while the Python attributes stay snake_case.
"""

import logging
import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pluginhealth.models.common import _ensure_utc
from pluginhealth.models.model_plugin import Plugin

logger = logging.getLogger(__name__)


class IssueTracker(BaseModel):
    """Where issues of a plugin are tracked."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(description="Tracker platform, e.g. 'github' or 'jira'")
    view_url: str | None = Field(default=None, alias="viewUrl")
    report_url: str | None = Field(default=None, alias="reportUrl")


class UpdateCenterPlugin(BaseModel):
    """A plugin as published by the update-center."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str | None = None
    scm: str | None = None
    release_timestamp: datetime | None = Field(default=None, alias="releaseTimestamp")
    labels: list[str] = Field(default_factory=list)
    popularity: int = Field(default=0, ge=0, description="Installation count")
    required_core: str | None = Field(default=None, alias="requiredCore")
    default_branch: str | None = Field(default=None, alias="defaultBranch")
    issue_trackers: list[IssueTracker] = Field(default_factory=list, alias="issueTrackers")

    @field_validator("release_timestamp")
    @classmethod
    def _release_in_utc(cls, value: datetime | None) -> datetime | None:
        return _ensure_utc(value)

    def to_plugin(self) -> Plugin:
        """Create a fresh plugin record (no probe results) from this entry."""
        return Plugin(
            name=self.name,
            version=self.version,
            scm=self.scm,
            release_timestamp=self.release_timestamp,
        )


class Deprecation(BaseModel):
    """Deprecation notice of a plugin."""

    url: str


class SecurityWarningVersion(BaseModel):
    """Range of versions affected by a security warning."""

    model_config = ConfigDict(populate_by_name=True)

    last_version: str | None = Field(default=None, alias="lastVersion")
    pattern: str = Field(description="Regular expression matching affected versions")


class SecurityWarning(BaseModel):
    """Security warning published by the update-center."""

    id: str
    name: str = Field(description="Name of the affected component")
    type: str = Field(default="plugin")
    message: str = ""
    url: str | None = None
    versions: list[SecurityWarningVersion] = Field(default_factory=list)

    def affects(self, version: str | None) -> bool:
        """Check whether the given plugin version is affected by this warning.

        Args:
            version: Plugin version to check

        Returns:
            True if one of the version patterns fully matches the version
        """
        if version is None or self.type != "plugin":
            return False
        for affected in self.versions:
            try:
                if re.fullmatch(affected.pattern, version):
                    return True
            except re.error:
                logger.warning(f"Invalid version pattern in {self.id}: {affected.pattern}")
        return False


class UpdateCenter(BaseModel):
    """Read-only snapshot of the update-center for one probe pass."""

    plugins: dict[str, UpdateCenterPlugin] = Field(default_factory=dict, description="Key: plugin name")
    deprecations: dict[str, Deprecation] = Field(default_factory=dict, description="Key: plugin name")
    warnings: list[SecurityWarning] = Field(default_factory=list)

    def get_plugin(self, name: str) -> UpdateCenterPlugin | None:
        return self.plugins.get(name)

    def active_warnings(self, name: str, version: str | None) -> list[SecurityWarning]:
        """Security warnings affecting the given plugin version."""
        return [w for w in self.warnings if w.name == name and w.affects(version)]
