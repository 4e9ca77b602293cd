"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_update_center import UpdateCenter
from pluginhealth.probes.context import ProbeContext


@pytest.fixture
def update_center() -> UpdateCenter:
    """Create an update-center snapshot, shaped like the upstream document."""
    return UpdateCenter.model_validate(
        {
            "plugins": {
                "mailer": {
                    "name": "mailer",
                    "version": "1.0",
                    "scm": "https://github.com/jenkinsci/mailer-plugin",
                    "releaseTimestamp": "2024-01-10T00:00:00Z",
                    "labels": ["notifier"],
                    "popularity": 250000,
                    "requiredCore": "2.361.4",
                    "defaultBranch": "main",
                    "issueTrackers": [
                        {
                            "type": "github",
                            "viewUrl": "https://github.com/jenkinsci/mailer-plugin/issues",
                            "reportUrl": "https://github.com/jenkinsci/mailer-plugin/issues/new",
                        }
                    ],
                },
                "legacy": {
                    "name": "legacy",
                    "version": "0.3",
                    "scm": "https://github.com/jenkinsci/legacy-plugin",
                    "releaseTimestamp": "2015-06-01T00:00:00Z",
                    "labels": ["deprecated", "adopt-this-plugin"],
                    "popularity": 12,
                },
            },
            "deprecations": {
                "ant": {"url": "https://github.com/jenkinsci/ant-plugin/blob/main/README.md"},
            },
            "warnings": [
                {
                    "id": "SECURITY-123",
                    "name": "mailer",
                    "type": "plugin",
                    "message": "Stored XSS vulnerability",
                    "url": "https://www.jenkins.io/security/advisory/2023-01-01/#SECURITY-123",
                    "versions": [{"lastVersion": "0.9", "pattern": "0[.].*"}],
                }
            ],
        }
    )

@pytest.fixture
def plugin(update_center: UpdateCenter) -> Plugin:
    """Create the plugin record of 'mailer', without any probe result."""
    return update_center.plugins["mailer"].to_plugin()

@pytest.fixture
def context(update_center: UpdateCenter) -> ProbeContext:
    """Create a probe context for 'mailer' without any collaborator."""
    return ProbeContext("mailer", update_center)

@pytest.fixture
def repository(tmp_path: Path) -> Path:
    """Create an empty directory standing for a cloned repository."""
    path = tmp_path / "repository"
    path.mkdir()
    return path

@pytest.fixture
def cloned_context(update_center: UpdateCenter, repository: Path) -> ProbeContext:
    """Create a probe context where the repository clone is already published."""
    context = ProbeContext("mailer", update_center)
    context.publish_scm_repository(repository)
    return context

