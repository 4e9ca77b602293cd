"""Probes inspecting the GitHub Actions workflows of the plugin repository."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pluginhealth.consts import CD_WORKFLOW_DEFINITION, SECURITY_SCAN_WORKFLOW_DEFINITION
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.scm import LastCommitDateProbe

logger = logging.getLogger(__name__)

WORKFLOWS_DIRECTORY = ".github/workflows"
CONTINUOUS_DELIVERY_KEY = "jep-229"
SECURITY_SCAN_KEY = "security-scan"


@dataclass(frozen=True)
class WorkflowMatcher:
    """Matches workflows with a job calling the given reusable workflow."""

    definition: str

    def matches(self, workflow: Any) -> bool:
        if not isinstance(workflow, dict):
            return False
        jobs = workflow.get("jobs")
        if not isinstance(jobs, dict):
            return False
        return any(
            isinstance(job, dict) and str(job.get("uses") or "").startswith(self.definition)
            for job in jobs.values()
        )


def load_workflows(directory: Path) -> list[Any]:
    """Parse every workflow file of a directory. Unreadable files are skipped."""
    workflows = []
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix not in (".yml", ".yaml"):
            continue
        try:
            workflows.append(yaml.safe_load(path.read_text(encoding="utf-8")))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning(f"Could not read workflow {path}: {e}")
    return workflows


class GitHubWorkflowProbe(Probe):
    """Reports whether a workflow of the repository uses a reusable workflow."""

    is_source_code_related = True
    requirements = (LastCommitDateProbe.key,)

    def __init__(
        self,
        key: str,
        description: str,
        matcher: WorkflowMatcher,
        found_message: str,
        missing_message: str,
        version: int = 1,
    ):
        self.key = key
        self.description = description
        self.matcher = matcher
        self.found_message = found_message
        self.missing_message = missing_message
        self.version = version

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        repository = context.scm_repository
        if repository is None:
            return self.error(f"There is no local repository for plugin {plugin.name}.")

        directory = repository / WORKFLOWS_DIRECTORY
        if not directory.is_dir():
            return self.failure("Plugin has no GitHub Action configured.")

        if any(self.matcher.matches(workflow) for workflow in load_workflows(directory)):
            return self.success(self.found_message)
        return self.failure(self.missing_message)


def continuous_delivery_probe() -> GitHubWorkflowProbe:
    return GitHubWorkflowProbe(
        key=CONTINUOUS_DELIVERY_KEY,
        description="Checks if JEP-229 (Continuous Delivery) has been activated on the plugin.",
        matcher=WorkflowMatcher(CD_WORKFLOW_DEFINITION),
        found_message="JEP-229 workflow definition found.",
        missing_message="Could not find JEP-229 workflow definition.",
    )


def security_scan_probe() -> GitHubWorkflowProbe:
    return GitHubWorkflowProbe(
        key=SECURITY_SCAN_KEY,
        description="Checks if the Jenkins security scan is configured in a GitHub workflow.",
        matcher=WorkflowMatcher(SECURITY_SCAN_WORKFLOW_DEFINITION),
        found_message="GitHub workflow security scan is configured in the plugin.",
        missing_message="GitHub workflow security scan is not configured in the plugin.",
    )
