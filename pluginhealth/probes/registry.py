"""Default probe set."""

from pluginhealth.probes.base import Probe
from pluginhealth.probes.documentation import DocumentationMigrationProbe, PluginDescriptionMigrationProbe
from pluginhealth.probes.github_api import (
    DefaultBranchBuildStatusProbe,
    DependabotPullRequestProbe,
    PullRequestProbe,
    RepositoryArchivedStatusProbe,
)
from pluginhealth.probes.issues import GitHubOpenIssuesProbe, JiraOpenIssuesProbe
from pluginhealth.probes.maven import (
    MavenDependenciesProbe,
    MavenDependencyManagementProbe,
    ParentPomVersionProbe,
)
from pluginhealth.probes.repository_files import (
    code_ownership_probe,
    contributing_guidelines_probe,
    dependabot_probe,
    jenkinsfile_probe,
    release_drafter_probe,
    renovate_probe,
)
from pluginhealth.probes.scm import (
    HasUnreleasedProductionChangesProbe,
    LastCommitDateProbe,
    SCMLinkValidationProbe,
)
from pluginhealth.probes.update_center import (
    DeprecatedPluginProbe,
    InstallationStatProbe,
    IssueTrackerDetectionProbe,
    JenkinsCoreProbe,
    KnownSecurityVulnerabilityProbe,
    UpdateCenterPluginPublicationProbe,
    UpForAdoptionProbe,
)
from pluginhealth.probes.workflows import continuous_delivery_probe, security_scan_probe


def default_probes() -> list[Probe]:
    """Build a fresh instance of every probe, in registration order.

    Execution order is derived from the requirements by the engine.
    """
    return [
        DeprecatedPluginProbe(),
        UpForAdoptionProbe(),
        UpdateCenterPluginPublicationProbe(),
        InstallationStatProbe(),
        JenkinsCoreProbe(),
        KnownSecurityVulnerabilityProbe(),
        IssueTrackerDetectionProbe(),
        SCMLinkValidationProbe(),
        LastCommitDateProbe(),
        HasUnreleasedProductionChangesProbe(),
        RepositoryArchivedStatusProbe(),
        PullRequestProbe(),
        DefaultBranchBuildStatusProbe(),
        GitHubOpenIssuesProbe(),
        JiraOpenIssuesProbe(),
        DocumentationMigrationProbe(),
        PluginDescriptionMigrationProbe(),
        jenkinsfile_probe(),
        contributing_guidelines_probe(),
        code_ownership_probe(),
        dependabot_probe(),
        renovate_probe(),
        release_drafter_probe(),
        DependabotPullRequestProbe(),
        continuous_delivery_probe(),
        security_scan_probe(),
        ParentPomVersionProbe(),
        MavenDependenciesProbe(),
        MavenDependencyManagementProbe(),
    ]
