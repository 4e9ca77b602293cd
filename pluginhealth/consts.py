import os
from pathlib import Path

DEFAULT_DATA_DIR = Path(
    os.getenv(
        "PLUGIN_HEALTH_DATA_DIR",
        str(Path(__file__).parent.parent.resolve() / "data"),
    )
).absolute().resolve()

# Update-center endpoints
UPDATE_CENTER_URL = os.getenv(
    "UPDATE_CENTER_URL", "https://updates.jenkins.io/current/update-center.actual.json"
)
DOCUMENTATION_URLS = os.getenv(
    "DOCUMENTATION_URLS", "https://updates.jenkins.io/plugin-documentation-urls.json"
)
UPDATE_CENTER_CACHE_TTL = 3600  # 1 hour
UPDATE_CENTER_TIMEOUT = 60.0

# GitHub API
GITHUB_API_URL = "https://api.github.com"
GITHUB_TIMEOUT = 30.0
GITHUB_MAX_RETRIES = 5
GITHUB_MAX_PAGES = 10

# Jira issue tracker
JIRA_URL = os.getenv("JIRA_URL", "https://issues.jenkins.io")
JIRA_TIMEOUT = 30.0

# Git command line
GIT_CLONE_TIMEOUT = 90  # Kept below PROBE_TIMEOUT
GIT_COMMAND_TIMEOUT = 60

# Probe engine
PROBE_TIMEOUT = float(os.getenv("PROBE_TIMEOUT", "120"))  # Per-probe wall clock bound
PROBE_CONCURRENCY = int(os.getenv("PROBE_CONCURRENCY", "4"))  # Plugins probed in parallel

# Update-center labels
LABEL_DEPRECATED = "deprecated"
LABEL_ADOPT_THIS_PLUGIN = "adopt-this-plugin"

# GitHub repository URL of a plugin hosted in the jenkinsci organization
GITHUB_SCM_PATTERN = r"https://(?P<server>[^/]*)/(?P<repo>jenkinsci/[^/#?]*)(?:/tree/[^/]+/(?P<folder>.+))?"

# Reusable workflow definitions detected in .github/workflows
CD_WORKFLOW_DEFINITION = "jenkins-infra/github-reusable-workflows/.github/workflows/maven-cd.yml"
SECURITY_SCAN_WORKFLOW_DEFINITION = (
    "jenkins-infra/jenkins-security-scan/.github/workflows/jenkins-security-scan.yaml"
)

# Resolution links shown with scoring reasons
CONTRIBUTING_GUIDE_LINK = (
    "https://www.jenkins.io/doc/developer/tutorial-improve/add-a-contributing-guide/"
)
DOCUMENTATION_MIGRATION_LINK = (
    "https://www.jenkins.io/doc/developer/tutorial-improve/migrate-documentation-to-github/"
)
RELEASE_DRAFTER_LINK = "https://github.com/jenkinsci/.github/blob/master/.github/release-drafter.adoc"
DESCRIPTION_MIGRATION_LINK = "https://www.jenkins.io/doc/developer/tutorial-improve/move-description-to-index/"
JENKINSFILE_LINK = "https://www.jenkins.io/doc/developer/tutorial-improve/add-a-jenkinsfile/"
DEPENDABOT_LINK = "https://www.jenkins.io/doc/developer/tutorial-improve/automate-dependency-update-checks/"
CD_LINK = "https://www.jenkins.io/doc/developer/publishing/releasing-cd/"
