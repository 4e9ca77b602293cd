"""Collaborators used by the probes: GitHub, git, update-center and Maven."""

from pluginhealth.clients.git import Commit, GitClient
from pluginhealth.clients.github import GitHubClient, Repository
from pluginhealth.clients.maven import MavenDependency, MavenProject, read_pom
from pluginhealth.clients.update_center import UpdateCenterClient

__all__ = [
    "Commit",
    "GitClient",
    "GitHubClient",
    "MavenDependency",
    "MavenProject",
    "Repository",
    "UpdateCenterClient",
    "read_pom",
]
