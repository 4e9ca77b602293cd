"""Tests for the probes reading the cloned repository."""

from pathlib import Path

import pytest

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.models.model_update_center import UpdateCenter
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.documentation import DocumentationMigrationProbe, PluginDescriptionMigrationProbe
from pluginhealth.probes.maven import (
    MavenDependenciesProbe,
    MavenDependencyManagementProbe,
    ParentPomVersionProbe,
)
from pluginhealth.probes.repository_files import (
    FileMatcher,
    code_ownership_probe,
    contributing_guidelines_probe,
    dependabot_probe,
    jenkinsfile_probe,
    release_drafter_probe,
    renovate_probe,
)
from pluginhealth.probes.workflows import (
    WorkflowMatcher,
    continuous_delivery_probe,
    load_workflows,
    security_scan_probe,
)

CD_WORKFLOW = """
name: cd
on:
  workflow_dispatch:
jobs:
  maven-cd:
    uses: jenkins-infra/github-reusable-workflows/.github/workflows/maven-cd.yml@v1
    secrets:
      MAVEN_USERNAME: ${{ secrets.MAVEN_USERNAME }}
"""

SECURITY_SCAN_WORKFLOW = """
name: Jenkins Security Scan
on:
  push:
jobs:
  security-scan:
    uses: jenkins-infra/jenkins-security-scan/.github/workflows/jenkins-security-scan.yaml@v2
"""

BUILD_WORKFLOW = """
name: build
on: push
jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
"""

PARENT_POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>org.jenkins-ci.plugins</groupId>
    <artifactId>plugin</artifactId>
    <version>4.75</version>
    <relativePath />
  </parent>
  <artifactId>mailer</artifactId>
  <packaging>hpi</packaging>
</project>
"""


def _write(repository: Path, relative: str, content: str = "") -> None:
    path = repository / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture
def cloned_plugin(plugin: Plugin) -> Plugin:
    plugin.add_result(ProbeResult.success("last-commit-date", "2024-01-05T10:30:15+00:00"))
    return plugin


class TestRepositoryFileProbes:
    """Tests for the file detection probes."""

    def test_jenkinsfile(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, "Jenkinsfile", "buildPlugin()")
        result = jenkinsfile_probe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == "Jenkinsfile found."

    def test_no_jenkinsfile(self, cloned_plugin: Plugin, cloned_context: ProbeContext) -> None:
        result = jenkinsfile_probe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.FAILURE

    def test_jenkinsfile_only_at_root(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, "docs/Jenkinsfile")
        assert jenkinsfile_probe().apply(cloned_plugin, cloned_context).status == ResultStatus.FAILURE

    def test_contributing_case_insensitive(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, "docs/contributing.md")
        assert contributing_guidelines_probe().apply(cloned_plugin, cloned_context).status == ResultStatus.SUCCESS

    def test_codeowners_in_github_directory(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, ".github/CODEOWNERS", "* @jenkinsci/mailer-plugin-developers")
        assert code_ownership_probe().apply(cloned_plugin, cloned_context).status == ResultStatus.SUCCESS

    def test_no_local_repository(self, cloned_plugin: Plugin, context: ProbeContext) -> None:
        result = jenkinsfile_probe().apply(cloned_plugin, context)
        assert result.status == ResultStatus.ERROR

    def test_requires_last_commit_date(self, plugin: Plugin, cloned_context: ProbeContext) -> None:
        result = jenkinsfile_probe().apply(plugin, cloned_context)
        assert result.message == "requirement last-commit-date not satisfied"

    def test_source_code_related(self) -> None:
        assert jenkinsfile_probe().is_source_code_related

    def test_matcher_skips_git_directory(self, repository: Path) -> None:
        _write(repository, ".git/Jenkinsfile")
        assert FileMatcher(names=("Jenkinsfile",), max_depth=3).find(repository) is None


class TestBotConfigurationProbes:
    """Tests for the dependency bot probes."""

    def test_dependabot(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, ".github/dependabot.yml", "version: 2")
        result = dependabot_probe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == "Dependabot is configured."

    def test_no_dependabot(self, cloned_plugin: Plugin, cloned_context: ProbeContext) -> None:
        assert dependabot_probe().apply(cloned_plugin, cloned_context).status == ResultStatus.FAILURE

    def test_renovate(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, ".github/renovate.json", "{}")
        result = renovate_probe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.schema_version == 2

    def test_release_drafter(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, ".github/release-drafter.yml", "_extends: .github")
        result = release_drafter_probe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == "Release Drafter is configured."

    def test_release_drafter_yaml_extension(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, ".github/release-drafter.yaml", "_extends: .github")
        assert release_drafter_probe().apply(cloned_plugin, cloned_context).status == ResultStatus.SUCCESS

    def test_no_release_drafter(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, "release-drafter.yml", "_extends: .github")
        result = release_drafter_probe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.FAILURE
        assert result.message == "Release Drafter is not configured."


class TestWorkflowProbes:
    """Tests for the GitHub Actions workflow probes."""

    def test_continuous_delivery(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, ".github/workflows/cd.yaml", CD_WORKFLOW)
        _write(repository, ".github/workflows/build.yml", BUILD_WORKFLOW)
        result = continuous_delivery_probe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == "JEP-229 workflow definition found."

    def test_no_continuous_delivery(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, ".github/workflows/build.yml", BUILD_WORKFLOW)
        assert continuous_delivery_probe().apply(cloned_plugin, cloned_context).status == ResultStatus.FAILURE

    def test_no_workflow_directory(self, cloned_plugin: Plugin, cloned_context: ProbeContext) -> None:
        result = security_scan_probe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.FAILURE
        assert result.message == "Plugin has no GitHub Action configured."

    def test_security_scan(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, ".github/workflows/jenkins-security-scan.yml", SECURITY_SCAN_WORKFLOW)
        assert security_scan_probe().apply(cloned_plugin, cloned_context).status == ResultStatus.SUCCESS

    def test_malformed_workflow_skipped(self, repository: Path) -> None:
        _write(repository, ".github/workflows/broken.yml", "jobs: [unclosed")
        _write(repository, ".github/workflows/cd.yml", CD_WORKFLOW)
        workflows = load_workflows(repository / ".github" / "workflows")
        assert len(workflows) == 1

    def test_matcher_ignores_unexpected_shapes(self) -> None:
        matcher = WorkflowMatcher("jenkins-infra/jenkins-security-scan")
        assert not matcher.matches(None)
        assert not matcher.matches({"jobs": ["not", "a", "mapping"]})
        assert not matcher.matches({"jobs": {"scan": "string"}})


class TestDocumentationMigrationProbe:
    """Tests for DocumentationMigrationProbe."""

    def _context(self, update_center: UpdateCenter, links: dict[str, str] | None) -> ProbeContext:
        return ProbeContext("mailer", update_center, documentation_links=links)

    @pytest.fixture
    def valid_plugin(self, plugin: Plugin) -> Plugin:
        plugin.add_result(ProbeResult.success("scm", "valid"))
        return plugin

    def test_migrated(self, valid_plugin: Plugin, update_center: UpdateCenter) -> None:
        links = {"mailer": "https://github.com/jenkinsci/mailer-plugin/blob/main/README.md"}
        result = DocumentationMigrationProbe().apply(valid_plugin, self._context(update_center, links))
        assert result.status == ResultStatus.SUCCESS

    def test_still_on_wiki(self, valid_plugin: Plugin, update_center: UpdateCenter) -> None:
        links = {"mailer": "https://wiki.jenkins-ci.org/display/JENKINS/Mailer"}
        result = DocumentationMigrationProbe().apply(valid_plugin, self._context(update_center, links))
        assert result.status == ResultStatus.FAILURE

    def test_not_listed(self, valid_plugin: Plugin, update_center: UpdateCenter) -> None:
        result = DocumentationMigrationProbe().apply(valid_plugin, self._context(update_center, {"git": "url"}))
        assert result.status == ResultStatus.FAILURE

    def test_no_links(self, valid_plugin: Plugin, update_center: UpdateCenter) -> None:
        result = DocumentationMigrationProbe().apply(valid_plugin, self._context(update_center, None))
        assert result.status == ResultStatus.ERROR


class TestPluginDescriptionMigrationProbe:
    """Tests for PluginDescriptionMigrationProbe."""

    def test_correct_description(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, "src/main/resources/index.jelly", "<div>Sends build results by email.</div>")
        result = PluginDescriptionMigrationProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == "Plugin seems to have a correct description."

    def test_archetype_description(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, "src/main/resources/index.jelly", "<div>\n  TODO\n</div>")
        result = PluginDescriptionMigrationProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.FAILURE
        assert result.message == "Plugin is using description from the plugin archetype."

    def test_no_index(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, "src/main/resources/config.jelly")
        result = PluginDescriptionMigrationProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.FAILURE
        assert result.message == "There is no `index.jelly` file in `src/main/resources`."

    def test_index_in_plugin_folder(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, "src/main/resources/index.jelly", "<div>TODO</div>")
        _write(repository, "plugin/src/main/resources/index.jelly", "<div>Sends build results by email.</div>")
        cloned_context.publish_scm_folder_path("plugin")
        assert PluginDescriptionMigrationProbe().apply(cloned_plugin, cloned_context).status == ResultStatus.SUCCESS

    def test_no_sources(self, cloned_plugin: Plugin, cloned_context: ProbeContext) -> None:
        result = PluginDescriptionMigrationProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.ERROR
        assert result.message == "Cannot browse plugin source code folder."

    def test_no_local_repository(self, cloned_plugin: Plugin, context: ProbeContext) -> None:
        result = PluginDescriptionMigrationProbe().apply(cloned_plugin, context)
        assert result.message == "Cannot access plugin repository."

    def test_requires_release(self) -> None:
        assert PluginDescriptionMigrationProbe().requires_release


class TestParentPomVersionProbe:
    """Tests for ParentPomVersionProbe."""

    def test_parent(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, "pom.xml", PARENT_POM)
        result = ParentPomVersionProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == "org.jenkins-ci.plugins:plugin:4.75"

    def test_parent_in_plugin_folder(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, "plugin/pom.xml", PARENT_POM)
        cloned_context.publish_scm_folder_path("plugin")
        assert ParentPomVersionProbe().apply(cloned_plugin, cloned_context).status == ResultStatus.SUCCESS

    def test_no_parent(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, "pom.xml", "<project><artifactId>mailer</artifactId></project>")
        assert ParentPomVersionProbe().apply(cloned_plugin, cloned_context).status == ResultStatus.FAILURE

    def test_no_descriptor(self, cloned_plugin: Plugin, cloned_context: ProbeContext) -> None:
        result = ParentPomVersionProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.ERROR
        assert result.message == "There is no descriptor file for the plugin."

    def test_malformed_descriptor(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, "pom.xml", "<project><parent>")
        result = ParentPomVersionProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.ERROR
        assert result.message == "Could not parse the descriptor file of the plugin."


DEPENDENCIES_POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <artifactId>mailer</artifactId>
  <properties>
    <jenkins.version>2.440.3</jenkins.version>
  </properties>
  <dependencyManagement>
    <dependencies>
      <dependency>
        <groupId>io.jenkins.tools.bom</groupId>
        <artifactId>bom-2.440.x</artifactId>
        <version>3105.v672692894683</version>
        <type>pom</type>
        <scope>import</scope>
      </dependency>
    </dependencies>
  </dependencyManagement>
  <dependencies>
    <dependency>
      <groupId>org.jenkins-ci.plugins</groupId>
      <artifactId>display-url-api</artifactId>
    </dependency>
    <dependency>
      <groupId>org.jenkins-ci.plugins</groupId>
      <artifactId>instance-identity</artifactId>
      <optional>true</optional>
    </dependency>
    <dependency>
      <groupId>org.jenkins-ci.main</groupId>
      <artifactId>jenkins-core</artifactId>
      <version>${jenkins.version}</version>
      <scope>provided</scope>
    </dependency>
  </dependencies>
</project>
"""


class TestMavenDependencyProbes:
    """Tests for the probes listing the plugin dependencies."""

    def test_dependencies(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, "pom.xml", DEPENDENCIES_POM)
        result = MavenDependenciesProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == [
            "org.jenkins-ci.plugins:display-url-api:None:false",
            "org.jenkins-ci.plugins:instance-identity:None:true",
        ]
        assert result.schema_version == 2

    def test_no_dependencies(self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path) -> None:
        _write(repository, "pom.xml", PARENT_POM)
        result = MavenDependenciesProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == []

    def test_dependency_management(
        self, cloned_plugin: Plugin, cloned_context: ProbeContext, repository: Path
    ) -> None:
        _write(repository, "pom.xml", DEPENDENCIES_POM)
        result = MavenDependencyManagementProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.SUCCESS
        assert result.message == ["io.jenkins.tools.bom:bom-2.440.x:3105.v672692894683"]

    def test_no_descriptor(self, cloned_plugin: Plugin, cloned_context: ProbeContext) -> None:
        result = MavenDependencyManagementProbe().apply(cloned_plugin, cloned_context)
        assert result.status == ResultStatus.ERROR
        assert result.message == "There is no descriptor file for the plugin."
