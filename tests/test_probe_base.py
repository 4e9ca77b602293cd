"""Tests for probe applicability rules and error containment."""

from datetime import UTC, datetime, timedelta

import pytest

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext

NOW = datetime(2024, 6, 1, tzinfo=UTC)


class CountingProbe(Probe):
    """Probe recording how many times its check ran."""

    key = "counting"

    def __init__(self, requires_release=False, source_code=False, version=1, requirements=()):
        self.requires_release = requires_release
        self.is_source_code_related = source_code
        self.version = version
        self.requirements = requirements
        self.calls = 0

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        self.calls += 1
        return self.success("checked")


class RaisingProbe(Probe):
    key = "raising"

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        raise ValueError("boom")


class WrongKeyProbe(Probe):
    key = "wrong-key"

    def do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        return ProbeResult.success("other", "checked")


def _previous(status: ResultStatus = ResultStatus.SUCCESS, timestamp=NOW, version: int = 1) -> ProbeResult:
    return ProbeResult(id="counting", status=status, message="previous", timestamp=timestamp, schema_version=version)


@pytest.fixture
def released_plugin() -> Plugin:
    return Plugin(name="mailer", release_timestamp=NOW - timedelta(days=10))


class TestApplicability:
    """Tests for Probe.is_applicable through Probe.apply."""

    def test_runs_without_previous_result(self, released_plugin: Plugin, context: ProbeContext) -> None:
        probe = CountingProbe(requires_release=True)
        result = probe.apply(released_plugin, context)
        assert result.status == ResultStatus.SUCCESS
        assert probe.calls == 1

    def test_reruns_after_error(self, released_plugin: Plugin, context: ProbeContext) -> None:
        released_plugin.add_result(_previous(ResultStatus.ERROR))
        probe = CountingProbe(requires_release=True)
        assert probe.apply(released_plugin, context).status == ResultStatus.SUCCESS

    def test_reruns_after_version_bump(self, released_plugin: Plugin, context: ProbeContext) -> None:
        released_plugin.add_result(_previous(version=1))
        probe = CountingProbe(requires_release=True, version=2)
        result = probe.apply(released_plugin, context)
        assert result.status == ResultStatus.SUCCESS
        assert result.schema_version == 2

    def test_always_runs_without_traits(self, released_plugin: Plugin, context: ProbeContext) -> None:
        released_plugin.add_result(_previous())
        probe = CountingProbe()
        assert probe.apply(released_plugin, context).status == ResultStatus.SUCCESS

    def test_skipped_when_release_older_than_result(
        self, released_plugin: Plugin, context: ProbeContext
    ) -> None:
        released_plugin.add_result(_previous())
        probe = CountingProbe(requires_release=True)

        result = probe.apply(released_plugin, context)

        assert result.status == ResultStatus.SKIPPED
        assert "does not meet the criteria" in result.message
        assert probe.calls == 0

    def test_reruns_after_new_release(self, released_plugin: Plugin, context: ProbeContext) -> None:
        released_plugin.add_result(_previous(timestamp=NOW - timedelta(days=20)))
        probe = CountingProbe(requires_release=True)
        assert probe.apply(released_plugin, context).status == ResultStatus.SUCCESS

    def test_source_code_probe_runs_without_commit_date(
        self, released_plugin: Plugin, context: ProbeContext
    ) -> None:
        released_plugin.add_result(_previous())
        probe = CountingProbe(source_code=True)
        assert probe.apply(released_plugin, context).status == ResultStatus.SUCCESS

    def test_source_code_probe_skipped_when_no_new_commit(
        self, released_plugin: Plugin, context: ProbeContext
    ) -> None:
        released_plugin.add_result(_previous())
        context.publish_last_commit_date(NOW - timedelta(days=1))
        probe = CountingProbe(source_code=True)
        assert probe.apply(released_plugin, context).status == ResultStatus.SKIPPED

    def test_source_code_probe_reruns_after_new_commit(
        self, released_plugin: Plugin, context: ProbeContext
    ) -> None:
        released_plugin.add_result(_previous())
        context.publish_last_commit_date(NOW + timedelta(days=1))
        probe = CountingProbe(source_code=True)
        assert probe.apply(released_plugin, context).status == ResultStatus.SUCCESS

    def test_either_trait_triggers_rerun(self, released_plugin: Plugin, context: ProbeContext) -> None:
        released_plugin.add_result(_previous())
        context.publish_last_commit_date(NOW + timedelta(days=1))
        probe = CountingProbe(requires_release=True, source_code=True)
        assert probe.apply(released_plugin, context).status == ResultStatus.SUCCESS

    def test_skip_does_not_modify_plugin(self, released_plugin: Plugin, context: ProbeContext) -> None:
        previous = _previous()
        released_plugin.add_result(previous)
        CountingProbe(requires_release=True).apply(released_plugin, context)
        assert released_plugin.get_result("counting") == previous


class TestRequirements:
    """Tests for requirement checks."""

    def test_missing_requirement(self, plugin: Plugin, context: ProbeContext) -> None:
        probe = CountingProbe(requirements=("scm",))

        result = probe.apply(plugin, context)

        assert result.status == ResultStatus.ERROR
        assert result.message == "requirement scm not satisfied"
        assert probe.calls == 0

    def test_failed_requirement(self, plugin: Plugin, context: ProbeContext) -> None:
        plugin.add_result(ProbeResult.failure("scm", "invalid"))
        probe = CountingProbe(requirements=("scm",))
        assert probe.apply(plugin, context).message == "requirement scm not satisfied"

    def test_first_unmet_requirement_reported(self, plugin: Plugin, context: ProbeContext) -> None:
        plugin.add_result(ProbeResult.success("scm", "valid"))
        probe = CountingProbe(requirements=("scm", "last-commit-date", "jenkinsfile"))
        assert probe.apply(plugin, context).message == "requirement last-commit-date not satisfied"

    def test_satisfied_requirements(self, plugin: Plugin, context: ProbeContext) -> None:
        plugin.add_result(ProbeResult.success("scm", "valid"))
        probe = CountingProbe(requirements=("scm",))
        assert probe.apply(plugin, context).status == ResultStatus.SUCCESS


class TestErrorContainment:
    """Tests for exceptions escaping probes."""

    def test_exception_becomes_error(self, plugin: Plugin, context: ProbeContext) -> None:
        result = RaisingProbe().apply(plugin, context)
        assert result.status == ResultStatus.ERROR
        assert result.id == "raising"
        assert result.message == "ValueError: boom"

    def test_result_for_another_key_rejected(self, plugin: Plugin, context: ProbeContext) -> None:
        result = WrongKeyProbe().apply(plugin, context)
        assert result.status == ResultStatus.ERROR
        assert result.id == "wrong-key"

    def test_apply_does_not_store(self, plugin: Plugin, context: ProbeContext) -> None:
        CountingProbe().apply(plugin, context)
        assert plugin.details == {}

    def test_repr(self) -> None:
        assert repr(CountingProbe(version=3)) == "CountingProbe(key='counting', version=3)"
