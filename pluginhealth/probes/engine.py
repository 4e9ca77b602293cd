"""Runs probes over plugins in requirement order, with bounded concurrency."""

import asyncio
import logging
import time
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field

from pluginhealth.consts import PROBE_CONCURRENCY, PROBE_TIMEOUT
from pluginhealth.errors import ProbeConfigurationError
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_result import ProbeResult, ResultStatus
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext

logger = logging.getLogger(__name__)


@dataclass
class ProbeBatchResult:
    """Result of probing multiple plugins."""

    total: int
    succeeded: int
    failed: int
    results: dict[str, list[ProbeResult]]  # plugin name → results of the pass
    failures: dict[str, str]  # plugin name → error
    duration_seconds: float
    status_counts: Counter = field(default_factory=Counter)


def order_probes(probes: list[Probe]) -> list[Probe]:
    """Order probes so that every probe runs after its requirements.

    Stable: probes with no ordering constraint between them keep their
    registration order.

    Raises:
        ProbeConfigurationError: On duplicate keys or requirement cycles
    """
    by_key: dict[str, Probe] = {}
    for probe in probes:
        if probe.key in by_key:
            raise ProbeConfigurationError(f"Duplicate probe key: {probe.key}")
        by_key[probe.key] = probe

    for probe in probes:
        if probe.key in probe.requirements:
            raise ProbeConfigurationError(f"Probe {probe.key} requires itself")
        for requirement in probe.requirements:
            if requirement not in by_key:
                logger.warning(f"Probe {probe.key} requires unregistered probe {requirement}")

    pending = {probe.key: {r for r in probe.requirements if r in by_key} for probe in probes}

    ordered: list[Probe] = []
    while pending:
        ready = next((p for p in probes if p.key in pending and not pending[p.key]), None)
        if ready is None:
            raise ProbeConfigurationError(f"Requirement cycle between probes: {sorted(pending)}")
        ordered.append(ready)
        del pending[ready.key]
        for requirements in pending.values():
            requirements.discard(ready.key)
    return ordered


class ProbeEngine:
    """Orchestrates probe passes over plugins.

    Within one plugin, probes run sequentially in requirement order, each in a
    worker thread bounded by ``probe_timeout``. Plugins are processed
    concurrently up to ``concurrency``.
    """

    def __init__(self, probes: list[Probe], probe_timeout: float = PROBE_TIMEOUT):
        """Initialize ProbeEngine.

        Args:
            probes: Probes to run. Ordered once, here.
            probe_timeout: Wall clock bound of a single probe call, in seconds

        Raises:
            ProbeConfigurationError: If the probes cannot be ordered
        """
        self.probes = order_probes(probes)
        self.probe_timeout = probe_timeout

    def planned_probes(self, plugin: Plugin, context: ProbeContext) -> list[Probe]:
        """Probes whose applicability rules say they would run, without running them."""
        return [probe for probe in self.probes if probe.is_applicable(plugin, context)]

    async def _run_probe(self, probe: Probe, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(probe.apply, plugin, context),
                timeout=self.probe_timeout,
            )
        except TimeoutError:
            logger.warning(f"Probe {probe.key} timed out on {plugin.name}")
            return probe.error(f"timed out after {self.probe_timeout:g}s")
        except Exception as e:
            logger.error(f"Probe {probe.key} crashed on {plugin.name}: {e}")
            return probe.error(f"{type(e).__name__}: {e}")

    async def run_on(self, plugin: Plugin, context: ProbeContext) -> list[ProbeResult]:
        """Run every probe on a plugin and merge the results into it.

        SKIPPED results are returned but not stored on the plugin.

        Args:
            plugin: Plugin to probe, updated in place
            context: Discovery cache of this pass, owned by the caller

        Returns:
            The result of every probe, in execution order
        """
        results = []
        for probe in self.probes:
            result = await self._run_probe(probe, plugin, context)
            plugin.add_result(result)
            results.append(result)
            logger.debug(f"{plugin.name} / {probe.key}: {result.status.value}")
        return results

    async def run_batch(
        self,
        plugins: list[Plugin],
        context_factory: Callable[[Plugin], ProbeContext],
        concurrency: int = PROBE_CONCURRENCY,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> ProbeBatchResult:
        """Probe plugins with concurrency control.

        Each plugin gets a fresh context from ``context_factory``, closed once
        the plugin is done. A failing plugin is recorded and does not stop the
        batch.

        Args:
            plugins: Plugins to probe, updated in place
            context_factory: Builds the context of one plugin
            concurrency: Maximum plugins probed in parallel
            progress_callback: Optional callback for progress updates (current, total)

        Returns:
            ProbeBatchResult with aggregated results
        """
        start_time = time.time()
        semaphore = asyncio.Semaphore(max(1, concurrency))
        results: dict[str, list[ProbeResult]] = {}
        failures: dict[str, str] = {}
        status_counts: Counter = Counter()
        completed = 0

        async def probe_one(plugin: Plugin) -> None:
            nonlocal completed

            async with semaphore:
                try:
                    with context_factory(plugin) as context:
                        plugin_results = await self.run_on(plugin, context)
                    results[plugin.name] = plugin_results
                    status_counts.update(r.status for r in plugin_results)
                    errors = sum(1 for r in plugin_results if r.status == ResultStatus.ERROR)
                    logger.info(f"✓ {plugin.name}: {len(plugin_results)} probes, {errors} errors")
                except Exception as e:
                    failures[plugin.name] = f"{type(e).__name__}: {e}"
                    logger.warning(f"✗ {plugin.name}: {e}")
                finally:
                    completed += 1
                    if progress_callback:
                        progress_callback(completed, len(plugins))

        await asyncio.gather(*[probe_one(plugin) for plugin in plugins])

        return ProbeBatchResult(
            total=len(plugins),
            succeeded=len(results),
            failed=len(failures),
            results=results,
            failures=failures,
            duration_seconds=time.time() - start_time,
            status_counts=status_counts,
        )
