"""Pipeline orchestration for probing and scoring plugins.

Probe pipeline:
1. Fetch the update-center snapshot and the documentation links
2. Sync plugin records with the update-center
3. Run the probes on every (or the selected) plugin
4. Store plugin records and their probe results

Score pipeline:
1. Load plugin records
2. Run every scoring and combine the category scores
3. Store the versioned score run
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from pluginhealth.clients.git import GitClient
from pluginhealth.clients.github import GitHubClient
from pluginhealth.clients.jira import JiraClient
from pluginhealth.clients.update_center import UpdateCenterClient
from pluginhealth.consts import DEFAULT_DATA_DIR, GIT_CLONE_TIMEOUT, PROBE_CONCURRENCY, PROBE_TIMEOUT
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_storage import ScoresFile
from pluginhealth.models.model_update_center import UpdateCenter
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.engine import ProbeBatchResult, ProbeEngine
from pluginhealth.probes.registry import default_probes
from pluginhealth.scores.registry import ScoringRegistry
from pluginhealth.storage.cache import FileCache
from pluginhealth.storage.file_manager import FileManager

logger = logging.getLogger(__name__)


def sync_plugins(update_center: UpdateCenter, existing: list[Plugin] | None = None) -> list[Plugin]:
    """Align plugin records with the update-center.

    New plugins get a fresh record. Known plugins get their version, SCM link
    and release date refreshed and keep their probe results. Plugins no longer
    in the update-center are kept, so the publication probe can report them.

    Args:
        update_center: Current update-center snapshot
        existing: Previously stored plugin records

    Returns:
        Plugin records sorted by name
    """
    by_name = {plugin.name: plugin for plugin in existing or []}
    created = 0
    for name, uc_plugin in update_center.plugins.items():
        plugin = by_name.get(name)
        if plugin is None:
            by_name[name] = uc_plugin.to_plugin()
            created += 1
        else:
            by_name[name] = plugin.model_copy(
                update={
                    "version": uc_plugin.version,
                    "scm": uc_plugin.scm,
                    "release_timestamp": uc_plugin.release_timestamp,
                }
            )

    logger.info(f"Synced {len(by_name)} plugins ({created} new)")
    return sorted(by_name.values(), key=lambda p: p.name)


def _select(plugins: list[Plugin], plugin_names: list[str] | None) -> list[Plugin]:
    if not plugin_names:
        return plugins
    wanted = set(plugin_names)
    selected = [p for p in plugins if p.name in wanted]
    missing = wanted - {p.name for p in selected}
    if missing:
        logger.warning(f"Unknown plugins ignored: {sorted(missing)}")
    return selected


async def run_probe_pipeline(
    plugin_names: list[str] | None = None,
    concurrency: int = PROBE_CONCURRENCY,
    probe_timeout: float = PROBE_TIMEOUT,
    data_dir: Path | None = None,
    update_center_client: UpdateCenterClient | None = None,
    github: GitHubClient | None = None,
    git: GitClient | None = None,
    jira: JiraClient | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> ProbeBatchResult:
    """Run the probe pipeline: fetch → sync → probe → store.

    Args:
        plugin_names: Only probe these plugins. None probes every plugin.
        concurrency: Maximum plugins probed in parallel
        probe_timeout: Wall clock bound of a single probe, in seconds
        data_dir: Data directory path. Uses default if None.
        update_center_client: Client for the update-center documents
        github: GitHub client. Created from GITHUB_TOKEN if None.
        git: git client. Created if None.
        jira: Jira client. Created if None.
        progress_callback: Optional callback for progress updates (current, total)

    Returns:
        ProbeBatchResult of the pass
    """
    data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
    file_manager = FileManager(data_dir)
    update_center_client = update_center_client or UpdateCenterClient(
        cache=FileCache(data_dir / "cache")
    )
    owns_github = github is None
    github = github or GitHubClient()
    # A clone must end before the probe running it times out
    git = git or GitClient(clone_timeout=min(GIT_CLONE_TIMEOUT, probe_timeout))
    owns_jira = jira is None
    jira = jira or JiraClient()

    try:
        logger.info("Step 1/4: Fetching update-center data...")
        update_center = await update_center_client.fetch_update_center()
        documentation_links = await update_center_client.fetch_documentation_links()
        file_manager.save_update_center(update_center)

        logger.info("Step 2/4: Syncing plugin records...")
        plugins = sync_plugins(update_center, file_manager.load_plugins())
        selected = _select(plugins, plugin_names)

        logger.info(f"Step 3/4: Probing {len(selected)} plugins...")
        engine = ProbeEngine(default_probes(), probe_timeout=probe_timeout)
        work_dir = data_dir / "tmp"

        def context_factory(plugin: Plugin) -> ProbeContext:
            return ProbeContext(
                plugin.name,
                update_center,
                github=github,
                git=git,
                jira=jira,
                documentation_links=documentation_links,
                work_dir=work_dir,
            )

        result = await engine.run_batch(
            selected,
            context_factory,
            concurrency=concurrency,
            progress_callback=progress_callback,
        )

        logger.info("Step 4/4: Storing plugin records...")
        file_manager.save_plugins(plugins, merge=True)
    finally:
        if owns_github:
            github.close()
        if owns_jira:
            jira.close()

    logger.info(
        f"Probe pipeline complete in {result.duration_seconds:.1f}s: "
        f"{result.succeeded} probed, {result.failed} failed"
    )
    return result


def plan_probe_pipeline(
    plugin_names: list[str] | None = None,
    data_dir: Path | None = None,
) -> dict[str, list[str]]:
    """List the probes that would run on each stored plugin, without running them.

    Works offline from the stored records and the latest update-center
    snapshot. Source code related probes are always listed, since the last
    commit date is only known once the repository is cloned.

    Returns:
        Probe keys keyed by plugin name
    """
    data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
    file_manager = FileManager(data_dir)
    update_center = file_manager.load_update_center() or UpdateCenter()
    plugins = sync_plugins(update_center, file_manager.load_plugins())
    engine = ProbeEngine(default_probes())

    plan = {}
    for plugin in _select(plugins, plugin_names):
        context = ProbeContext(plugin.name, update_center)
        plan[plugin.name] = [probe.key for probe in engine.planned_probes(plugin, context)]
    return plan


def run_score_pipeline(
    data_dir: Path | None = None,
    registry: ScoringRegistry | None = None,
) -> ScoresFile:
    """Run the score pipeline: load → score → store.

    Args:
        data_dir: Data directory path. Uses default if None.
        registry: Scorings to apply. Defaults to the built-in scorings.

    Returns:
        The stored ScoresFile
    """
    data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
    file_manager = FileManager(data_dir)
    registry = registry or ScoringRegistry()

    plugins = file_manager.load_plugins() or []
    if not plugins:
        logger.warning("No plugin records found, run the probe pipeline first")

    computed_at = datetime.now(UTC)
    scores_file = ScoresFile(
        computed_at=computed_at,
        probe_versions={probe.key: probe.version for probe in default_probes()},
        scoring_versions=registry.versions(),
        scores=registry.score_batch(plugins, computed_at),
    )
    file_manager.save_scores(scores_file)
    logger.info(f"Scored {len(scores_file.scores)} plugins")
    return scores_file


def main() -> None:
    """Example pipeline execution on a couple of plugins."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    print("=== Pipeline Orchestration Example ===\n")
    result = asyncio.run(run_probe_pipeline(plugin_names=["mailer", "git"], concurrency=2))
    print(f"Probed {result.succeeded}/{result.total} plugins in {result.duration_seconds:.1f}s")

    scores_file = run_score_pipeline()
    for name in ("mailer", "git"):
        score = scores_file.scores.get(name)
        if score:
            print(f"  {name}: {score.value}/100")


if __name__ == "__main__":
    main()
