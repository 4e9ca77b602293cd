"""File-based storage layer for plugin health data.

Provides operations for:
- Update-center snapshots (immutable, timestamped)
- Plugin records with their probe results
- Computed scores (latest run and history)
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pluginhealth.consts import DEFAULT_DATA_DIR
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_storage import PluginsFile, ScoresFile
from pluginhealth.models.model_update_center import UpdateCenter

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y%m%d_%H%M%S"


class FileManager:
    """File-based storage manager for plugin health data.

    Directory structure:
        data/
        ├── raw/update_center/{date}_update_center.json  # Immutable snapshots
        ├── raw/update_center/latest.json                # Most recent snapshot
        ├── processed/plugins.json                       # Plugin records and probe results
        ├── processed/scores.json                        # Latest score run
        └── processed/scores/{date}_scores.json          # Score history
    """

    def __init__(self, data_dir: Path | str = DEFAULT_DATA_DIR):
        """Initialize FileManager with data directory.

        Args:
            data_dir: Root directory for all data files.
        """
        self.data_dir = Path(data_dir)
        self._update_center_dir = self.data_dir / "raw" / "update_center"
        self._processed_dir = self.data_dir / "processed"
        self._scores_history_dir = self._processed_dir / "scores"

    def _ensure_dirs(self, *dirs: Path) -> None:
        """Create directories if they don't exist."""
        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)

    # === UPDATE-CENTER SNAPSHOTS ===

    def save_update_center(self, update_center: UpdateCenter) -> Path:
        """Save an update-center snapshot with timestamp.

        Snapshots are immutable once written. Creates a timestamped file and
        refreshes latest.json.

        Args:
            update_center: Snapshot to save.

        Returns:
            Path to the timestamped snapshot file.
        """
        self._ensure_dirs(self._update_center_dir)
        date_str = datetime.now(UTC).strftime(DATE_FORMAT)
        content = update_center.model_dump_json(by_alias=True, indent=2)

        snapshot_path = self._update_center_dir / f"{date_str}_update_center.json"
        snapshot_path.write_text(content, encoding="utf-8")
        (self._update_center_dir / "latest.json").write_text(content, encoding="utf-8")
        logger.info(
            f"Saved update-center snapshot: {snapshot_path} ({len(update_center.plugins)} plugins)"
        )
        return snapshot_path

    def load_update_center(self, date: str | None = None) -> UpdateCenter | None:
        """Load an update-center snapshot.

        Args:
            date: Optional date string (YYYYMMDD_HHMMSS). If None, loads latest.

        Returns:
            UpdateCenter if found, None otherwise.
        """
        if date:
            path = self._update_center_dir / f"{date}_update_center.json"
        else:
            path = self._update_center_dir / "latest.json"

        if not path.exists():
            logger.warning(f"Update-center snapshot not found: {path}")
            return None

        data = json.loads(path.read_text(encoding="utf-8"))
        return UpdateCenter.model_validate(data)

    # === PLUGIN RECORDS ===

    def save_plugins(self, plugins: list[Plugin], merge: bool = True) -> Path:
        """Save plugin records.

        Args:
            plugins: Plugin records to save.
            merge: If True, records already stored but absent from ``plugins``
                are kept. Records present in both are replaced.

        Returns:
            Path to the saved file.
        """
        self._ensure_dirs(self._processed_dir)
        path = self._processed_dir / "plugins.json"

        by_name: dict[str, Plugin] = {}
        if merge:
            by_name = {plugin.name: plugin for plugin in self.load_plugins() or []}
        for plugin in plugins:
            by_name[plugin.name] = plugin

        plugins_file = PluginsFile(plugins=sorted(by_name.values(), key=lambda p: p.name))
        path.write_text(plugins_file.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Saved plugins: {path} ({len(plugins_file.plugins)} plugins)")
        return path

    def load_plugins(self) -> list[Plugin] | None:
        """Load plugin records.

        Returns:
            List of plugins if found, None otherwise.
        """
        path = self._processed_dir / "plugins.json"
        if not path.exists():
            logger.warning(f"Plugin records not found: {path}")
            return None

        data = json.loads(path.read_text(encoding="utf-8"))
        return PluginsFile.model_validate(data).plugins

    def load_plugin(self, name: str) -> Plugin | None:
        """Load a single plugin record by name."""
        return next((p for p in self.load_plugins() or [] if p.name == name), None)

    # === SCORES ===

    def save_scores(self, scores_file: ScoresFile) -> Path:
        """Save a score run as the latest scores and into the history.

        Args:
            scores_file: ScoresFile containing all plugin scores.

        Returns:
            Path to the history file.
        """
        self._ensure_dirs(self._scores_history_dir)
        content = scores_file.model_dump_json(indent=2)
        date_str = scores_file.computed_at.astimezone(UTC).strftime(DATE_FORMAT)

        history_path = self._scores_history_dir / f"{date_str}_scores.json"
        history_path.write_text(content, encoding="utf-8")
        (self._processed_dir / "scores.json").write_text(content, encoding="utf-8")
        logger.info(f"Saved scores: {history_path} ({len(scores_file.scores)} plugins)")
        return history_path

    def load_scores(self, date: str | None = None) -> ScoresFile | None:
        """Load a score run.

        Args:
            date: Optional date string (YYYYMMDD_HHMMSS). If None, loads latest.

        Returns:
            ScoresFile if found, None otherwise.
        """
        if date:
            path = self._scores_history_dir / f"{date}_scores.json"
        else:
            path = self._processed_dir / "scores.json"

        if not path.exists():
            logger.warning(f"Scores not found: {path}")
            return None

        data = json.loads(path.read_text(encoding="utf-8"))
        return ScoresFile.model_validate(data)

    def list_score_runs(self) -> list[str]:
        """List available score run dates, most recent first."""
        if not self._scores_history_dir.exists():
            return []

        dates = [f.stem.removesuffix("_scores") for f in self._scores_history_dir.glob("*_scores.json")]
        return sorted(dates, reverse=True)
