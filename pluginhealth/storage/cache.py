"""On-disk cache of downloaded JSON documents, keyed by URL."""

import hashlib
import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from pluginhealth.consts import DEFAULT_DATA_DIR

logger = logging.getLogger(__name__)


class CachedDocument(BaseModel):
    """A cached document and its expiry. ``expires_at`` None never expires."""

    url: str
    fetched_at: datetime
    expires_at: datetime | None = None
    document: Any = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at


class FileCache:
    """Caches documents as one JSON file per URL.

    Layout: ``{cache_dir}/{namespace}/{sha256(url)[:16]}.json``
    """

    def __init__(self, cache_dir: Path | str | None = None, default_ttl: int = 0):
        """Initialize FileCache.

        Args:
            cache_dir: Root of the cache. Defaults to {DEFAULT_DATA_DIR}/cache.
            default_ttl: Lifetime of an entry in seconds, 0 for no expiry
        """
        self.cache_dir = Path(cache_dir) if cache_dir is not None else DEFAULT_DATA_DIR / "cache"
        self.default_ttl = default_ttl

    def _entry_path(self, url: str, namespace: str) -> Path:
        name = hashlib.sha256(url.encode()).hexdigest()[:16]
        return self.cache_dir / namespace / f"{name}.json"

    def get(self, url: str, namespace: str = "documents") -> Any | None:
        """Return the cached document for a URL, or None when absent or expired."""
        path = self._entry_path(url, namespace)
        if not path.is_file():
            return None

        try:
            entry = CachedDocument.model_validate_json(path.read_bytes())
        except ValidationError as e:
            logger.warning(f"Discarding unreadable cache entry {path.name}: {e.error_count()} errors")
            path.unlink(missing_ok=True)
            return None

        if entry.is_expired():
            logger.debug(f"Cache entry for {url} expired at {entry.expires_at}")
            path.unlink(missing_ok=True)
            return None
        return entry.document

    def put(self, url: str, document: Any, namespace: str = "documents", ttl: int | None = None) -> None:
        """Store a JSON-serializable document. ``ttl=None`` uses the default TTL."""
        ttl = self.default_ttl if ttl is None else ttl
        now = datetime.now(UTC)
        entry = CachedDocument(
            url=url,
            fetched_at=now,
            expires_at=now + timedelta(seconds=ttl) if ttl > 0 else None,
            document=document,
        )

        path = self._entry_path(url, namespace)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(entry.model_dump_json(), encoding="utf-8")
        logger.debug(f"Cached {url} (ttl={ttl}s)")

    def invalidate(self, url: str, namespace: str = "documents") -> bool:
        """Drop the entry of a URL. Returns True if there was one."""
        path = self._entry_path(url, namespace)
        if not path.is_file():
            return False
        path.unlink()
        return True

    def clear(self, namespace: str | None = None) -> int:
        """Drop every entry of a namespace, or of the whole cache.

        Returns:
            Number of entries removed
        """
        if namespace is not None:
            paths = list((self.cache_dir / namespace).glob("*.json"))
        else:
            paths = list(self.cache_dir.glob("*/*.json"))
        for path in paths:
            path.unlink()
        logger.info(f"Cleared {len(paths)} cache entries")
        return len(paths)
