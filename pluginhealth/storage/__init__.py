"""File-based persistence for plugin records, scores and downloads."""

from pluginhealth.storage.cache import FileCache
from pluginhealth.storage.file_manager import FileManager

__all__ = ["FileCache", "FileManager"]
