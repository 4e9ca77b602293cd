"""Plugin health scoring: probe Jenkins plugins and compute versioned health scores."""

__version__ = "0.1.0"
