"""Error types for the highlighter's host-side surfaces."""

from __future__ import annotations

from pathlib import Path


class ConfigError(Exception):
    """Raised for an unreadable or invalid ``urclhl.toml`` configuration."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(self.format())

    def format(self) -> str:
        if self.path is None:
            return f"error: {self.message}"
        return f"error: {self.message}\n  --> {self.path}"
