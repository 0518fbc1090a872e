"""Port (ABC) for settings persistence.

Domain layer interface — infrastructure provides the concrete implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from filer_settings.domain.models.settings import FilerSettings


class SettingsPort(ABC):
    """Abstract interface for loading / saving profile settings."""

    @property
    @abstractmethod
    def settings(self) -> FilerSettings:
        """The live settings record."""

    @abstractmethod
    def load(self, profile: str) -> bool:
        """Load *profile*; missing files and keys fall back to defaults."""

    @abstractmethod
    def save(self, profile: str = "") -> bool:
        """Persist to *profile* (default: the last loaded one). False on I/O failure."""

    @abstractmethod
    def load_file(self, path: Path) -> bool:
        """Load settings from an explicit file path."""

    @abstractmethod
    def save_file(self, path: Path) -> bool:
        """Persist settings to an explicit file path."""

    @abstractmethod
    def reset_to_defaults(self) -> FilerSettings:
        """Restore every field to its default and return the record."""
