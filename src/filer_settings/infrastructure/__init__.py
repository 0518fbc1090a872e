"""Infrastructure layer — concrete implementations of domain ports.

Sub-packages:
- config: settings file codec, path resolution, store and shared-config adapter
"""

from filer_settings.infrastructure.config.settings_store import SettingsStore
from filer_settings.infrastructure.config.shared_config import (
    InMemorySharedConfig,
    SharedConfigAdapter,
)

__all__ = [
    "InMemorySharedConfig",
    "SettingsStore",
    "SharedConfigAdapter",
]
