"""Port: shared configuration — the desktop library's own config object.

Some settings are mirrored into a configuration object owned by the file
management library, which other components watch for change notifications.
"""

from abc import ABC, abstractmethod
from typing import Any


class SharedConfigPort(ABC):
    """Contract for an externally owned configuration object."""

    @abstractmethod
    def set_field(self, name: str, value: Any) -> None:
        """Store *value* under the library's field *name*."""

    @abstractmethod
    def notify(self, change_key: str) -> None:
        """Emit the library's change notification for *change_key*."""
