"""Installer settings with scoped temporary overrides.

Settings are process-global state shared by every installation; overrides
are serialized with a re-entrant lock so concurrent installs never
interleave them.
"""

import logging
import os
import threading
from collections.abc import Iterator
from collections.abc import Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLUGIN_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_MISSING = object()


def _parse_env_value(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return value


class Settings:
    """
    Key/value installer settings.

    Recognized keys:
    - deployment: environment forbids changing installed dependencies
    - frozen: lock file must not change
    - path: directory plugins are installed into
    """

    _override_lock = threading.RLock()

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = dict(values or {})

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Load settings from PLUGIN_* environment variables.

        Example:
            >>> Settings.from_env({"PLUGIN_FROZEN": "true"})["frozen"]
            True
        """
        environ = os.environ if environ is None else environ
        values = {
            key[len(ENV_PREFIX) :].lower(): _parse_env_value(value)
            for key, value in environ.items()
            if key.startswith(ENV_PREFIX)
        }
        return cls(values)

    def __getitem__(self, key: str) -> Any:
        return self._values.get(key)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def configure_plugin_root(self, plugin_root: Path) -> None:
        """Create the plugin root and point installs at it."""
        plugin_root.mkdir(parents=True, exist_ok=True)
        self.set("path", str(plugin_root))

    @contextmanager
    def temporary(self, **overrides: Any) -> Iterator["Settings"]:
        """
        Override settings for the duration of the block.

        Previous values (or their absence) are restored on every exit path,
        including exceptions raised inside the block.

        Example:
            >>> with settings.temporary(deployment=False, frozen=False):
            ...     definition.resolve_remotely()
        """
        with self._override_lock:
            previous = {key: self._values.get(key, _MISSING) for key in overrides}
            self._values.update(overrides)
            logger.debug(f"Temporary settings override: {overrides}")
            try:
                yield self
            finally:
                for key, value in previous.items():
                    if value is _MISSING:
                        self._values.pop(key, None)
                    else:
                        self._values[key] = value
                logger.debug(f"Restored settings: {sorted(overrides)}")
