"""Plugin lock file - Resolved plugins recorded for reproducibility.

Written by Definition.lock() after resolution; plugin installs skip it.

Lock format (JSON):
{
  "version": "1.0",
  "plugins": {
    "foo": {
      "name": "foo",
      "version": "1.2.0",
      "source": "registry(https://plugins.example.org)",
      "locked_at": "2026-01-01T12:00:00+00:00"
    }
  }
}
"""

import logging
from collections.abc import Iterable
from datetime import UTC
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

if TYPE_CHECKING:
    from .resolution import ResolvedSpec

logger = logging.getLogger(__name__)

LOCK_VERSION = "1.0"


class PluginLockEntry(BaseModel):
    """One locked plugin."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    version: str
    source: str
    locked_at: str


class PluginLockFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: str = LOCK_VERSION
    plugins: dict[str, PluginLockEntry] = Field(default_factory=dict)


def load_lock(lock_path: Path) -> dict[str, PluginLockEntry]:
    """
    Read locked plugins, treating a missing or unreadable lock as empty.

    Args:
        lock_path: Path to lock file (app determines location)

    Returns:
        Map of plugin name to lock entry
    """
    if not lock_path.exists():
        return {}

    try:
        lock_file = PluginLockFile.model_validate_json(lock_path.read_text())
    except (OSError, ValidationError) as e:
        logger.error(f"Ignoring unreadable lock file {lock_path}: {e}")
        return {}

    if lock_file.version != LOCK_VERSION:
        logger.warning(f"Lock file version mismatch: expected {LOCK_VERSION}, got {lock_file.version}")
    return lock_file.plugins


def record_specs(lock_path: Path, specs: "Iterable[ResolvedSpec]") -> None:
    """
    Add or update lock entries for resolved specs, keeping other entries.

    Args:
        lock_path: Path to lock file
        specs: Resolved specs to lock
    """
    plugins = load_lock(lock_path)
    locked_at = datetime.now(UTC).isoformat()
    for spec in specs:
        plugins[spec.name] = PluginLockEntry(
            name=spec.name,
            version=spec.version,
            source=str(spec.source),
            locked_at=locked_at,
        )

    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock_path.write_text(PluginLockFile(plugins=plugins).model_dump_json(indent=2))
    logger.debug(f"Locked {len(plugins)} plugins in {lock_path}")
