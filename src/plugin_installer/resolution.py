"""Resolution driver - Sequence requirements, sources and the resolver.

The resolution algorithm itself is app-provided (Resolver protocol). This
module builds requirements, runs resolution with deployment/frozen
constraints suspended, and optionally persists the result to a lock file.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .lock import record_specs
from .protocols import DefinitionProtocol
from .protocols import Installable
from .protocols import Resolver
from .settings import Settings
from .source_list import SourceList
from .sources import GitSource
from .sources import RegistrySource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requirement:
    """Named requirement with a version constraint (e.g. (">= 0",))."""

    name: str
    version: tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.name} ({', '.join(self.version)})"


@dataclass(frozen=True)
class ResolvedSpec:
    """Resolved plugin bound to the source and installer it was satisfied from."""

    name: str
    version: str
    source: GitSource | RegistrySource
    installer: Installable = field(compare=False, repr=False)

    def install(self) -> None:
        """Install via the bound source-specific installer."""
        self.installer.install(self)


class Definition:
    """
    Resolution definition: requirements + source list + resolver.

    resolve_remotely() runs the resolver and, when a lock path is configured
    and locking wasn't skipped, records the resolved specs in the lock file.
    """

    def __init__(
        self,
        requirements: Sequence[Requirement],
        source_list: SourceList,
        resolver: Resolver,
        lock_path: Path | None = None,
    ):
        self.requirements = list(requirements)
        self.source_list = source_list
        self.resolver = resolver
        self.lock_path = lock_path
        self._lock_skipped = False
        self._specs: list[ResolvedSpec] | None = None

    @classmethod
    def from_names(
        cls,
        names: Sequence[str],
        version: Sequence[str],
        source_list: SourceList,
        resolver: Resolver,
    ) -> "Definition":
        """Build a definition with one requirement per name, sharing one version constraint."""
        requirements = [Requirement(name=name, version=tuple(version)) for name in names]
        return cls(requirements, source_list, resolver)

    @property
    def specs(self) -> list[ResolvedSpec]:
        if self._specs is None:
            raise RuntimeError("Definition has not been resolved")
        return list(self._specs)

    def skip_lock(self) -> None:
        """Never persist the lock file for this definition."""
        self._lock_skipped = True

    def lock(self) -> None:
        if self._lock_skipped or self.lock_path is None:
            return
        record_specs(self.lock_path, self.specs)

    def resolve_remotely(self) -> list[ResolvedSpec]:
        """Resolve requirements against the source list.

        Raises:
            Exception: Whatever the resolver raises, unchanged
        """
        logger.debug(f"Resolving {', '.join(str(r) for r in self.requirements)} against {self.source_list!r}")
        self._specs = list(self.resolver.resolve(self.requirements, self.source_list))
        self.lock()
        return self.specs


def resolve_definition(definition: DefinitionProtocol, settings: Settings) -> list[ResolvedSpec]:
    """
    Resolve definition with deployment and frozen constraints suspended.

    The override lasts exactly as long as resolution and is reverted on every
    exit path. Resolver errors propagate unchanged.

    Args:
        definition: Definition to resolve
        settings: Settings to override

    Returns:
        The definition's specs after resolution, in resolver order
    """
    with settings.temporary(deployment=False, frozen=False):
        definition.resolve_remotely()
    return definition.specs
