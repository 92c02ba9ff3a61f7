"""Source list - Ordered, deduplicated sources consumed by resolution.

Built fresh for each installation call; never shared across calls.
"""

import logging
from collections.abc import Iterator
from collections.abc import Mapping
from typing import Any

from .sources import GitSource
from .sources import RegistrySource
from .sources import source_from_options

logger = logging.getLogger(__name__)


class SourceList:
    """
    Ordered collection of source descriptors with set semantics.

    - Git sources: adding an identical git source again is a no-op
    - Registry remotes: accumulate into one registry source, duplicates ignored

    Iteration yields git sources in insertion order, then the registry source
    (if any remotes were added).
    """

    def __init__(self) -> None:
        self._git_sources: list[GitSource] = []
        self._remotes: list[str] = []

    def add_git_source(self, source: GitSource) -> GitSource:
        """Add git source, returning the already-declared one if identical."""
        for existing in self._git_sources:
            if existing == source:
                logger.debug(f"Git source already declared: {source}")
                return existing
        self._git_sources.append(source)
        return source

    def add_registry_remote(self, remote: str) -> None:
        """Add registry remote (additive, duplicates ignored)."""
        if remote not in self._remotes:
            self._remotes.append(remote)

    @property
    def registry_source(self) -> RegistrySource | None:
        if not self._remotes:
            return None
        return RegistrySource(remotes=tuple(self._remotes))

    def __iter__(self) -> Iterator[GitSource | RegistrySource]:
        yield from self._git_sources
        registry = self.registry_source
        if registry is not None:
            yield registry

    def __len__(self) -> int:
        return len(self._git_sources) + (1 if self._remotes else 0)

    def __repr__(self) -> str:
        return f"SourceList({', '.join(str(source) for source in self)})"


def build_source_list(options: Mapping[str, Any], default_remotes: list[str] | None = None) -> SourceList:
    """
    Compose the source list for validated options.

    A git option yields one GitSource; otherwise each explicit (or default)
    registry remote is added.

    Args:
        options: Validated installation options
        default_remotes: Configured remotes used when no source option is given

    Returns:
        SourceList with at least one descriptor

    Raises:
        InvalidOptionError: If no git source, explicit source or default remote is available
    """
    source = source_from_options(options, default_remotes)
    source_list = SourceList()

    if isinstance(source, GitSource):
        source_list.add_git_source(source)
    else:
        for remote in source.remotes:
            source_list.add_registry_remote(remote)

    logger.debug(f"Built {source_list!r}")
    return source_list
