"""Protocols for resolution and installation collaborators.

Per KERNEL_PHILOSOPHY: Protocol-based extensibility over configuration.
Per IMPLEMENTATION_PHILOSOPHY: Composition over inheritance.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING
from typing import Protocol
from typing import runtime_checkable

if TYPE_CHECKING:
    from .resolution import Requirement
    from .resolution import ResolvedSpec
    from .source_list import SourceList


@runtime_checkable
class Resolver(Protocol):
    """Protocol for dependency resolvers.

    Apps provide the resolution algorithm; this library only sequences it.
    """

    def resolve(self, requirements: "Sequence[Requirement]", source_list: "SourceList") -> "list[ResolvedSpec]":
        """Resolve requirements against the given sources.

        Args:
            requirements: Named requirements sharing a version constraint
            source_list: Sources to resolve against

        Returns:
            Consistent set of resolved specs, requested and transitive

        Raises:
            Exception: If requirements are unsatisfiable or a source is unreachable
        """
        ...


@runtime_checkable
class Installable(Protocol):
    """Protocol for provenance-specific installers (registry, git, etc.).

    Bound to the source a spec was resolved from.
    """

    def install(self, spec: "ResolvedSpec") -> None:
        """Fetch and unpack the resolved spec.

        Raises:
            Exception: If fetch or unpack fails
        """
        ...


@runtime_checkable
class DefinitionProtocol(Protocol):
    """Protocol for prebuilt resolution definitions."""

    @property
    def specs(self) -> "list[ResolvedSpec]": ...

    def resolve_remotely(self) -> object:
        """Resolve in place; results are read back from specs."""
        ...

    def skip_lock(self) -> None: ...
