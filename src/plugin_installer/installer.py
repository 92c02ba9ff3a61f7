"""Plugin installation orchestration (protocol-based).

Per KERNEL_PHILOSOPHY: Mechanism not policy - the library doesn't know HOW to
resolve or fetch plugins, apps provide Resolver and Installable
implementations.

Pipeline (strictly forward):
1. Validate options (conflicting sources, branch/ref misuse)
2. Build the source list
3. Resolve with deployment/frozen constraints suspended
4. Install each resolved spec via its bound installer
"""

import logging
from collections.abc import Iterable
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .options import InstallRequest
from .protocols import DefinitionProtocol
from .protocols import Resolver
from .resolution import Definition
from .resolution import ResolvedSpec
from .resolution import resolve_definition
from .settings import Settings
from .source_list import build_source_list

logger = logging.getLogger(__name__)

InstallResult = dict[str, ResolvedSpec]


def install_from_specs(specs: Iterable[ResolvedSpec]) -> InstallResult:
    """
    Install resolved specs in resolver order.

    Fail-fast: the first installer failure propagates and no result is returned.

    Args:
        specs: Resolved specs

    Returns:
        Map of plugin name to the spec it was installed with
    """
    result: InstallResult = {}
    for spec in specs:
        logger.debug(f"Installing {spec.name} {spec.version} from {spec.source}")
        spec.install()
        result[spec.name] = spec
    return result


class PluginInstaller:
    """
    Install plugins into a fixed plugin root (with injected resolver and settings).

    Example:
        >>> installer = PluginInstaller(
        ...     resolver=my_resolver,
        ...     plugin_root=Path.home() / ".myapp" / "plugins",
        ...     default_remotes=["https://plugins.example.org"],
        ... )
        >>> result = installer.install(["foo"], {"git": "https://github.com/org/foo"})
        >>> print(result["foo"].version)
    """

    def __init__(
        self,
        resolver: Resolver,
        plugin_root: Path,
        settings: Settings | None = None,
        default_remotes: Sequence[str] | None = None,
    ):
        self.resolver = resolver
        self.plugin_root = plugin_root
        self.settings = settings if settings is not None else Settings.from_env()
        self.default_remotes = list(default_remotes or [])

    def install(self, names: Sequence[str], options: dict[str, Any]) -> InstallResult:
        """
        Install plugins by name from git or registry sources.

        Args:
            names: Plugin names (non-empty)
            options: Installation options (git, local_git, source, branch, ref, version).
                A local_git alias is rewritten to git in place.

        Returns:
            Map of plugin name to resolved spec, requested and transitive

        Raises:
            ConflictingSourceError: If mutually exclusive sources are given
            InvalidOptionError: If options are malformed or no source is available
            Exception: Resolver and installer errors, unchanged
        """
        request = InstallRequest.from_call(names, options)
        source_list = build_source_list(request.options, self.default_remotes)

        logger.info(f"Installing plugins {', '.join(request.names)} from {source_list!r}")
        self.settings.configure_plugin_root(self.plugin_root)

        definition = Definition.from_names(request.names, request.version, source_list, self.resolver)
        return self.install_definition(definition)

    def install_definition(self, definition: DefinitionProtocol) -> InstallResult:
        """
        Install plugins from a prebuilt definition, never persisting its lock.

        Args:
            definition: Definition built upstream (e.g. from a manifest)

        Returns:
            Map of plugin name to resolved spec
        """
        definition.skip_lock()
        specs = resolve_definition(definition, self.settings)
        result = install_from_specs(specs)
        logger.info(f"Installed {len(result)} plugins: {', '.join(result)}")
        return result
