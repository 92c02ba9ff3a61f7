"""plugin-installer - Install plugins from registry or git sources.

Per KERNEL_PHILOSOPHY: This is library mechanism, apps inject policy
(resolver, installers, plugin root, default remotes).
"""

from .exceptions import ConflictingSourceError
from .exceptions import InstallError
from .exceptions import InvalidOptionError
from .exceptions import PluginError
from .exceptions import ResolutionError
from .installer import InstallResult
from .installer import PluginInstaller
from .installer import install_from_specs
from .lock import PluginLockEntry
from .lock import load_lock
from .lock import record_specs
from .options import InstallRequest
from .options import validate_options
from .protocols import DefinitionProtocol
from .protocols import Installable
from .protocols import Resolver
from .resolution import Definition
from .resolution import Requirement
from .resolution import ResolvedSpec
from .resolution import resolve_definition
from .settings import Settings
from .source_list import SourceList
from .source_list import build_source_list
from .sources import GitSource
from .sources import RegistrySource
from .sources import SourceDescriptor
from .sources import source_from_options

__all__ = [
    # Installation
    "PluginInstaller",
    "InstallResult",
    "install_from_specs",
    # Options
    "InstallRequest",
    "validate_options",
    # Sources
    "GitSource",
    "RegistrySource",
    "SourceDescriptor",
    "source_from_options",
    "SourceList",
    "build_source_list",
    # Resolution
    "Definition",
    "Requirement",
    "ResolvedSpec",
    "resolve_definition",
    # Protocols
    "Resolver",
    "Installable",
    "DefinitionProtocol",
    # Settings
    "Settings",
    # Lock file
    "PluginLockEntry",
    "load_lock",
    "record_specs",
    # Exceptions
    "PluginError",
    "ConflictingSourceError",
    "InvalidOptionError",
    "ResolutionError",
    "InstallError",
]

__version__ = "0.1.0"
