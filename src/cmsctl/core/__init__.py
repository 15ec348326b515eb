"""Core dependency injection infrastructure for cmsctl.

Protocol-based abstractions for every external collaborator (filesystem,
environment, subprocess, CMS bootstrap, alias map) plus the production
implementations and the option Context passed to commands.
"""

from cmsctl.core.protocols import (
    BootstrapDescriptor,
    Logger,
    FileSystemService,
    ProcessExecutor,
    ProcessResult,
    EnvironmentProvider,
    ToolLocator,
    ConfigLoader,
    BootstrapLocator,
    AliasProvider,
)

from cmsctl.core.implementations import (
    ConsoleLogger,
    RealFileSystemService,
    SubprocessExecutor,
    SystemEnvironmentProvider,
    SystemToolLocator,
    YamlConfigLoader,
    MarkerBootstrapLocator,
    SitesFileAliasProvider,
    parse_sites_php,
)

from cmsctl.core.context import Context, build_context

__all__ = [
    # Protocols
    "BootstrapDescriptor",
    "Logger",
    "FileSystemService",
    "ProcessExecutor",
    "ProcessResult",
    "EnvironmentProvider",
    "ToolLocator",
    "ConfigLoader",
    "BootstrapLocator",
    "AliasProvider",
    # Implementations
    "ConsoleLogger",
    "RealFileSystemService",
    "SubprocessExecutor",
    "SystemEnvironmentProvider",
    "SystemToolLocator",
    "YamlConfigLoader",
    "MarkerBootstrapLocator",
    "SitesFileAliasProvider",
    "parse_sites_php",
    # Context
    "Context",
    "build_context",
]
