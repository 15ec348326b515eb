"""Wiring of production dependencies for CLI commands.

Commands call load_runtime() once and receive every collaborator already
constructed. Tests build the classes directly with mocks instead.
"""
from dataclasses import dataclass
from typing import Any

from cmsctl.core import (
    Context,
    ConsoleLogger,
    MarkerBootstrapLocator,
    RealFileSystemService,
    SitesFileAliasProvider,
    SystemEnvironmentProvider,
    YamlConfigLoader,
    build_context,
)
from cmsctl.environment import (
    CommandBuilder,
    HostEnvironment,
    OSClassifier,
    RootLocator,
    SiteResolver,
)


@dataclass
class Runtime:
    context: Context
    logger: ConsoleLogger
    filesystem: RealFileSystemService
    host: HostEnvironment
    classifier: OSClassifier
    roots: RootLocator
    sites: SiteResolver
    commands: CommandBuilder


def load_runtime(args: Any, **cli_options: Any) -> Runtime:
    """Build a Runtime from parsed CLI arguments.

    Args:
        args: argparse namespace; 'config' and 'verbose' are honoured
        **cli_options: Option overrides from the command (None values ignored)

    Raises:
        ConfigurationError: If the config file is malformed
    """
    filesystem = RealFileSystemService()
    env_provider = SystemEnvironmentProvider()
    loader = YamlConfigLoader(filesystem)

    context = build_context(
        env_provider,
        filesystem,
        loader,
        config_path=getattr(args, 'config', None),
        cli_options=cli_options
    )
    host = HostEnvironment(env_provider, filesystem, context)
    roots = RootLocator(filesystem, MarkerBootstrapLocator(filesystem), host)
    sites = SiteResolver(filesystem, SitesFileAliasProvider(filesystem, loader), roots, host)

    return Runtime(
        context=context,
        logger=ConsoleLogger(verbose=getattr(args, 'verbose', False)),
        filesystem=filesystem,
        host=host,
        classifier=host.classifier,
        roots=roots,
        sites=sites,
        commands=CommandBuilder(context, host.classifier),
    )
