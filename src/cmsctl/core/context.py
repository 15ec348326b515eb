"""Configuration context for cmsctl commands.

A Context replaces process-wide option lookups: each command builds one
from the config file, the environment and its own CLI options, then hands
it to the classes that need option values.

Precedence (lowest to highest):
    built-in defaults < cmsctl.yml < environment variables < CLI options
"""

import logging
import os
from typing import Any, Dict, Mapping, Optional

from cmsctl.core.protocols import ConfigLoader, EnvironmentProvider, FileSystemService

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "cmsctl.yml"

DEFAULT_OPTIONS: Dict[str, Any] = {
    'php': None,
    'php-options': None,
    'cache-directory': None,
    'columns': None,
    'os': None,
    'root': None,
    'uri': None,
    'command': 'cmsctl',
}

# Environment variable -> option name
ENV_OPTION_OVERRIDES: Dict[str, str] = {
    'CMSCTL_OS': 'os',
    'CMSCTL_PHP': 'php',
    'PHP_OPTIONS': 'php-options',
}


class Context:
    """Option values visible to one cmsctl invocation."""

    def __init__(self, options: Optional[Mapping[str, Any]] = None, config_path: Optional[str] = None):
        self._options: Dict[str, Any] = dict(DEFAULT_OPTIONS)
        if options:
            self._options.update(options)
        self.config_path = config_path

    def get_option(self, name: str, default: Any = None) -> Any:
        """Return an option value, or default when unset or None."""
        value = self._options.get(name)
        return default if value is None else value

    def set_option(self, name: str, value: Any) -> None:
        self._options[name] = value

    def options(self) -> Dict[str, Any]:
        return dict(self._options)


def default_config_path(env: Mapping[str, str]) -> Optional[str]:
    """Locate cmsctl.yml: $CMSCTL_CONFIG, else ~/.cmsctl/cmsctl.yml."""
    explicit = env.get('CMSCTL_CONFIG')
    if explicit:
        return explicit
    home = env.get('HOME')
    if not home and env.get('HOMEDRIVE') and env.get('HOMEPATH'):
        home = env['HOMEDRIVE'] + env['HOMEPATH']
    if not home:
        return None
    return os.path.join(home, '.cmsctl', CONFIG_FILENAME)


def build_context(
    env_provider: EnvironmentProvider,
    filesystem: FileSystemService,
    config_loader: ConfigLoader,
    config_path: Optional[str] = None,
    cli_options: Optional[Mapping[str, Any]] = None
) -> Context:
    """Assemble a Context from config file, environment and CLI options.

    Args:
        env_provider: Source of environment variables
        filesystem: Used to test whether the config file exists
        config_loader: YAML loader for the config file
        config_path: Explicit --config path; falls back to default_config_path()
        cli_options: Options given on the command line (None values ignored)

    Returns:
        Populated Context

    Raises:
        ConfigurationError: If the config file exists but is malformed
    """
    env = env_provider.get_environ()
    options: Dict[str, Any] = {}

    path = config_path or default_config_path(env)
    loaded_path = None
    if path and filesystem.is_file(path):
        logger.debug("Loading configuration from %s", path)
        options.update(config_loader.load_yaml(path))
        loaded_path = path
    elif config_path:
        # An explicit --config that does not exist is worth mentioning
        logger.warning("Configuration file %s not found, using defaults", config_path)

    for var, option in ENV_OPTION_OVERRIDES.items():
        if env.get(var):
            options[option] = env[var]

    if cli_options:
        options.update({k: v for k, v in cli_options.items() if v is not None})

    return Context(options, config_path=loaded_path)
