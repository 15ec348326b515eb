"""Production implementations of dependency injection protocols.

This module provides real implementations that wrap actual external
dependencies (filesystem, environment, subprocess, CMS markers). These are
used in production code.

For testing, use mocks or test doubles instead of these implementations.
"""

import os
import platform
import re
import shutil
import subprocess
import sys
import tempfile
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Sequence, Tuple, Union

from cmsctl.core.protocols import BootstrapDescriptor, ConfigLoader, FileSystemService
from cmsctl.exceptions import ConfigurationError


class ConsoleLogger:
    """Production logger that prints to console (stdout/stderr)."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def info(self, message: str) -> None:
        """Print info message to stdout."""
        print(message)

    def warning(self, message: str) -> None:
        """Print warning message to stdout."""
        print(f"Warning: {message}")

    def error(self, message: str) -> None:
        """Print error message to stderr."""
        print(f"Error: {message}", file=sys.stderr)

    def debug(self, message: str) -> None:
        """Print debug message to stdout when verbose."""
        if self.verbose:
            print(f"Debug: {message}")


class RealFileSystemService:
    """Production filesystem service using real pathlib and os operations."""

    def exists(self, path: Union[str, Path]) -> bool:
        return Path(path).exists()

    def is_file(self, path: Union[str, Path]) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: Union[str, Path]) -> bool:
        return Path(path).is_dir()

    def is_link(self, path: Union[str, Path]) -> bool:
        return Path(path).is_symlink()

    def realpath(self, path: Union[str, Path]) -> str:
        return os.path.realpath(path)

    def read_file(self, path: Union[str, Path]) -> str:
        """Read entire file as string."""
        with open(path, 'r') as f:
            return f.read()

    def mkdir(self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True) -> None:
        Path(path).mkdir(parents=parents, exist_ok=exist_ok)

    def is_writable(self, path: Union[str, Path]) -> bool:
        return os.access(path, os.W_OK)

    def tempdir(self) -> str:
        return tempfile.gettempdir()


class SubprocessExecutor:
    """Production process executor using real subprocess.run."""

    def run(
        self,
        cmd: List[str],
        capture_output: bool = False,
        text: bool = False,
        timeout: Optional[float] = None,
        env: Optional[Dict[str, str]] = None
    ) -> subprocess.CompletedProcess:
        """Run command to completion."""
        return subprocess.run(
            cmd,
            capture_output=capture_output,
            text=text,
            timeout=timeout,
            env=env
        )


class SystemEnvironmentProvider:
    """Production environment provider using real os and platform modules."""

    def get_environ(self) -> Dict[str, str]:
        """Get copy of environment variables."""
        return dict(os.environ)

    def get_system_type(self) -> str:
        """Get system type ('Darwin', 'Linux', etc.)."""
        return platform.system()

    def get_cwd(self) -> str:
        return os.getcwd()


class SystemToolLocator:
    """Production tool locator using real shutil.which."""

    def find_tool(self, tool_name: str) -> Optional[str]:
        """Find tool in PATH."""
        return shutil.which(tool_name)

    def has_tool(self, tool_name: str) -> bool:
        """Check if tool exists in PATH."""
        return self.find_tool(tool_name) is not None


class YamlConfigLoader:
    """Production config loader using real YAML parser."""

    def __init__(self, filesystem: FileSystemService):
        """Initialize with filesystem service for reading files."""
        self.fs = filesystem

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file and return parsed dictionary.

        An empty file yields an empty dict.

        Raises:
            ConfigurationError: If the file is not valid YAML or its top
                level is not a mapping
        """
        content = self.fs.read_file(path)
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a mapping at the top of {path}, got {type(data).__name__}"
            )
        return data


# Marker files identifying a CMS root, most recent release first.
DEFAULT_BOOTSTRAP_MARKERS: Tuple[Tuple[str, str], ...] = (
    ('drupal8', 'core/lib/Drupal.php'),
    ('drupal7', 'includes/bootstrap.inc'),
)


class MarkerBootstrapLocator:
    """Root-validity predicate based on the presence of a marker file."""

    def __init__(
        self,
        filesystem: FileSystemService,
        markers: Sequence[Tuple[str, str]] = DEFAULT_BOOTSTRAP_MARKERS
    ):
        self.fs = filesystem
        self.markers = tuple(markers)

    def get_bootstrap(self, path: str) -> Optional[BootstrapDescriptor]:
        if not path:
            return None
        for name, marker in self.markers:
            if self.fs.is_file(f"{path}/{marker}"):
                return BootstrapDescriptor(name=name, marker=marker, root=path)
        return None


# $sites['example.com.sub'] = 'example';
_SITES_PHP_ENTRY = re.compile(
    r"""\$sites\s*\[\s*(['"])(?P<key>.*?)\1\s*\]\s*=\s*(['"])(?P<dir>.*?)\3\s*;"""
)


def parse_sites_php(content: str) -> Dict[str, str]:
    """Extract literal $sites[...] = '...'; assignments from a sites.php file.

    The file is never executed. Comment lines are skipped; later
    assignments to the same key overwrite earlier ones.
    """
    sites: Dict[str, str] = {}
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith(('//', '#', '*', '/*')):
            continue
        for match in _SITES_PHP_ENTRY.finditer(stripped):
            sites[match.group('key')] = match.group('dir')
    return sites


class SitesFileAliasProvider:
    """Loads the alias map from <root>/sites/sites.yml or sites/sites.php.

    sites.yml is a flat YAML mapping and takes precedence. sites.php is
    read declaratively with parse_sites_php().
    """

    def __init__(self, filesystem: FileSystemService, config_loader: ConfigLoader):
        self.fs = filesystem
        self.loader = config_loader

    def load_aliases(self, root: str) -> Dict[str, str]:
        if not root:
            return {}

        yaml_path = f"{root}/sites/sites.yml"
        if self.fs.is_file(yaml_path):
            data = self.loader.load_yaml(yaml_path)
            aliases = {}
            for key, value in data.items():
                if not isinstance(value, str):
                    raise ConfigurationError(
                        f"Alias '{key}' in {yaml_path} must map to a directory name"
                    )
                aliases[str(key)] = value
            return aliases

        php_path = f"{root}/sites/sites.php"
        if self.fs.is_file(php_path):
            return parse_sites_php(self.fs.read_file(php_path))

        return {}
