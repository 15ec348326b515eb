"""Protocol definitions for dependency injection.

Every collaborator the discovery code touches (filesystem, environment,
subprocess, CMS bootstrap, site alias map) is described here as a Protocol.
Any class implementing the methods satisfies the Protocol without explicit
inheritance, so tests can hand in a Mock or a tiny fake.
"""

from dataclasses import dataclass
from typing import Protocol, Dict, Any, Optional, List, Union
from pathlib import Path


@dataclass(frozen=True)
class BootstrapDescriptor:
    """Opaque confirmation that a directory is a CMS root.

    Attributes:
        name: Bootstrap flavour that matched (e.g. "drupal8")
        marker: Marker file, relative to the root, that was found
        root: Directory the marker was found in
    """
    name: str
    marker: str
    root: str


class Logger(Protocol):
    """Abstraction for user-facing messages."""

    def info(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...

    def debug(self, message: str) -> None:
        ...


class FileSystemService(Protocol):
    """Abstraction for filesystem operations.

    Wraps the handful of Path operations root and site discovery need so
    unit tests can describe a directory tree as a dict.
    """

    def exists(self, path: Union[str, Path]) -> bool:
        """Check if path exists."""
        ...

    def is_file(self, path: Union[str, Path]) -> bool:
        """Check if path is a file."""
        ...

    def is_dir(self, path: Union[str, Path]) -> bool:
        """Check if path is a directory."""
        ...

    def is_link(self, path: Union[str, Path]) -> bool:
        """Check if path is a symbolic link."""
        ...

    def realpath(self, path: Union[str, Path]) -> str:
        """Resolve symlinks and return the canonical path."""
        ...

    def read_file(self, path: Union[str, Path]) -> str:
        """Read entire file as string."""
        ...

    def mkdir(self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True) -> None:
        """Create directory (with parents if specified)."""
        ...

    def is_writable(self, path: Union[str, Path]) -> bool:
        """Check if the current user may write into path."""
        ...

    def tempdir(self) -> str:
        """Return the system temporary directory."""
        ...


class ProcessResult(Protocol):
    """Completed process as returned by ProcessExecutor.run()."""

    returncode: int
    stdout: str
    stderr: str


class ProcessExecutor(Protocol):
    """Abstraction for running short external commands."""

    def run(
        self,
        cmd: List[str],
        capture_output: bool = False,
        text: bool = False,
        timeout: Optional[float] = None,
        env: Optional[Dict[str, str]] = None
    ) -> ProcessResult:
        """Run command to completion and return its result."""
        ...


class EnvironmentProvider(Protocol):
    """Abstraction for environment access.

    Wraps os.environ, os.getcwd() and platform.system() so tests can
    pretend to be on any platform.
    """

    def get_environ(self) -> Dict[str, str]:
        """Get copy of environment variables."""
        ...

    def get_system_type(self) -> str:
        """Get system type ('Darwin', 'Linux', 'Windows', 'CYGWIN_NT-10.0', ...)."""
        ...

    def get_cwd(self) -> str:
        """Get the process working directory."""
        ...


class ToolLocator(Protocol):
    """Abstraction for external tool discovery (shutil.which)."""

    def find_tool(self, tool_name: str) -> Optional[str]:
        ...

    def has_tool(self, tool_name: str) -> bool:
        ...


class ConfigLoader(Protocol):
    """Abstraction for configuration file loading."""

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file and return parsed dictionary."""
        ...


class BootstrapLocator(Protocol):
    """Root-validity predicate supplied by the CMS bootstrap.

    Returns a descriptor when the marker file of a supported CMS release
    exists under path, None otherwise. File contents are never inspected.
    """

    def get_bootstrap(self, path: str) -> Optional[BootstrapDescriptor]:
        ...


class AliasProvider(Protocol):
    """Source of the multi-site alias map for a CMS root."""

    def load_aliases(self, root: str) -> Dict[str, str]:
        """Return {alias key: directory under sites/}, empty if none."""
        ...
