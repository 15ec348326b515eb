"""
Facts about the machine cmsctl runs on.

Working directory, home directory, user name, terminal width, the null
device and the cache directory. Everything is read through injected
providers so tests can describe any host.
"""

import getpass
import logging
import shutil
from typing import List, Optional

from cmsctl.core.context import Context
from cmsctl.core.protocols import EnvironmentProvider, FileSystemService
from cmsctl.environment.os_family import OSClassifier
from cmsctl.environment.paths import normalize_path
from cmsctl.exceptions import UnwritableResourceError

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = 80


class HostEnvironment:
    """Environment lookups with well-defined fallback chains."""

    def __init__(
        self,
        env_provider: EnvironmentProvider,
        filesystem: FileSystemService,
        context: Optional[Context] = None
    ):
        self.env = env_provider
        self.fs = filesystem
        self.context = context or Context()
        self.classifier = OSClassifier(env_provider, self.context.get_option('os'))

    def _getenv(self, name: str) -> Optional[str]:
        return self.env.get_environ().get(name) or None

    def cwd(self) -> str:
        """Directory the user invoked cmsctl from.

        A wrapper script that changes directory before exec'ing cmsctl
        exports CMSCTL_OLDCWD with the original location.
        """
        return normalize_path(self._getenv('CMSCTL_OLDCWD') or self.env.get_cwd())

    def server_home(self) -> Optional[str]:
        """Home directory of the current user, None if it cannot be told."""
        home = self._getenv('HOME')
        if not home and self.classifier.is_windows():
            drive = self._getenv('HOMEDRIVE')
            path = self._getenv('HOMEPATH')
            if drive and path:
                home = drive + path
        return normalize_path(home).rstrip('/') if home else None

    def username(self) -> str:
        """Name of the current user: $USERNAME (Windows), $USER, then the password database."""
        return self._getenv('USERNAME') or self._getenv('USER') or getpass.getuser()

    def bit_bucket(self, os_token: Optional[str] = None) -> str:
        """Null device for the target OS."""
        if self.classifier.is_windows(os_token) and not self.classifier.is_cygwin(os_token):
            return 'nul'
        return '/dev/null'

    def columns(self) -> int:
        """Terminal width: 'columns' option, $COLUMNS, then the terminal itself."""
        value = self.context.get_option('columns') or self._getenv('COLUMNS')
        if value:
            try:
                return int(value)
            except (TypeError, ValueError):
                logger.debug("Ignoring non-numeric terminal width %r", value)
        return shutil.get_terminal_size((DEFAULT_COLUMNS, 24)).columns

    def cache_candidates(self, sub_dir: str = '') -> List[str]:
        """Cache locations in the order they are tried."""
        candidates = []
        configured = self.context.get_option('cache-directory')
        if configured:
            candidates.append(normalize_path(configured).rstrip('/'))
        prefix = self._getenv('CACHE_PREFIX')
        if prefix:
            candidates.append(f"{normalize_path(prefix).rstrip('/')}/cache")
        home = self.server_home()
        if home:
            candidates.append(f"{home}/.cmsctl/cache")
        tmp = normalize_path(self.fs.tempdir()).rstrip('/')
        candidates.append(f"{tmp}/cmsctl-{self.username()}/cache")

        if sub_dir:
            sub_dir = normalize_path(sub_dir).strip('/')
            candidates = [f"{c}/{sub_dir}" for c in candidates]
        return candidates

    def cache_directory(self, sub_dir: str = '') -> str:
        """Return the first writable cache directory, creating it if needed.

        Args:
            sub_dir: Subdirectory inside the cache root (e.g. "download")

        Raises:
            UnwritableResourceError: If no candidate can be created or written
        """
        attempted = self.cache_candidates(sub_dir)
        for candidate in attempted:
            try:
                self.fs.mkdir(candidate, parents=True, exist_ok=True)
            except OSError as e:
                logger.debug("Cannot create cache directory %s: %s", candidate, e)
                continue
            if self.fs.is_writable(candidate):
                return candidate
            logger.debug("Cache directory %s is not writable", candidate)

        raise UnwritableResourceError("cache directory", attempted)
