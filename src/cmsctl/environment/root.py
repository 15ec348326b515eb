"""CMS root discovery by walking up from a start directory."""

import logging
import os
from typing import Optional

from cmsctl.core.protocols import BootstrapDescriptor, BootstrapLocator, FileSystemService
from cmsctl.environment.host import HostEnvironment
from cmsctl.environment.paths import absolute_path, normalize_path, shift_path_up

logger = logging.getLogger(__name__)


class RootLocator:
    """Finds the CMS root that contains a directory.

    A directory is a root when the bootstrap collaborator recognizes its
    marker file. Not finding a root is an ordinary outcome: locate_root()
    returns None.
    """

    def __init__(
        self,
        filesystem: FileSystemService,
        bootstrap: BootstrapLocator,
        host: Optional[HostEnvironment] = None
    ):
        self.fs = filesystem
        self.bootstrap = bootstrap
        self.host = host

    def valid_root(self, path: Optional[str]) -> Optional[BootstrapDescriptor]:
        """Return the bootstrap descriptor for path, or None if it is not a root."""
        if not path:
            return None
        return self.bootstrap.get_bootstrap(path)

    def invocation_dir(self) -> str:
        """Directory relative start paths are resolved against."""
        if self.host is not None:
            return self.host.cwd()
        return normalize_path(os.getcwd())

    def _follow(self, path: str) -> str:
        if self.fs.is_link(path):
            return normalize_path(self.fs.realpath(path))
        return path

    def _walk(self, start_path: str, follow_symlinks: bool) -> Optional[str]:
        path = self._follow(start_path) if follow_symlinks else start_path
        steps = 0
        while path:
            if self.valid_root(path):
                logger.debug(
                    "Found root %s after %d step(s) (follow_symlinks=%s)",
                    path, steps, follow_symlinks
                )
                return path
            path = shift_path_up(path)
            if path and follow_symlinks:
                path = self._follow(path)
            steps += 1
        return None

    def locate_root(self, start_path: Optional[str] = None) -> Optional[str]:
        """Locate the root at or above start_path.

        Two passes are made: the first resolves symlinks at every step, the
        second walks the literal path. The first pass to find a root wins.

        Args:
            start_path: Directory to start from; defaults to the invocation
                directory reported by the host environment. A relative path
                is resolved against that directory.

        Returns:
            Root path (forward slashes), or None when no ancestor qualifies
        """
        if not start_path and self.host is not None:
            start_path = self.host.cwd()
        if not start_path:
            return None
        start_path = absolute_path(start_path, self.invocation_dir())
        if len(start_path) > 1:
            start_path = start_path.rstrip('/')

        for follow_symlinks in (True, False):
            root = self._walk(start_path, follow_symlinks)
            if root:
                return root

        logger.debug("No root found above %s", start_path)
        return None
