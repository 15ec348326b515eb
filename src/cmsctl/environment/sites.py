"""
Site resolution for multi-site CMS installations.

A root hosts any number of sites, each a directory under sites/ holding a
settings.php. Two questions are answered here:

    site_path()  which site directory does a filesystem location belong to?
    conf_path()  which site directory serves a given URI?

conf_path() follows the CMS's own lookup order: for a request to
https://www.example.com:8080/shop/index.php the candidates are, most
specific first,

    8080.www.example.com.shop
    www.example.com.shop
    example.com.shop
    com.shop
    8080.www.example.com
    www.example.com
    example.com
    com

each optionally redirected by the alias map, falling back to sites/default.
Path depth is the outer loop and host depth the inner loop; several
candidates can exist at once, so that order decides which site wins.
"""

import logging
import os
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from cmsctl.core.protocols import AliasProvider, FileSystemService
from cmsctl.environment.host import HostEnvironment
from cmsctl.environment.paths import absolute_path, normalize_path, shift_path_up
from cmsctl.environment.root import RootLocator

logger = logging.getLogger(__name__)

SITES_DIR = 'sites'
DEFAULT_SITE = 'default'
SETTINGS_FILE = 'settings.php'
SCRIPT_NAME = 'index.php'
SCRIPT_EXTENSION = '.php'


def parse_site_uri(uri: str) -> Optional[Tuple[List[str], List[str]]]:
    """Split a URI into host labels and path segments.

    A URI without a scheme is read as http://. When a port is given it
    becomes the leftmost host label ("example.com:8080" -> "8080.example.com").
    The host keeps the case it was written in.

    The path always ends in the script name: "/shop", "/shop/" and
    "/shop/index.php" all become ['', 'shop', 'index.php'], and a URI
    without a path becomes ['', 'index.php'].

    Returns:
        (host_parts, uri_parts), or None when the URI has no usable host
    """
    if not uri:
        return None
    parsed = urlsplit(uri)
    if not parsed.netloc and '://' not in uri:
        parsed = urlsplit(f"http://{uri}")

    try:
        host = parsed.hostname
        port = parsed.port
    except ValueError:
        logger.debug("Unparseable URI %r", uri)
        return None
    if not host:
        return None

    # hostname is lower-cased; recover the spelling from netloc
    hostinfo = parsed.netloc.rpartition('@')[2]
    start = hostinfo.lower().find(host)
    if start >= 0:
        host = hostinfo[start:start + len(host)]

    host = host.rstrip('.')
    if port:
        host = f"{port}.{host}"

    path = parsed.path.rstrip('/')
    if path.endswith(SCRIPT_EXTENSION):
        path = path.rpartition('/')[0]
    path = f"{path}/{SCRIPT_NAME}"
    return host.split('.'), path.split('/')


def candidate_keys(uri: str) -> List[str]:
    """Site directory names tried for uri, in priority order (aliases not applied)."""
    parts = parse_site_uri(uri)
    if parts is None:
        return []
    host_parts, uri_parts = parts

    keys = []
    for i in range(len(uri_parts) - 1, 0, -1):
        for j in range(len(host_parts), 0, -1):
            keys.append('.'.join(host_parts[-j:]) + '.'.join(uri_parts[:i]))
    return keys


class SiteResolver:
    """Resolves site directories below a CMS root."""

    def __init__(
        self,
        filesystem: FileSystemService,
        aliases: AliasProvider,
        root_locator: RootLocator,
        host: Optional[HostEnvironment] = None
    ):
        self.fs = filesystem
        self.aliases = aliases
        self.roots = root_locator
        self.host = host

    def _has_settings(self, directory: str) -> bool:
        return self.fs.is_file(f"{directory}/{SETTINGS_FILE}")

    def load_aliases(self, root: Optional[str]) -> Dict[str, str]:
        if not root:
            return {}
        return self.aliases.load_aliases(root)

    def site_path(self, root: Optional[str], start_path: Optional[str] = None) -> Optional[str]:
        """Find the site directory containing start_path.

        Walks up from start_path looking for settings.php, without
        crossing into a CMS root. A directory listed in the root's alias
        map is reported by its alias key instead. As a last resort the
        root's default site is used when it has a settings.php.

        Args:
            root: CMS root the site belongs to (may be None)
            start_path: Directory to start from; defaults to the invocation
                directory reported by the host environment. A relative
                path is resolved against that directory.

        Returns:
            Site directory, alias key, or None
        """
        if not start_path and self.host is not None:
            start_path = self.host.cwd()
        root = normalize_path(root).rstrip('/') if root else None

        site = None
        if start_path:
            base = self.host.cwd() if self.host is not None else os.getcwd()
            path = absolute_path(start_path, base)
            if len(path) > 1:
                path = path.rstrip('/')
            if self._has_settings(path):
                site = path
            else:
                path = shift_path_up(path)
                while path and not self.roots.valid_root(path):
                    if self._has_settings(path):
                        site = path
                        break
                    path = shift_path_up(path)

        if site and root:
            alias = self._reverse_alias(root, site)
            if alias:
                logger.debug("Site %s is aliased as %s", site, alias)
                return alias

        if not site and root:
            default = f"{root}/{SITES_DIR}/{DEFAULT_SITE}"
            if self._has_settings(default):
                site = default

        return site

    def _reverse_alias(self, root: str, site: str) -> Optional[str]:
        aliases = self.load_aliases(root)
        if not aliases:
            return None
        prefix = f"{root}/{SITES_DIR}/"
        relative = site[len(prefix):] if site.startswith(prefix) else site
        for key, directory in aliases.items():
            if directory in (relative, site):
                return key
        return None

    def conf_path(self, root: Optional[str], uri: Optional[str], require_settings: bool = True) -> Optional[str]:
        """Find the configuration directory serving uri.

        Args:
            root: CMS root
            uri: Requested URI (scheme optional)
            require_settings: When True a candidate must contain
                settings.php; when False it only has to exist

        Returns:
            "sites/<dir>" relative to root; "sites/default" when nothing
            matches; None when root or uri is missing or uri is unusable
        """
        if not root or not uri:
            return None
        keys = candidate_keys(uri)
        if not keys:
            return None

        root = normalize_path(root).rstrip('/')
        sites_root = f"{root}/{SITES_DIR}"
        aliases = self.load_aliases(root)

        for key in keys:
            directory = key
            if key in aliases and self.fs.exists(f"{sites_root}/{aliases[key]}"):
                directory = aliases[key]
            candidate = f"{sites_root}/{directory}"
            if self._has_settings(candidate) or (not require_settings and self.fs.exists(candidate)):
                logger.debug("URI %s resolved to %s via key %s", uri, candidate, key)
                return f"{SITES_DIR}/{directory}"

        return f"{SITES_DIR}/{DEFAULT_SITE}"
