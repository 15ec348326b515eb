"""
Environment and site discovery.

Public API:
    - OSClassifier, OSFamily: OS identifiers and their capabilities
    - normalize_path, correct_absolute_path_for_exec: path syntax
    - HostEnvironment: cwd, home, user, cache directory
    - RootLocator: CMS root discovery
    - SiteResolver: site_path() / conf_path()
    - CommandBuilder: re-invocation command strings
"""

from .os_family import (
    OSClassifier,
    OSFamily,
    classify,
    resolve_os,
    is_windows,
    is_cygwin,
    is_mingw,
    is_osx,
    has_posix_shell,
)
from .paths import normalize_path, absolute_path, correct_absolute_path_for_exec, shift_path_up
from .host import HostEnvironment
from .root import RootLocator
from .sites import SiteResolver, candidate_keys, parse_site_uri
from .command import CommandBuilder, escape_shell_arg

__all__ = [
    # OS classification
    "OSClassifier",
    "OSFamily",
    "classify",
    "resolve_os",
    "is_windows",
    "is_cygwin",
    "is_mingw",
    "is_osx",
    "has_posix_shell",

    # Paths
    "normalize_path",
    "absolute_path",
    "correct_absolute_path_for_exec",
    "shift_path_up",

    # Discovery
    "HostEnvironment",
    "RootLocator",
    "SiteResolver",
    "candidate_keys",
    "parse_site_uri",

    # Commands
    "CommandBuilder",
    "escape_shell_arg",
]
