"""Path canonicalization helpers. Pure string transformations, no filesystem access."""

import posixpath
import re
from typing import Optional

from cmsctl.environment.os_family import OSFamily, classify

_CYGDRIVE = re.compile(r'^/cygdrive/([a-zA-Z])(?=/|$)')
_DRIVE_LETTER = re.compile(r'^([a-zA-Z]):(?=/|$)')


def normalize_path(path: str) -> str:
    """Replace every backslash separator with a forward slash."""
    return path.replace('\\', '/')


def absolute_path(path: str, base: Optional[str]) -> str:
    """Resolve a relative path against base; absolute paths are only normalized.

    "." and ".." segments of a relative path are collapsed, so the result
    can be walked upwards one segment at a time.
    """
    path = normalize_path(path)
    if not base or path.startswith('/') or _DRIVE_LETTER.match(path):
        return path
    return posixpath.normpath(f"{normalize_path(base).rstrip('/')}/{path}")


def correct_absolute_path_for_exec(
    path: str,
    os_token: Optional[str] = None,
    local_os: Optional[str] = None
) -> str:
    """Rewrite an absolute path into the syntax the target OS executes.

    - Windows shells (not Cygwin/MinGW): /cygdrive/c/dir -> c:/dir
    - cwRsync: c:/dir -> /cygdrive/c/dir
    - everything else: separators normalized only

    Args:
        path: Path in any of the supported syntaxes
        os_token: Target OS identifier (see os_family.resolve_os)
        local_os: Local OS identifier, for resolving pseudo identifiers

    Returns:
        Forward-slash path in the target's syntax
    """
    path = normalize_path(path)
    family = classify(os_token, local_os)

    if family.capabilities.windows_like and not family.capabilities.cygwin:
        return _CYGDRIVE.sub(r'\1:', path)
    if family is OSFamily.CWRSYNC:
        return _DRIVE_LETTER.sub(lambda m: f"/cygdrive/{m.group(1).lower()}", path)
    return path


def shift_path_up(path: Optional[str]) -> str:
    """Drop the last path segment.

    "/var/www" -> "/var" -> "" ; an empty result means the path cannot be
    shortened any further.
    """
    if not path:
        return ''
    head, _, _ = normalize_path(path).rpartition('/')
    return head
