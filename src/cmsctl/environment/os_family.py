"""
Operating system classification.

OS identifiers are short tokens such as "WINNT", "CYGWIN_NT-10.0",
"MINGW32", "Darwin" or "Linux". They are mapped onto a closed set of
families, each carrying explicit capability flags, so call sites ask
"does this target have a POSIX shell?" instead of matching prefixes.

Two pseudo identifiers are understood by resolve_os():
    LOCAL  the OS cmsctl itself runs on, even when formatting for a remote
    RSYNC  "CWRSYNC" on Windows-like hosts (cwRsync path syntax), else LOCAL
"""

import platform
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cmsctl.core.protocols import EnvironmentProvider


class OSFamily(Enum):
    WINDOWS = "windows"
    CYGWIN = "cygwin"
    MINGW = "mingw"
    CWRSYNC = "cwrsync"
    DARWIN = "darwin"
    POSIX = "posix"

    @property
    def capabilities(self) -> 'OSCapabilities':
        return _CAPABILITIES[self]


@dataclass(frozen=True)
class OSCapabilities:
    windows_like: bool
    cygwin: bool
    mingw: bool
    osx: bool

    @property
    def posix_shell(self) -> bool:
        # MinGW is Cygwin-family but ships no POSIX shell
        return (self.cygwin and not self.mingw) or not self.windows_like


_CAPABILITIES = {
    OSFamily.WINDOWS: OSCapabilities(windows_like=True, cygwin=False, mingw=False, osx=False),
    OSFamily.CYGWIN: OSCapabilities(windows_like=True, cygwin=True, mingw=False, osx=False),
    OSFamily.MINGW: OSCapabilities(windows_like=True, cygwin=True, mingw=True, osx=False),
    OSFamily.CWRSYNC: OSCapabilities(windows_like=False, cygwin=False, mingw=False, osx=False),
    OSFamily.DARWIN: OSCapabilities(windows_like=False, cygwin=False, mingw=False, osx=True),
    OSFamily.POSIX: OSCapabilities(windows_like=False, cygwin=False, mingw=False, osx=False),
}

# Checked in order; "WIN" must come after the longer Windows-family prefixes.
_FAMILY_PREFIXES = (
    ('CYGW', OSFamily.CYGWIN),
    ('MINGW', OSFamily.MINGW),
    ('CWRSYNC', OSFamily.CWRSYNC),
    ('DARWIN', OSFamily.DARWIN),
    ('WIN', OSFamily.WINDOWS),
)

LOCAL = 'LOCAL'
RSYNC = 'RSYNC'
RSYNC_WINDOWS = 'CWRSYNC'


def resolve_os(os_token: Optional[str] = None, local_os: Optional[str] = None) -> str:
    """Turn an OS token (or None) into a concrete OS identifier.

    Args:
        os_token: Identifier of the target OS, a pseudo identifier, or None
            for the local OS
        local_os: Identifier of the local OS; defaults to platform.system()

    Returns:
        The identifier, unmodified unless it was None or a pseudo identifier
    """
    if local_os is None:
        local_os = platform.system()
    if not os_token:
        return local_os

    token = os_token.upper()
    if token == LOCAL:
        return local_os
    if token == RSYNC:
        return RSYNC_WINDOWS if classify(local_os).capabilities.windows_like else local_os
    return os_token


def classify(os_token: Optional[str] = None, local_os: Optional[str] = None) -> OSFamily:
    """Map an OS token onto its family (case-insensitive prefix match)."""
    resolved = resolve_os(os_token, local_os).upper()
    for prefix, family in _FAMILY_PREFIXES:
        if resolved.startswith(prefix):
            return family
    return OSFamily.POSIX


def is_windows(os_token: Optional[str] = None, local_os: Optional[str] = None) -> bool:
    return classify(os_token, local_os).capabilities.windows_like


def is_cygwin(os_token: Optional[str] = None, local_os: Optional[str] = None) -> bool:
    return classify(os_token, local_os).capabilities.cygwin


def is_mingw(os_token: Optional[str] = None, local_os: Optional[str] = None) -> bool:
    return classify(os_token, local_os).capabilities.mingw


def is_osx(os_token: Optional[str] = None, local_os: Optional[str] = None) -> bool:
    return classify(os_token, local_os).capabilities.osx


def has_posix_shell(os_token: Optional[str] = None, local_os: Optional[str] = None) -> bool:
    return classify(os_token, local_os).capabilities.posix_shell


class OSClassifier:
    """OS predicates bound to a live-OS source.

    The live OS is the context 'os' option when set (for testing or for
    pretending to be another platform), else what the environment
    provider reports.
    """

    def __init__(self, env_provider: EnvironmentProvider, os_override: Optional[str] = None):
        self.env = env_provider
        self.os_override = os_override

    def local_os(self) -> str:
        return self.os_override or self.env.get_system_type()

    def resolve(self, os_token: Optional[str] = None) -> str:
        return resolve_os(os_token, self.local_os())

    def family(self, os_token: Optional[str] = None) -> OSFamily:
        return classify(os_token, self.local_os())

    def is_windows(self, os_token: Optional[str] = None) -> bool:
        return self.family(os_token).capabilities.windows_like

    def is_cygwin(self, os_token: Optional[str] = None) -> bool:
        return self.family(os_token).capabilities.cygwin

    def is_mingw(self, os_token: Optional[str] = None) -> bool:
        return self.family(os_token).capabilities.mingw

    def is_osx(self, os_token: Optional[str] = None) -> bool:
        return self.family(os_token).capabilities.osx

    def has_posix_shell(self, os_token: Optional[str] = None) -> bool:
        return self.family(os_token).capabilities.posix_shell
