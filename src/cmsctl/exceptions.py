"""
cmsctl exceptions.

"Not found" outcomes (no root, no site, no alias match) are plain None
return values and never raise. Exceptions are reserved for conditions the
user has to act on.
"""


class CmsctlError(Exception):
    """Base class for errors reported to the user by the CLI."""
    pass


class ConfigurationError(CmsctlError):
    """
    Raised when a configuration or alias file exists but cannot be used.

    Examples:
        - cmsctl.yml is not valid YAML
        - cmsctl.yml top level is a list instead of a mapping
        - sites/sites.yml maps a key to something other than a string
    """
    pass


class UnwritableResourceError(CmsctlError):
    """
    Raised when no candidate location for a resource is writable.

    The message lists every location that was tried so the user can fix
    permissions or point the tool elsewhere.
    """

    def __init__(self, resource: str, attempted: list[str]):
        self.resource = resource
        self.attempted = list(attempted)
        tried = "\n".join(f"  - {location}" for location in self.attempted)
        super().__init__(
            f"Cannot find a writable {resource} in any of:\n{tried}"
        )
