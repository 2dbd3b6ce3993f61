"""
Exceptions raised by the nuget-outdated parsers.
"""


class NuGetOutdatedError(Exception):
    """Base exception for all nuget-outdated errors."""


class ManifestError(NuGetOutdatedError):
    """Raised when a project or props file cannot be read or parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class VersionParseError(NuGetOutdatedError, ValueError):
    """Raised when a string is not a valid NuGet version."""
