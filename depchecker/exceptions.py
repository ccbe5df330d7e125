"""Custom exceptions for depchecker."""


class DependencyCheckerError(Exception):
    """Base exception for all depchecker errors."""


class ConfigurationError(DependencyCheckerError):
    """Raised when required configuration or credentials are missing."""


class ManifestError(DependencyCheckerError):
    """Raised when a manifest file cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"could not parse {path}: {reason}")


class RegistryError(DependencyCheckerError):
    """Raised when a package registry request fails."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")
