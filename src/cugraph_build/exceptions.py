"""Exception hierarchy for the build orchestrator."""


class BuildError(RuntimeError):
    """Base class for failures that abort a build run."""


class InvalidOptionError(BuildError):
    """Raised when an invocation token is outside the known vocabulary."""

    def __init__(self, token: str):
        super().__init__(f"Invalid option: {token}")
        self.token = token


class ConfigError(BuildError):
    """Raised when the environment or repository files hold unusable values."""


class DocsFetchError(BuildError):
    """Raised when a documentation archive cannot be downloaded or extracted."""
