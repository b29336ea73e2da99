"""Exceptions raised by the upstream drift detector."""


class UpstreamDriftError(Exception):
    """Base class for fatal drift detector errors"""
    pass


class SourceUnavailable(UpstreamDriftError):
    """A git operation needed to build the comparison failed."""

    def __init__(self, target: str, detail: str = ""):
        self.target = target
        self.detail = detail
        message = f"Unable to compare {target}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ConfigError(UpstreamDriftError):
    """Custom exception for configuration file errors"""
    pass
