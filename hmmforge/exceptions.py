"""Custom exception hierarchy for the hmmforge package."""


class HmmForgeException(Exception):
    """Base exception for hmmforge."""


class ConfigValidationError(HmmForgeException):
    """Exception raised when a config is invalid."""


class TopologyError(HmmForgeException, ValueError):
    """Exception raised when an architecture request is malformed."""


class GraphConsistencyError(HmmForgeException):
    """Exception raised when a context graph has no unique start or no absorbing node."""
