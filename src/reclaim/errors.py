"""Error types for reclaim."""


class ReclaimError(Exception):
    """Base class for fatal reclaim errors."""


class ConfigurationError(ReclaimError):
    """Invalid configuration, e.g. a root path that is not a directory."""


class ExecutionEnvironmentError(ReclaimError):
    """The worker pool could not be started on this system."""


class RunAborted(ReclaimError):
    """The user declined the deletion confirmation."""
