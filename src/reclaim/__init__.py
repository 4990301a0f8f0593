"""reclaim - reclaim disk space from build artifacts across a workspace."""

__version__ = "0.1.0"
