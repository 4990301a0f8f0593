"""Default settings for reclaim."""

# =============================================================================
# Directory classification
# =============================================================================

# Build and cache output that tools regenerate on demand
DEFAULT_TRASH_NAMES = frozenset(
    {
        "build",
        ".dart_tool",
        "node_modules",
        ".gradle",
        "Pods",
        ".cxx",
        ".symlinks",
        "DerivedData",
        "__pycache__",
        ".pytest_cache",
    }
)

# Directories that are never worth descending into
DEFAULT_SKIP_NAMES = frozenset(
    {
        "Library",
        "Applications",
        "AppData",
        "$RECYCLE.BIN",
        "System Volume Information",
        "venv",
        "vendor",
    }
)

DEFAULT_HIDDEN_PREFIX = "."
DEFAULT_PROJECT_MARKER = "pubspec.yaml"

# =============================================================================
# Project maintenance
# =============================================================================

DEFAULT_CLEAN_COMMAND = ("flutter", "clean")
DEFAULT_FETCH_COMMAND = ("flutter", "pub", "get")

# =============================================================================
# Concurrency and progress
# =============================================================================

DEFAULT_MAX_PARALLEL = 6
DEFAULT_MAX_DELETE_PARALLEL = 15
DEFAULT_PROGRESS_EVERY = 10
DEFAULT_ACTIVE_LABEL_BUDGET = 100


def describe_defaults() -> dict:
    """Return the default settings as plain data for display."""
    return {
        "trash_names": sorted(DEFAULT_TRASH_NAMES),
        "skip_names": sorted(DEFAULT_SKIP_NAMES),
        "hidden_prefix": DEFAULT_HIDDEN_PREFIX,
        "project_marker": DEFAULT_PROJECT_MARKER,
        "clean_command": " ".join(DEFAULT_CLEAN_COMMAND),
        "fetch_command": " ".join(DEFAULT_FETCH_COMMAND),
        "max_parallel": DEFAULT_MAX_PARALLEL,
        "max_delete_parallel": DEFAULT_MAX_DELETE_PARALLEL,
    }
