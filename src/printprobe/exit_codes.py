"""Exit codes for script-friendly error handling.

Callers can tell the category of failure without parsing messages.
"""

from __future__ import annotations

# Success
SUCCESS = 0

# The file could not be obtained (missing, too large, download failed)
SOURCE_ERROR = 2

# Invalid configuration
CONFIG_ERROR = 3

# Anything else
OTHER_ERROR = 4


ERROR_CODE_MAP: dict[str, int] = {
    "FILE_NOT_FOUND": SOURCE_ERROR,
    "FILE_TOO_LARGE": SOURCE_ERROR,
    "READ_ERROR": SOURCE_ERROR,
    "CONNECTION_ERROR": SOURCE_ERROR,
    "TIMEOUT": SOURCE_ERROR,
    "HTTP_ERROR": SOURCE_ERROR,
    "VALIDATION_ERROR": CONFIG_ERROR,
}


def exit_code_for(error_code: str) -> int:
    """Map an error code string to a CLI exit code."""
    return ERROR_CODE_MAP.get(error_code, OTHER_ERROR)
