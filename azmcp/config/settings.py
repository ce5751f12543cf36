"""
Configuration and Feature Flags for the azmcp command tree.

Flags are controlled via environment variables so that behaviour can be
changed without code changes.

Usage:
    from azmcp.config.settings import is_enabled

    if is_enabled('expose_error_details'):
        message = str(exc)
    else:
        message = "An error occurred while executing 'pg-server-list'."

Environment Variables:
    AZMCP_EXPOSE_ERROR_DETAILS=true/false - Return raw exception text to callers
    AZMCP_LOG_LEVEL=DEBUG/INFO/WARNING/ERROR - Logging level for the CLI
"""

import os
from typing import Dict

from azmcp import __version__

SERVER_NAME = "azmcp"
SERVER_VERSION = __version__

TRANSPORT_STDIO = "stdio"
DEFAULT_TRANSPORT = TRANSPORT_STDIO
DEFAULT_PORT = 5008

DEFAULT_LOG_LEVEL = "WARNING"


# Feature flags with environment variable overrides
FEATURE_FLAGS: Dict[str, bool] = {
    # Include raw exception text in execution-error envelopes
    'expose_error_details': os.getenv('AZMCP_EXPOSE_ERROR_DETAILS', 'true').lower() == 'true',
}


def is_enabled(flag: str) -> bool:
    """
    Check if a feature flag is enabled.

    Args:
        flag: Feature flag name (e.g., 'expose_error_details')

    Returns:
        True if flag is enabled, False otherwise

    Raises:
        KeyError: If flag name is not recognized

    Example:
        >>> is_enabled('expose_error_details')
        True  # Default

        >>> # After: export AZMCP_EXPOSE_ERROR_DETAILS=false
        >>> is_enabled('expose_error_details')
        False
    """
    if flag not in FEATURE_FLAGS:
        available = ', '.join(FEATURE_FLAGS.keys())
        raise KeyError(
            f"Unknown feature flag: '{flag}'. "
            f"Available flags: {available}"
        )

    return FEATURE_FLAGS[flag]


def get_log_level() -> str:
    """Logging level name from AZMCP_LOG_LEVEL (default WARNING)."""
    return os.getenv('AZMCP_LOG_LEVEL', DEFAULT_LOG_LEVEL).upper()
