"""
Exit codes for UR Focus CLI.

Semantic exit codes so scripts wrapping the CLI can tell what happened.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Not enough coins for a shop purchase
ERROR_INSUFFICIENT_FUNDS = 3

# Network or storage backend error (server unreachable, database locked, ...)
ERROR_NETWORK = 4

# Resource not found
ERROR_NOT_FOUND = 5


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_INSUFFICIENT_FUNDS: "ERROR_INSUFFICIENT_FUNDS",
        ERROR_NETWORK: "ERROR_NETWORK",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
    }
    return code_names.get(code, f"UNKNOWN({code})")

