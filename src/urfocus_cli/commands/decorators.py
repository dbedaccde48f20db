"""Decorators for command functions."""

import asyncio
import functools
import time
import traceback
from collections.abc import Callable

import typer
from pydantic import ValidationError as PydanticValidationError

from urfocus_cli.models.exceptions import (
    FocusError,
    InsufficientCoinsError,
    NotFoundError,
    TransientNetworkError,
    ValidationError,
)
from urfocus_cli.services.config_service import get_config_service
from urfocus_cli.utils import exit_codes
from urfocus_cli.utils.logger import get_logger
from urfocus_cli.utils.ui.formatters import format_error


def _require_auth() -> None:
    """Require a stored token for remote contexts.

    Note: Local contexts don't require authentication.
    """
    config_svc = get_config_service()
    try:
        current_context = config_svc.get_current_context()
    except (ValueError, KeyError):
        # No context configured, the local default applies
        return

    if current_context.type == "local":
        return

    if not config_svc.load_credentials():
        format_error(
            f"No token for context '{current_context.name}'. "
            "Use 'urfocus context set-token' to add one."
        )
        raise typer.Exit(exit_codes.ERROR_GENERAL)


def exit_code_for(error: FocusError) -> int:
    """Map a domain error to a semantic exit code."""
    if isinstance(error, InsufficientCoinsError):
        return exit_codes.ERROR_INSUFFICIENT_FUNDS
    if isinstance(error, NotFoundError):
        return exit_codes.ERROR_NOT_FOUND
    if isinstance(error, ValidationError):
        return exit_codes.ERROR_INVALID_ARGS
    if isinstance(error, TransientNetworkError):
        return exit_codes.ERROR_NETWORK
    return exit_codes.ERROR_GENERAL


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = True):
    """Decorator to wrap command functions with common functionality."""

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                if auth_required:
                    _require_auth()

                if asyncio.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                elapsed = time.monotonic() - start
                logger.info("command completed: %s (%.3fs)", cmd, elapsed)
                return result

            except (FocusError, PydanticValidationError) as e:
                elapsed = time.monotonic() - start
                code = (
                    exit_code_for(e)
                    if isinstance(e, FocusError)
                    else exit_codes.ERROR_INVALID_ARGS
                )
                logger.error(
                    "command failed: %s (%.3fs) [%s] - %s",
                    cmd,
                    elapsed,
                    exit_codes.get_exit_code_name(code),
                    str(e),
                )
                format_error(str(e))
                raise typer.Exit(code=code) from e

            except typer.Exit:
                # Re-raise Typer's own exits (like --help or explicit Exit(0))
                raise

            except Exception as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    elapsed,
                    str(e),
                    traceback.format_exc(),
                )
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)
