"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from typing import Any, Iterable

from rich.console import Console

from .config import set_log_level
from .exit_codes import (
    SUCCESS, GENERAL_ERROR, INTERRUPTED,
    CommandError, GuardFailure, MergeConflictError,
)

err_console = Console(stderr=True, soft_wrap=True)


def report_error(error: CommandError) -> None:
    """Print a command error, its details and remediation hint to stderr."""
    err_console.print(f"[bold red]ERROR:[/bold red] {error}", highlight=False)
    if isinstance(error, GuardFailure) and error.details:
        err_console.print(error.details.rstrip(), markup=False, highlight=False)
    if isinstance(error, MergeConflictError) and error.status_output:
        err_console.print(error.status_output.rstrip(), markup=False, highlight=False)
    if error.hint:
        err_console.print(f"[yellow]{error.hint}[/yellow]", highlight=False)


class CommandGroup(click.Group):
    """Click group whose usage errors exit with GENERAL_ERROR instead of 2."""

    def make_context(self, *args, **kwargs):
        try:
            return super().make_context(*args, **kwargs)
        except click.UsageError as e:
            e.exit_code = GENERAL_ERROR
            raise

    def invoke(self, ctx):
        # Subcommand arguments are parsed here, before handle_errors runs
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = GENERAL_ERROR
            raise


def handle_errors(func):
    """
    Decorator that provides standard CLI behavior:
    - Automatic --verbose/-v handling (debug logging)
    - CommandError subclasses exit with their own exit code
    - Ctrl+C exits with 130
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        if kwargs.get('verbose'):
            set_log_level('DEBUG')

        try:
            func(*args, **kwargs)
            sys.exit(SUCCESS)
        except KeyboardInterrupt:
            err_console.print("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.UsageError as e:
            e.exit_code = GENERAL_ERROR
            raise
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            report_error(e)
            sys.exit(e.exit_code)
        except Exception as e:
            err_console.print(f"[bold red]ERROR:[/bold red] Command failed: {e}", highlight=False)
            sys.exit(GENERAL_ERROR)

    return wrapper


def output_jsonl(items: Iterable[Any]) -> None:
    """Print dicts (or objects with to_dict) one JSON document per line."""
    for item in items:
        if hasattr(item, 'to_dict'):
            item = item.to_dict()
        print(json.dumps(item, ensure_ascii=False), flush=True)
