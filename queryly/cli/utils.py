"""Shared CLI utilities for Queryly."""

from __future__ import annotations

import logging
from typing import Any, Dict, NoReturn, Tuple

import click
from rich.console import Console
from rich.markup import escape

from queryly.config.models import ConnectionProfile, Settings
from queryly.config.store import ProfileStore
from queryly.db.base import BaseProvider
from queryly.db.registry import ProviderRegistry

# Single console instance reused across CLI modules
console = Console()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)


def print_exception(message: str, error: Exception, verbose: bool = False) -> None:
    """Render a formatted exception message.

    Args:
        message: Friendly context message to display before the exception.
        error: Original exception instance.
        verbose: When True, render the full traceback for debugging.
    """
    console.print(f"[red]{escape(message)}: {escape(str(error))}[/red]")
    if verbose:
        import traceback

        console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")


def fail(message: str, error: Exception, ctx: click.Context) -> NoReturn:
    """Print ``error`` and exit with status 1."""
    print_exception(message, error, bool(ctx.obj.get('verbose')))
    raise SystemExit(1) from error


def context_objects(ctx: click.Context) -> Tuple[Settings, ProfileStore, ProviderRegistry]:
    obj: Dict[str, Any] = ctx.obj
    return obj['settings'], obj['store'], obj['registry']


def resolve_profile(ctx: click.Context, name: str) -> Tuple[ConnectionProfile, BaseProvider]:
    """Look up a saved profile and the provider for its engine.

    Raises:
        ProfileError: If the profile does not exist.
        ProviderNotSupportedError: If no provider handles the profile's engine.
    """
    _, store, registry = context_objects(ctx)
    profile = store.require(name)
    return profile, registry.get(profile.db_type)
