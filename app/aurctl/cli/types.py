"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

import typer

from aurctl.core.config import AurctlConfig, load_config
from aurctl.core.context import AppContext
from aurctl.core.errors import AurctlError, ConfigError
from aurctl.core.sources import SourceFlags
from aurctl.models.package import PackageSource
from aurctl.utils.formatting import print_error

T = TypeVar("T")


class SourceChoice(str, Enum):
    """Available package sources for CLI commands."""

    REPO = "repo"
    AUR = "aur"
    FLATPAK = "flatpak"
    SNAP = "snap"
    ALL = "all"


def get_source_flags(source: SourceChoice = SourceChoice.ALL) -> SourceFlags:
    """Convert a source choice to the flags the aggregator understands."""
    if source == SourceChoice.ALL:
        return SourceFlags.all()
    return SourceFlags.only(PackageSource(source.value))


def load_cli_config() -> AurctlConfig:
    """Load the configuration, exiting with code 1 if it is invalid."""
    try:
        return load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def create_context() -> AppContext:
    """Load the configuration and build the application context."""
    return AppContext.create(load_cli_config())


def run_with_context(
    operation: Callable[[AppContext], Awaitable[T]],
) -> T:
    """Run an async operation against a fresh context.

    Any AurctlError is printed and turned into exit code 1; the context
    is always closed.
    """
    ctx = create_context()

    async def _run() -> T:
        try:
            return await operation(ctx)
        finally:
            await ctx.aclose()

    try:
        return asyncio.run(_run())
    except AurctlError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
