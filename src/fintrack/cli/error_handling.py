"""Turning domain failures into CLI output."""

import logging
from typing import NoReturn

import click

from fintrack.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError) -> NoReturn:
    """Print ``Error: <message>`` to stderr and exit with status 1."""
    logger.debug("Command %s failed: %r", ctx.info_name, error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
