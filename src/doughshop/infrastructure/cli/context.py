"""Per-invocation state shared by every CLI command."""

from __future__ import annotations

from dataclasses import dataclass

import click

from doughshop.domain.model.identity import Actor
from doughshop.infrastructure.bootstrap import Services


@dataclass
class CliContext:
    services: Services
    actor: Actor


pass_cli = click.make_pass_decorator(CliContext)


def require_admin(ctx: CliContext) -> None:
    if not ctx.actor.is_admin:
        raise click.ClickException("This command requires --role admin.")
