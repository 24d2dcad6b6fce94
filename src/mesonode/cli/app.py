# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/cli/app.py
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import click
import typer

from mesonode.backends.registry import select_backend
from mesonode.config.loader import load_settings
from mesonode.errors import ProvisionError
from mesonode.execution.runner import CommandRunner
from mesonode.logging.log import init_logging
from mesonode.observers.dispatcher import EventBus
from mesonode.observers.sinks import ConsoleObserver, JsonFileObserver, LoggerObserver
from mesonode.provision.driver import ProvisioningDriver
from mesonode.provision.request import build_request
from mesonode.system.distro import detect_distro
from mesonode.system.files import AtomicFileWriter


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(
    help="Provision this host as a Mesos master, agent, or both.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(ctx: typer.Context, message: str, *, usage: bool = False) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    if usage:
        typer.echo(ctx.get_usage(), err=True)
    raise typer.Exit(code=1)


# ------------------------------------------------------------------------------
# Provision command
# ------------------------------------------------------------------------------

@app.command()
def provision(
    ctx: typer.Context,
    roles: Optional[List[str]] = typer.Argument(
        None, help="Roles for this host: master, agent, or both", show_default=False
    ),
    masters: Optional[str] = typer.Option(
        None, "--masters", help="Comma-separated IPv4 list of all masters (odd count)"
    ),
    ip: Optional[str] = typer.Option(None, "--ip", help="This host's IPv4 address"),
    hostname: Optional[str] = typer.Option(
        None, "--hostname", help="Fixed hostname for mesos and marathon"
    ),
    mesos: Optional[str] = typer.Option(None, "--mesos", help="Mesos version prefix, e.g. 0.28"),
    marathon: Optional[str] = typer.Option(
        None, "--marathon", help="Marathon version prefix, e.g. 1.1"
    ),
    distro: Optional[str] = typer.Option(
        None, "--distro", help="Override OS detection, e.g. ubuntu-14.04 or centos-7"
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log commands and files only"),
    debug: bool = typer.Option(False, "--debug", help="DEBUG output on the console"),
):
    """
    Install mesos/marathon/zookeeper at the requested versions, write the
    ensemble configuration and set every service to its role's state.
    """
    # ------------------------------------------------------------------
    # 1) Validate input (nothing is touched before this passes)
    # ------------------------------------------------------------------
    try:
        request = build_request(
            roles or [],
            masters=masters,
            ip=ip,
            hostname=hostname,
            mesos=mesos,
            marathon=marathon,
            distro=distro,
            dry_run=dry_run,
        )
        settings = load_settings(config)
    except ProvisionError as exc:
        _fail(ctx, str(exc), usage=True)

    logger, run_id, log_path = init_logging(base_dir=settings.log_dir, verbose=debug)

    typer.secho("mesonode provisioning", bold=True)
    typer.echo(f"  Roles    : {', '.join(request.roles.names())}")
    typer.echo(f"  Run ID   : {run_id}")
    typer.echo(f"  Logs     : {log_path}")
    typer.echo("")

    # ------------------------------------------------------------------
    # 2) Backend + run
    # ------------------------------------------------------------------
    try:
        host_distro = request.distro or detect_distro()
        logger.info("distro: %s (family=%s, init=%s)", host_distro, host_distro.family, host_distro.init)

        runner = CommandRunner(
            logger=logger,
            dry_run=dry_run,
            label=host_distro.family,
            timeout=settings.command_timeout,
        )
        writer = AtomicFileWriter(dry_run=dry_run)
        backend = select_backend(host_distro, runner=runner, writer=writer, settings=settings)

        bus = EventBus(
            observers=[
                ConsoleObserver(),
                LoggerObserver(logger),
                JsonFileObserver(settings.log_dir / f"{run_id}.jsonl"),
            ]
        )

        ProvisioningDriver(
            request,
            backend,
            settings=settings,
            writer=writer,
            bus=bus,
            run_id=run_id,
        ).run()
    except (ProvisionError, OSError) as exc:
        logger.error("%s", exc)
        _fail(ctx, str(exc))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Console entry point. Parse errors exit 1 (click's default is 2),
    --help exits 0.
    """
    try:
        rv = app(args=argv, prog_name="mesonode", standalone_mode=False)
    except click.UsageError as exc:
        typer.secho(f"Error: {exc.format_message()}", fg=typer.colors.RED, err=True)
        if exc.ctx is not None:
            typer.echo(exc.ctx.get_usage(), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return 1
    except click.exceptions.Abort:
        typer.echo("Aborted!", err=True)
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    sys.exit(main())
