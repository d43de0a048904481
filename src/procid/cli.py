"""Command line view of the resolved process identity."""

from __future__ import annotations

import json
import logging
import threading

import click

from procid.classifier import platform_info
from procid.config import IdentityConfig, set_config
from procid.errors import ConfigError
from procid.packer import split_tid, unique_tid
from procid.pid_space import pid_bits, pid_max
from procid.resolver import process_id


def identity_snapshot() -> dict[str, object]:
    """Collect every resolved identity value for display."""
    info = platform_info()
    tid = unique_tid()
    _, native_tid = split_tid(tid)
    return {
        "os_name": info.os_name,
        "os_family": info.os_family.value,
        "is_64bit": info.is_64bit,
        "is_unix": info.is_unix,
        "pid": process_id(),
        "pid_max": pid_max(),
        "pid_bits": pid_bits(),
        "thread": threading.current_thread().name,
        "native_tid": native_tid,
        "unique_tid": tid,
    }


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Emit a JSON object")
@click.option("--verbose", "-v", is_flag=True, help="Log how each value was resolved")
@click.version_option(package_name="procid", message="procid %(version)s")
def cli(as_json: bool, verbose: bool) -> None:
    """Show the platform, pid and unique thread id of this process."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        set_config(IdentityConfig.from_env())
    except ConfigError as error:
        raise click.ClickException(str(error)) from error

    snapshot = identity_snapshot()
    if as_json:
        click.echo(json.dumps(snapshot, sort_keys=True, indent=2))
        return

    click.secho("Process identity:", bold=True)
    click.echo(
        f"  Platform:   {snapshot['os_family']} "
        f"({'64' if snapshot['is_64bit'] else '32'}-bit, os.name={snapshot['os_name']!r})"
    )
    click.echo(f"  PID:        {click.style(str(snapshot['pid']), fg='cyan')}")
    click.echo(f"  PID max:    {snapshot['pid_max']} ({snapshot['pid_bits']} bits)")
    click.echo(f"  Thread:     {snapshot['thread']} (native id {snapshot['native_tid']})")
    click.echo(f"  Unique TID: {click.style(hex(int(snapshot['unique_tid'])), fg='green')}")
