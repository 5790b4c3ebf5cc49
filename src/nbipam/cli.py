"""
nbipam command-line entry point.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import replace

import click

from nbipam import __version__
from nbipam.config import ConfigError, get_config
from nbipam.ipam.cli import ip, prefix, vrf
from nbipam.logging_config import configure_logging
from nbipam.output import print_error


@click.group()
@click.option("--host", default=None, help="NetBox address, e.g. netbox.example.com [env: NETBOX_HOST]")
@click.option("--token", default=None, help="NetBox API token [env: NETBOX_TOKEN]")
@click.option("--debug", is_flag=True, default=False, help="Log HTTP requests and responses [env: NETBOX_DEBUG]")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write logs to this file")
@click.version_option(__version__, prog_name="nbipam")
@click.pass_context
def cli(ctx, host: str | None, token: str | None, debug: bool, log_file: str | None):
    """NetBox IPAM client: VRFs, prefixes and IP addresses.

    \b
    Examples:
        nbipam --host netbox.example.com --token $TOKEN vrf
        nbipam prefix list --vrf 17 --mask-length 32
        nbipam ip search --address 192.0.2.
    """
    try:
        base = get_config()
    except ConfigError as e:
        print_error(str(e))
        raise SystemExit(1)

    config = replace(
        base,
        host=host or base.host,
        token=token or base.token,
        debug=debug or base.debug,
    )
    configure_logging(debug=config.debug, log_file=log_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(prefix)
cli.add_command(ip)
cli.add_command(vrf)


def main():
    cli()


if __name__ == "__main__":
    main()
