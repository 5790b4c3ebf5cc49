"""
IPAM CLI commands: prefixes, IP addresses and VRFs.
"""

import asyncio
from typing import Any, Awaitable, Callable

import click

from nbipam.config import ConfigError, NetBoxConfig
from nbipam.ipam.core import (
    PartialDeleteError,
    create_ip_address,
    delete_prefixes,
    list_prefixes,
    list_vrfs,
    search_ip_addresses,
)
from nbipam.ipam.report import ErrorPolicy, vrf_summary
from nbipam.netbox.client import NetBoxClient, NetBoxError, NotImplementedCommandError
from nbipam.output import TableView, err_console, print_error, render


def vrf_option(f):
    return click.option(
        "--vrf", "-i", "vrf_id", default=None,
        help="VRF ID to filter on (default: NETBOX_VRF, otherwise all VRFs)",
    )(f)


def plain_option(f):
    return click.option(
        "--plain", "-p", is_flag=True,
        help="Print bare rows without header, footer or borders; cells are space separated, empty cells print as -",
    )(f)


def _require_prefix(ctx, param, value: str | None) -> str | None:
    # NetBox ignores an empty prefix filter, which would match every prefix
    if value is not None and not value.strip():
        raise click.BadParameter("must not be empty")
    return value


def _config(ctx: click.Context) -> NetBoxConfig:
    return ctx.obj["config"]


def _resolve_vrf(ctx: click.Context, vrf_id: str | None) -> str | None:
    """Flag value, else the configured default, else no VRF filter."""
    if vrf_id is not None:
        return vrf_id or None
    return _config(ctx).vrf or None


def _run(
    ctx: click.Context,
    operation: Callable[..., Awaitable[TableView]],
    *args: Any,
    **kwargs: Any,
) -> TableView:
    """Run one operation against a client that lives for this command only."""
    config = _config(ctx)
    transport = ctx.obj.get("transport")

    async def runner() -> TableView:
        async with NetBoxClient(config, transport=transport) as client:
            return await operation(client, *args, **kwargs)

    return asyncio.run(runner())


def _execute(
    ctx: click.Context,
    operation: Callable[..., Awaitable[TableView]],
    *args: Any,
    plain: bool = False,
    **kwargs: Any,
) -> None:
    """Run an operation, render its result and map failures to exit code 1."""
    try:
        if plain:
            view = _run(ctx, operation, *args, **kwargs)
        else:
            with err_console.status("[cyan]Querying NetBox...[/cyan]"):
                view = _run(ctx, operation, *args, **kwargs)
    except PartialDeleteError as e:
        render(e.completed, plain=plain)
        print_error(str(e))
        raise SystemExit(1)
    except (ConfigError, NetBoxError) as e:
        print_error(str(e))
        raise SystemExit(1)

    render(view, plain=plain)


def _not_implemented(operation: str) -> None:
    print_error(str(NotImplementedCommandError(operation)))
    raise SystemExit(1)


# ================================================================
# Prefix commands
# ================================================================

@click.group()
def prefix():
    """IP prefix commands.

    \b
    Examples:
        nbipam prefix list --vrf 17 --mask-length 32
        nbipam prefix list --plain | wc -l
        nbipam prefix del --vrf 17 --prefix 10.0.0.0/24 --dry-run
    """
    pass


@prefix.command("list")
@vrf_option
@click.option("--mask-length", "-l", default=None, help="Only prefixes with this mask length")
@plain_option
@click.pass_context
def prefix_list(ctx, vrf_id: str | None, mask_length: str | None, plain: bool):
    """List prefixes, with a count in the footer.

    Examples:
        nbipam prefix list --vrf 17 --mask-length 32
    """
    _execute(ctx, list_prefixes, _resolve_vrf(ctx, vrf_id), mask_length, plain=plain)


@prefix.command("add")
@vrf_option
@click.option("--prefix", "prefix_", default=None, help="Prefix in CIDR form")
@click.option("--description", "-d", default="", help="Prefix description")
@click.pass_context
def prefix_add(ctx, vrf_id: str | None, prefix_: str | None, description: str):
    """Add a prefix (not implemented)."""
    _not_implemented("prefix add")


@prefix.command("del")
@vrf_option
@click.option("--prefix", "prefix_", required=True, callback=_require_prefix,
              help="Prefix to match, passed to NetBox as given")
@click.option("--dry-run", is_flag=True, help="Show matching prefixes without deleting them")
@plain_option
@click.pass_context
def prefix_del(ctx, vrf_id: str | None, prefix_: str, dry_run: bool, plain: bool):
    """Delete ALL prefixes matching the filter.

    Every match is deleted, not just the first one. Use --dry-run to
    see what a filter matches before deleting.

    Examples:
        nbipam prefix del --vrf 17 --prefix 10.0.0.1/32
    """
    _execute(ctx, delete_prefixes, _resolve_vrf(ctx, vrf_id), prefix_, dry_run=dry_run, plain=plain)


# ================================================================
# IP address commands
# ================================================================

@click.group()
def ip():
    """IP address commands.

    \b
    Examples:
        nbipam ip search --vrf 17 --address 10.0.0.
        nbipam ip add --vrf 17 --address 10.0.0.5/32 --dns-name host.example.com
    """
    pass


@ip.command("list")
@vrf_option
@plain_option
@click.pass_context
def ip_list(ctx, vrf_id: str | None, plain: bool):
    """List IP addresses (not implemented)."""
    _not_implemented("ip list")


@ip.command("search")
@vrf_option
@click.option("--address", "-a", required=True, help="Address or address fragment to search for")
@click.option("--exact", is_flag=True, help="Match the address exactly instead of free-text search")
@plain_option
@click.pass_context
def ip_search(ctx, vrf_id: str | None, address: str, exact: bool, plain: bool):
    """Search IP addresses.

    Examples:
        nbipam ip search --address 192.0.2.
        nbipam ip search --vrf 17 --address 192.0.2.5/32 --exact
    """
    _execute(ctx, search_ip_addresses, _resolve_vrf(ctx, vrf_id), address, exact=exact, plain=plain)


@ip.command("add")
@click.option("--vrf", "-i", "vrf_id", type=int, default=None,
              help="VRF ID for the new address; 0 means no VRF (default: NETBOX_VRF)")
@click.option("--address", "-a", required=True, help="Address with mask, e.g. 192.0.2.5/32")
@click.option("--dns-name", "-n", default="", help="DNS name")
@click.option("--description", "-d", default="", help="Description")
@plain_option
@click.pass_context
def ip_add(ctx, vrf_id: int | None, address: str, dns_name: str, description: str, plain: bool):
    """Create an active IP address.

    Examples:
        nbipam ip add --vrf 17 --address 192.0.2.5/32 --dns-name www.example.com
    """
    if vrf_id is None and _config(ctx).vrf:
        try:
            vrf_id = int(_config(ctx).vrf)
        except ValueError:
            print_error(f"NETBOX_VRF must be a numeric VRF ID, got {_config(ctx).vrf!r}")
            raise SystemExit(1)

    _execute(ctx, create_ip_address, address, vrf_id, dns_name, description, plain=plain)


@ip.command("delete")
@vrf_option
@click.option("--address", "-a", default=None, help="Address to delete")
@click.pass_context
def ip_delete(ctx, vrf_id: str | None, address: str | None):
    """Delete an IP address (not implemented)."""
    _not_implemented("ip delete")


# ================================================================
# VRF commands
# ================================================================

@click.group(invoke_without_command=True)
@plain_option
@click.pass_context
def vrf(ctx, plain: bool):
    """VRF commands. Without a subcommand, lists VRFs.

    \b
    Examples:
        nbipam vrf
        nbipam vrf summary --on-error abort
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(vrf_list, plain=plain)


@vrf.command("list")
@plain_option
@click.pass_context
def vrf_list(ctx, plain: bool):
    """List VRFs."""
    _execute(ctx, list_vrfs, plain=plain)


@vrf.command("summary")
@click.option("--on-error", type=click.Choice([p.value for p in ErrorPolicy]), default=ErrorPolicy.SKIP.value,
              help="skip: show failed counts as n/a; abort: fail the report")
@click.option("--concurrency", "-c", type=click.IntRange(min=1), default=None,
              help="Parallel count queries (default: NETBOX_CONCURRENCY or 8)")
@plain_option
@click.pass_context
def vrf_summary_cmd(ctx, on_error: str, concurrency: int | None, plain: bool):
    """Per-VRF address count and prefix counts for /32 to /23.

    Examples:
        nbipam vrf summary
        nbipam vrf summary --plain --on-error abort
    """
    concurrency = concurrency or _config(ctx).summary_concurrency
    if concurrency < 1:
        print_error(f"Concurrency must be at least 1, got {concurrency}")
        raise SystemExit(1)

    _execute(ctx, vrf_summary, on_error=ErrorPolicy(on_error), concurrency=concurrency, plain=plain)
