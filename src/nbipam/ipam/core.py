"""
Core IPAM operations.

Each operation builds its query, calls NetBox and projects the result
into a TableView ready for rendering.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging

from nbipam.ipam.query import (
    address_search_filter,
    ip_create_payload,
    prefix_list_filter,
    prefix_match_filter,
    vrf_list_filter,
)
from nbipam.netbox.client import (
    NetBoxAPIError,
    NetBoxClient,
    NetBoxError,
)
from nbipam.netbox.models import VRFRef
from nbipam.output import TableView

logger = logging.getLogger(__name__)

STATUS_DELETED = "Deleted"
STATUS_MATCHED = "Matched"
STATUS_CREATED = "Created"
GLOBAL_VRF_LABEL = "Global"


class PartialDeleteError(NetBoxError):
    """A bulk delete stopped partway; earlier deletions are not undone."""

    def __init__(self, message: str, completed: TableView, cause: NetBoxError):
        super().__init__(message)
        self.completed = completed
        self.cause = cause


def _vrf_id_label(vrf: VRFRef | None) -> str:
    return str(vrf.id) if vrf else "-"


# ================================================================
# Prefixes
# ================================================================

async def list_prefixes(
    client: NetBoxClient,
    vrf_id: str | None = None,
    mask_length: str | None = None,
) -> TableView:
    """List prefixes; the footer carries the number of rows."""
    query = prefix_list_filter(vrf_id, mask_length)
    prefixes = await client.list_prefixes(query.to_params())

    view = TableView(columns=["Prefix"])
    for prefix in prefixes:
        view.add_row(prefix.prefix)
    view.footer = [str(len(view.rows))]
    return view


async def delete_prefixes(
    client: NetBoxClient,
    vrf_id: str | None,
    prefix: str,
    dry_run: bool = False,
) -> TableView:
    """
    Delete every prefix matching the VRF and prefix filter.

    All matches are deleted, in the order NetBox returns them. If one
    delete fails the remaining matches are left alone and a
    PartialDeleteError reports what was already removed.

    Args:
        client: Connected NetBox client
        vrf_id: VRF filter, None for all VRFs
        prefix: Prefix filter, passed to NetBox as given
        dry_run: Only report the matches, delete nothing

    Returns:
        One row per matched prefix: VRF id, prefix, status
    """
    query = prefix_match_filter(vrf_id, prefix)
    matches = await client.list_prefixes(query.to_params())
    logger.info(f"{len(matches)} prefixes match {prefix!r} (vrf={vrf_id or 'any'})")

    view = TableView(columns=["VRF", "Prefix", "Status"])
    for index, match in enumerate(matches):
        if dry_run:
            view.add_row(_vrf_id_label(match.vrf), match.prefix, STATUS_MATCHED)
            continue

        try:
            await client.delete_prefix(match.id)
        except NetBoxError as e:
            raise PartialDeleteError(
                f"Deleting {match.prefix} failed after {index} of {len(matches)} "
                f"prefixes were deleted: {e}",
                completed=view,
                cause=e,
            ) from e

        logger.info(f"Deleted prefix {match.prefix} (id={match.id})")
        view.add_row(_vrf_id_label(match.vrf), match.prefix, STATUS_DELETED)

    return view


# ================================================================
# VRFs
# ================================================================

async def list_vrfs(client: NetBoxClient) -> TableView:
    """List VRFs by ID and name."""
    vrfs = await client.list_vrfs(vrf_list_filter().to_params())

    view = TableView(columns=["ID", "VRF"])
    for vrf in vrfs:
        view.add_row(str(vrf.id), vrf.name)
    return view


# ================================================================
# IP addresses
# ================================================================

async def search_ip_addresses(
    client: NetBoxClient,
    vrf_id: str | None,
    address: str,
    exact: bool = False,
) -> TableView:
    """Search IP addresses; matching is done by NetBox."""
    query = address_search_filter(vrf_id, address, exact=exact)
    addresses = await client.list_ip_addresses(query.to_params())

    view = TableView(columns=["Address"])
    for ip in addresses:
        view.add_row(ip.address)
    return view


async def create_ip_address(
    client: NetBoxClient,
    address: str,
    vrf_id: int | None = None,
    dns_name: str = "",
    description: str = "",
) -> TableView:
    """
    Create an active IP address.

    The VRF column shows the name NetBox reports for the new record.
    A VRF id of 0 is the same as no VRF.

    Raises:
        NetBoxAPIError: If a VRF was requested but the created record
            carries no VRF
    """
    payload = ip_create_payload(address, vrf_id, dns_name, description)
    record = await client.create_ip_address(payload)
    logger.info(f"Created IP address {record.address} (id={record.id})")

    if "vrf" in payload:
        if record.vrf is None:
            raise NetBoxAPIError(
                f"Created {record.address} but NetBox returned no VRF for it (requested VRF {vrf_id})"
            )
        vrf_name = record.vrf.name or str(record.vrf.id)
    else:
        vrf_name = record.vrf.name if record.vrf and record.vrf.name else GLOBAL_VRF_LABEL

    view = TableView(columns=["VRF", "Address", "DNS Name", "Status"])
    view.add_row(vrf_name, record.address, record.dns_name, STATUS_CREATED)
    return view
