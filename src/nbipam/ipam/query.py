"""
Request-parameter construction for IPAM queries.

Filter values are passed to NetBox as given. No CIDR parsing or range
checking happens here; NetBox rejects what it does not accept.
"""

from dataclasses import dataclass
from typing import Any

from nbipam.netbox.models import IPAddressStatus


# Hard cap on rows returned by any list query
LIST_LIMIT = 1000


def normalize_vrf(vrf_id: str | int | None) -> str | None:
    """
    Map a VRF option value to a filter value.

    None or an empty string means "no VRF filter". Anything else is
    passed through unchanged.
    """
    if vrf_id is None or vrf_id == "":
        return None
    return str(vrf_id)


@dataclass(frozen=True)
class QueryFilter:
    """Filter fields of a single list request."""
    vrf_id: str | None = None
    mask_length: str | None = None
    prefix: str | None = None
    address: str | None = None
    search: str | None = None
    limit: int | None = LIST_LIMIT

    def to_params(self) -> dict[str, Any]:
        """Query-string parameters; unset fields are omitted."""
        params = {
            "vrf_id": self.vrf_id,
            "mask_length": self.mask_length,
            "prefix": self.prefix,
            "address": self.address,
            "q": self.search,
            "limit": self.limit,
        }
        return {k: v for k, v in params.items() if v is not None}


def vrf_list_filter() -> QueryFilter:
    return QueryFilter()


def prefix_list_filter(vrf_id: str | None = None, mask_length: str | None = None) -> QueryFilter:
    """Filter for listing prefixes, optionally by VRF and mask length."""
    return QueryFilter(
        vrf_id=normalize_vrf(vrf_id),
        mask_length=mask_length if mask_length else None,
    )


def prefix_match_filter(vrf_id: str | None, prefix: str) -> QueryFilter:
    """Filter selecting the prefixes targeted by a bulk delete."""
    return QueryFilter(vrf_id=normalize_vrf(vrf_id), prefix=prefix)


def address_search_filter(vrf_id: str | None, address: str, exact: bool = False) -> QueryFilter:
    """
    Filter for an IP address search.

    By default the address is sent as a free-text query, leaving the
    matching rules to NetBox. With exact=True it is sent as an address
    filter instead.
    """
    if exact:
        return QueryFilter(vrf_id=normalize_vrf(vrf_id), address=address)
    return QueryFilter(vrf_id=normalize_vrf(vrf_id), search=address)


def count_filter(vrf_id: str | int | None, mask_length: int | None = None) -> QueryFilter:
    """Filter for a count-only query; the row cap does not apply."""
    return QueryFilter(
        vrf_id=normalize_vrf(vrf_id),
        mask_length=str(mask_length) if mask_length is not None else None,
        limit=None,
    )


def ip_create_payload(
    address: str,
    vrf_id: int | None = None,
    dns_name: str = "",
    description: str = "",
) -> dict[str, Any]:
    """
    Request body for creating an IP address.

    A VRF id of 0 or None means the address lives in the global table
    and no VRF reference is sent.
    """
    payload: dict[str, Any] = {
        "address": address,
        "status": IPAddressStatus.ACTIVE.value,
    }
    if vrf_id:
        payload["vrf"] = vrf_id
    if dns_name:
        payload["dns_name"] = dns_name
    if description:
        payload["description"] = description
    return payload
