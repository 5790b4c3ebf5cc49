"""
IPAM Tools Module

Query building, result projection and reports for NetBox VRFs,
prefixes and IP addresses.
"""

from nbipam.ipam.query import (
    LIST_LIMIT,
    QueryFilter,
    normalize_vrf,
    prefix_list_filter,
    prefix_match_filter,
    address_search_filter,
    count_filter,
    ip_create_payload,
)
from nbipam.ipam.core import (
    PartialDeleteError,
    list_prefixes,
    delete_prefixes,
    list_vrfs,
    search_ip_addresses,
    create_ip_address,
)
from nbipam.ipam.report import (
    SUMMARY_MASK_LENGTHS,
    CellState,
    CountCell,
    ErrorPolicy,
    SummaryReport,
    VRFSummary,
    summary_view,
    vrf_summary,
)

__all__ = [
    "LIST_LIMIT",
    "QueryFilter",
    "normalize_vrf",
    "prefix_list_filter",
    "prefix_match_filter",
    "address_search_filter",
    "count_filter",
    "ip_create_payload",
    "PartialDeleteError",
    "list_prefixes",
    "delete_prefixes",
    "list_vrfs",
    "search_ip_addresses",
    "create_ip_address",
    "SUMMARY_MASK_LENGTHS",
    "CellState",
    "CountCell",
    "ErrorPolicy",
    "SummaryReport",
    "VRFSummary",
    "summary_view",
    "vrf_summary",
]
