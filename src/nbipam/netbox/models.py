"""
Data models for NetBox IPAM objects.

These are read-only projections of remote state; nothing is
persisted locally.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class IPAddressStatus(str, Enum):
    """Status given to IP addresses created by this client."""
    ACTIVE = "active"


def _status_value(data: dict[str, Any]) -> str | None:
    # NetBox returns {"value": "active", "label": "Active"} for choice fields
    status = data.get("status")
    if isinstance(status, dict):
        return status.get("value")
    return status


@dataclass
class VRFRef:
    """Nested VRF reference embedded in prefixes and addresses."""
    id: int
    name: str | None = None

    @classmethod
    def from_netbox(cls, data: dict[str, Any] | None) -> "VRFRef | None":
        """Create a reference from a nested NetBox object, if present."""
        if not data:
            return None
        return cls(id=data["id"], name=data.get("name"))


@dataclass
class VRF:
    """
    A routing table namespace for prefixes and addresses.

    Maps to NetBox 'ipam.vrf'.
    """
    id: int
    name: str
    rd: str | None = None
    description: str | None = None

    @classmethod
    def from_netbox(cls, data: dict[str, Any]) -> "VRF":
        """Create VRF from NetBox API response."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            rd=data.get("rd"),
            description=data.get("description") or None,
        )


@dataclass
class Prefix:
    """
    A CIDR network range.

    Maps to NetBox 'ipam.prefix'. A prefix without a VRF lives in the
    global table.
    """
    id: int
    prefix: str
    vrf: VRFRef | None = None
    status: str | None = None
    description: str | None = None

    @classmethod
    def from_netbox(cls, data: dict[str, Any]) -> "Prefix":
        """Create Prefix from NetBox API response."""
        return cls(
            id=data["id"],
            prefix=data.get("prefix") or "",
            vrf=VRFRef.from_netbox(data.get("vrf")),
            status=_status_value(data),
            description=data.get("description") or None,
        )


@dataclass
class IPAddress:
    """
    A single address with its mask, e.g. 192.0.2.5/32.

    Maps to NetBox 'ipam.ipaddress'.
    """
    id: int
    address: str
    vrf: VRFRef | None = None
    dns_name: str = ""
    description: str = ""
    status: str | None = None

    @classmethod
    def from_netbox(cls, data: dict[str, Any]) -> "IPAddress":
        """Create IPAddress from NetBox API response."""
        return cls(
            id=data["id"],
            address=data.get("address") or "",
            vrf=VRFRef.from_netbox(data.get("vrf")),
            dns_name=data.get("dns_name") or "",
            description=data.get("description") or "",
            status=_status_value(data),
        )


@dataclass
class Page:
    """One page of a NetBox list response."""
    count: int
    results: list[dict[str, Any]]
    next: str | None = None

    @classmethod
    def from_netbox(cls, data: dict[str, Any]) -> "Page":
        """Create Page from a paginated NetBox API response."""
        results = data.get("results") or []
        return cls(
            count=data.get("count", len(results)),
            results=results,
            next=data.get("next"),
        )
