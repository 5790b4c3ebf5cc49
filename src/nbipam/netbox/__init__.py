"""
NetBox API Module

Provides the REST client and data models for the NetBox IPAM
endpoints (VRFs, prefixes, IP addresses).
"""

from nbipam.netbox.client import (
    NetBoxClient,
    NetBoxError,
    NetBoxAPIError,
    NetBoxRequestError,
    NotImplementedCommandError,
)
from nbipam.netbox.models import VRF, VRFRef, Prefix, IPAddress, IPAddressStatus, Page

__all__ = [
    "NetBoxClient",
    "NetBoxError",
    "NetBoxAPIError",
    "NetBoxRequestError",
    "NotImplementedCommandError",
    "VRF",
    "VRFRef",
    "Prefix",
    "IPAddress",
    "IPAddressStatus",
    "Page",
]
