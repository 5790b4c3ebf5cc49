"""
nbipam - NetBox IPAM command-line client

Query and manage VRFs, prefixes and IP addresses stored in NetBox
from the terminal, with results rendered as console tables or as
plain rows for piping into other tools.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
