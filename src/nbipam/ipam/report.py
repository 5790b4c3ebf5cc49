"""
VRF summary report.

For every VRF: the number of IP addresses and, for each mask length
from /32 down to /23, the number of prefixes of that length. The
count queries are independent and run concurrently, bounded by a
semaphore; rows are assembled only after every count has finished.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from nbipam.ipam.query import count_filter, vrf_list_filter
from nbipam.netbox.client import NetBoxClient, NetBoxError
from nbipam.netbox.models import VRF
from nbipam.output import TableView

logger = logging.getLogger(__name__)

# Descending: 32, 31, ..., 23
SUMMARY_MASK_LENGTHS = tuple(range(32, 22, -1))

UNAVAILABLE_LABEL = "n/a"


class ErrorPolicy(str, Enum):
    """What to do when a single count query fails."""
    SKIP = "skip"    # mark the cell unavailable and keep going
    ABORT = "abort"  # fail the whole report


class CellState(str, Enum):
    VALUE = "value"
    ZERO = "zero"
    UNAVAILABLE = "unavailable"


@dataclass
class CountCell:
    """
    One count in the report.

    A failed query keeps a numeric value of 0 but records the error,
    so it can be told apart from a genuine zero.
    """
    value: int = 0
    error: str | None = None

    @property
    def state(self) -> CellState:
        if self.error is not None:
            return CellState.UNAVAILABLE
        if self.value == 0:
            return CellState.ZERO
        return CellState.VALUE

    @property
    def available(self) -> bool:
        return self.error is None

    def display(self) -> str:
        if self.state is CellState.UNAVAILABLE:
            return UNAVAILABLE_LABEL
        return str(self.value)


@dataclass
class VRFSummary:
    """Counts gathered for one VRF."""
    vrf: VRF
    addresses: CountCell
    prefixes: dict[int, CountCell] = field(default_factory=dict)

    def mask_counts(self) -> list[CountCell]:
        """Prefix counts in descending mask-length order."""
        return [self.prefixes[mask] for mask in SUMMARY_MASK_LENGTHS]

    def row(self) -> list[str]:
        return [
            str(self.vrf.id),
            self.vrf.name,
            self.addresses.display(),
            *(cell.display() for cell in self.mask_counts()),
        ]


class SummaryReport:
    """
    Builds the VRF summary.

    Usage:
        async with NetBoxClient() as client:
            summaries = await SummaryReport(client).build()
    """

    def __init__(
        self,
        client: NetBoxClient,
        on_error: ErrorPolicy = ErrorPolicy.SKIP,
        concurrency: int = 8,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.client = client
        self.on_error = ErrorPolicy(on_error)
        self.concurrency = concurrency
        self._semaphore: asyncio.Semaphore | None = None

    async def _count(self, label: str, query: Callable[[], Awaitable[int]]) -> CountCell:
        async with self._semaphore:
            try:
                value = await query()
            except NetBoxError as e:
                if self.on_error is ErrorPolicy.ABORT:
                    raise
                logger.warning(f"Count query for {label} failed: {e}")
                return CountCell(error=str(e))
        return CountCell(value=value)

    def _address_count(self, vrf: VRF) -> Awaitable[CountCell]:
        params = count_filter(vrf.id).to_params()
        return self._count(
            f"VRF {vrf.id} addresses",
            lambda: self.client.count_ip_addresses(params),
        )

    def _prefix_count(self, vrf: VRF, mask_length: int) -> Awaitable[CountCell]:
        params = count_filter(vrf.id, mask_length).to_params()
        return self._count(
            f"VRF {vrf.id} /{mask_length} prefixes",
            lambda: self.client.count_prefixes(params),
        )

    async def build(self) -> list[VRFSummary]:
        """Query every count and return one summary per VRF, in VRF order."""
        self._semaphore = asyncio.Semaphore(self.concurrency)

        vrfs = await self.client.list_vrfs(vrf_list_filter().to_params())
        logger.info(
            f"Summarizing {len(vrfs)} VRFs "
            f"({len(vrfs) * len(SUMMARY_MASK_LENGTHS)} prefix count queries)"
        )

        # Per VRF: address count first, then one prefix count per mask length
        per_vrf = 1 + len(SUMMARY_MASK_LENGTHS)
        tasks = []
        for vrf in vrfs:
            tasks.append(asyncio.ensure_future(self._address_count(vrf)))
            for mask_length in SUMMARY_MASK_LENGTHS:
                tasks.append(asyncio.ensure_future(self._prefix_count(vrf, mask_length)))

        try:
            cells = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        summaries = []
        for index, vrf in enumerate(vrfs):
            chunk = cells[index * per_vrf:(index + 1) * per_vrf]
            summaries.append(VRFSummary(
                vrf=vrf,
                addresses=chunk[0],
                prefixes=dict(zip(SUMMARY_MASK_LENGTHS, chunk[1:])),
            ))

        return summaries


def summary_view(summaries: list[VRFSummary]) -> TableView:
    """Project summaries into a table: ID, VRF, IPs, then /32 .. /23."""
    view = TableView(
        columns=["ID", "VRF", "IPs", *(f"/{mask}" for mask in SUMMARY_MASK_LENGTHS)],
        title="VRF Summary",
    )
    for summary in summaries:
        view.rows.append(summary.row())
    return view


async def vrf_summary(
    client: NetBoxClient,
    on_error: ErrorPolicy = ErrorPolicy.SKIP,
    concurrency: int = 8,
) -> TableView:
    """Build the VRF summary report as a table view."""
    report = SummaryReport(client, on_error=on_error, concurrency=concurrency)
    return summary_view(await report.build())
