"""Run pipeline: inventory → interface discovery → probe sweep → aggregate → teardown."""

import contextlib
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from lbl.aggregator import AggregatedResult, aggregate
from lbl.inventory import InventoryError, InventoryManager
from lbl.models import HostingRecord
from lbl.orchestrator import ProbeOrchestrator
from lbl.resolvers import get_resolver
from lbl.transport import Transport

logger = logging.getLogger(__name__)


@dataclass
class LocateResult:
    """Everything a finished run hands to the presentation layer.

    Attributes:
        interface: Interface the ARP probes were sent from.
        records: Hosting records in probe order.
        aggregated: Rows, per-node grouping and unmatched candidates.
        teardown_error: Set when the inventory could not be removed after
            an otherwise successful run.
    """

    interface: str
    records: list[HostingRecord] = field(default_factory=list)
    aggregated: AggregatedResult = field(default_factory=AggregatedResult)
    teardown_error: InventoryError | None = None


def locate(
    nodes: Sequence[str],
    candidates: Sequence[str],
    username: str,
    *,
    inventory: InventoryManager,
    transport: Transport,
    strategy: str = "route",
    prefix: str = "7",
    probe_count: int = 1,
    progress: contextlib.AbstractContextManager | None = None,
) -> LocateResult:
    """Find which nodes answer ARP for the candidate IPs.

    The inventory is written first and removed on every exit path.
    Interface discovery runs against the first host of the inventory
    group.  *progress* (e.g. a ``Spinner``) is entered around discovery
    and the probe sweep and is always exited before this returns.

    Args:
        nodes: Node names, probed in this order.
        candidates: Candidate LoadBalancer IPs, probed in this order.
        username: Remote login user for the transport.
        inventory: Manager for the transient inventory the transport reads.
        transport: Remote command transport.
        strategy: Interface discovery strategy name.
        prefix: Leading characters of the floating-IP subnet.
        probe_count: ARP requests per probe.
        progress: Optional context manager shown while probing.

    Returns:
        A ``LocateResult``.

    Raises:
        InventoryError: If the inventory cannot be written.
        InterfaceDiscoveryError: If no ARP interface can be determined.
        ValueError: If *nodes* is empty or *strategy* is unknown.
    """
    if not nodes:
        raise ValueError("No nodes to probe")

    resolver = get_resolver(
        strategy,
        transport,
        target=f"{inventory.group}[0]",
        username=username,
        prefix=prefix,
    )
    orchestrator = ProbeOrchestrator(transport, count=probe_count)

    inventory.create(nodes, username)
    try:
        with progress or contextlib.nullcontext():
            interface = resolver.resolve()
            records = orchestrator.run(nodes, interface, candidates, username)
    except BaseException:
        try:
            inventory.remove()
        except InventoryError as exc:
            logger.warning("%s", exc)
        raise

    teardown_error: InventoryError | None = None
    try:
        inventory.remove()
    except InventoryError as exc:
        # Reported by the caller once the result is on screen.
        logger.debug("%s", exc)
        teardown_error = exc

    return LocateResult(
        interface=interface,
        records=records,
        aggregated=aggregate(records, candidates),
        teardown_error=teardown_error,
    )
