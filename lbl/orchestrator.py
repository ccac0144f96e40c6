"""Probe orchestrator: one sequential ARP probe per (node, candidate IP) pair."""

import logging
import shlex
from collections.abc import Callable, Sequence

from lbl.models import CommandResult, HostingRecord, ProbeOutcome
from lbl.transport import Transport, TransportError

logger = logging.getLogger(__name__)

# arping output seen through ansible when the shell task fails.  The
# inverted sense (failure means "this node hosts the IP") is a heuristic
# tied to that output format, not a network-level guarantee.
HOSTING_MARKER = "FAILED"


def arping_command(interface: str, ip: str, count: int = 1) -> str:
    """Return the arping command line for one probe."""
    return (
        f"arping -q -I {shlex.quote(interface)} {shlex.quote(ip)} -c {int(count)}"
    )


def classify(result: CommandResult) -> ProbeOutcome:
    """Classify a finished probe.

    Only a failed command whose output contains ``HOSTING_MARKER`` counts
    as hosting; any other failure is a transport error.
    """
    if result.ok:
        return ProbeOutcome.NOT_HOSTING
    if HOSTING_MARKER in result.output:
        return ProbeOutcome.HOSTING
    return ProbeOutcome.TRANSPORT_ERROR


class ProbeOrchestrator:
    """Runs ARP probes for every node and candidate IP, strictly in order.

    Args:
        transport: Remote command transport.
        count: Number of ARP requests per probe.
        on_probe: Optional callback invoked after each probe with the node,
            the IP and its outcome.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        count: int = 1,
        on_probe: Callable[[str, str, ProbeOutcome], None] | None = None,
    ) -> None:
        self.transport = transport
        self.count = count
        self.on_probe = on_probe

    def probe(self, node: str, interface: str, ip: str, username: str) -> ProbeOutcome:
        """Issue one probe and return its classification."""
        command = arping_command(interface, ip, self.count)
        try:
            result = self.transport.execute(node, username, command)
        except TransportError as exc:
            logger.debug("Probe %s -> %s not run: %s", node, ip, exc)
            return ProbeOutcome.TRANSPORT_ERROR

        outcome = classify(result)
        logger.debug("Probe %s -> %s: %s", node, ip, outcome.value)
        return outcome

    def run(
        self,
        nodes: Sequence[str],
        interface: str,
        candidates: Sequence[str],
        username: str,
    ) -> list[HostingRecord]:
        """Probe every pair, nodes as the outer loop, and collect hosting pairs.

        Transport errors count as "not hosting" and never stop the sweep.

        Returns:
            Hosting records in probe order, neither deduplicated nor sorted.
        """
        hosting: list[HostingRecord] = []
        for node in nodes:
            for ip in candidates:
                outcome = self.probe(node, interface, ip, username)
                if outcome is ProbeOutcome.HOSTING:
                    hosting.append(HostingRecord(node=node, ip=ip))
                if self.on_probe is not None:
                    self.on_probe(node, ip, outcome)

        logger.info(
            "Ran %d probe(s), %d hosting pair(s)",
            len(nodes) * len(candidates),
            len(hosting),
        )
        return hosting
