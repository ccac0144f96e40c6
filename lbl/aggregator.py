"""Aggregator: result rows, per-node grouping, candidates nobody answered for."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from lbl.models import HostingRecord

logger = logging.getLogger(__name__)


@dataclass
class AggregatedResult:
    """Presentation-ready view of a probe sweep.

    Attributes:
        rows: ``(node, ip)`` pairs in probe order.
        by_node: Node name → hosted IPs, in first-seen order.
        unmatched: Candidate IPs for which no node answered, in
            candidate order.
    """

    rows: list[tuple[str, str]] = field(default_factory=list)
    by_node: dict[str, list[str]] = field(default_factory=dict)
    unmatched: list[str] = field(default_factory=list)


def to_rows(records: Sequence[HostingRecord]) -> list[tuple[str, str]]:
    """Materialize hosting records as two-column rows, order preserved."""
    return [record.as_row() for record in records]


def aggregate(
    records: Sequence[HostingRecord],
    candidates: Sequence[str] = (),
) -> AggregatedResult:
    """Build an ``AggregatedResult`` from hosting records.

    Args:
        records: Hosting records as returned by the orchestrator.
        candidates: The candidate IPs that were probed; used to work out
            which of them have no hosting node.

    Returns:
        The aggregated view.  An empty *records* gives zero rows.
    """
    by_node: dict[str, list[str]] = {}
    hosted: set[str] = set()

    for record in records:
        by_node.setdefault(record.node, []).append(record.ip)
        hosted.add(record.ip)

    unmatched = [ip for ip in candidates if ip not in hosted]
    if unmatched:
        logger.debug("No hosting node found for: %s", ", ".join(unmatched))

    return AggregatedResult(
        rows=to_rows(records),
        by_node=by_node,
        unmatched=unmatched,
    )
