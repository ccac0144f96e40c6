"""Data models: CommandResult, ProbeOutcome, HostingRecord dataclasses."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single remote command execution.

    Attributes:
        ok: ``True`` when the transport reports a zero exit status.
        output: Combined stdout and stderr captured from the transport.
    """

    ok: bool
    output: str = ""


class ProbeOutcome(Enum):
    """Classification of one (node, candidate IP) ARP probe."""

    HOSTING = "hosting"
    NOT_HOSTING = "not_hosting"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class HostingRecord:
    """A node that answers ARP for a LoadBalancer IP.

    Attributes:
        node: Cluster node name as known to the remote transport.
        ip: LoadBalancer IP the node answered for.
    """

    node: str
    ip: str

    def as_row(self) -> tuple[str, str]:
        return (self.node, self.ip)
