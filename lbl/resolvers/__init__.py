"""Interface resolver registry and abstract InterfaceResolver base class."""

import ipaddress
import logging
import re
from abc import ABC, abstractmethod

from lbl.transport import Transport, TransportError

logger = logging.getLogger(__name__)

_INTERFACE_NAME_RE = re.compile(r"^[A-Za-z0-9._@-]+$")


class InterfaceDiscoveryError(Exception):
    """Raised when no usable ARP interface could be discovered."""


def is_valid_interface_name(name: str) -> bool:
    """Return ``True`` if *name* looks like a Linux interface name.

    Addresses are rejected: the route resolver reads a single column and
    a shifted ``ip route`` layout would otherwise hand back a gateway IP.
    """
    if not _INTERFACE_NAME_RE.match(name):
        return False
    try:
        ipaddress.ip_address(name)
    except ValueError:
        return True
    return False


class InterfaceResolver(ABC):
    """Discovers the interface carrying the floating-IP subnet.

    Discovery runs one diagnostic command through the transport against
    a single probe node; subclasses supply the command and its parser.

    Args:
        transport: Remote command transport.
        target: Host or host pattern the diagnostic command runs on.
        username: Remote login user.
        prefix: Leading characters of addresses in the floating-IP subnet.
    """

    name: str = ""

    def __init__(
        self, transport: Transport, target: str, username: str, prefix: str
    ) -> None:
        self.transport = transport
        self.target = target
        self.username = username
        self.prefix = prefix

    @abstractmethod
    def command(self) -> str:
        """Return the shell command whose output lists interfaces or routes."""

    @abstractmethod
    def parse(self, output: str) -> str | None:
        """Extract the interface name from *output*, or ``None`` if absent."""

    def resolve(self) -> str:
        """Run discovery and return a non-empty interface name.

        Raises:
            InterfaceDiscoveryError: If the remote command fails, nothing
                in its output matches, or the match is not a plausible
                interface name.
        """
        command = self.command()
        logger.debug("Discovering interface on %s with %r", self.target, command)

        try:
            result = self.transport.execute(self.target, self.username, command)
        except TransportError as exc:
            raise InterfaceDiscoveryError(str(exc)) from exc

        if not result.ok:
            raise InterfaceDiscoveryError(
                f"Discovery command failed on {self.target}: {result.output.strip()}"
            )

        logger.debug("Discovery output from %s:\n%s", self.target, result.output)
        name = self.parse(result.output)
        if not name:
            raise InterfaceDiscoveryError(
                f"No network interface with an address starting with "
                f"{self.prefix!r} found on {self.target}"
            )
        if not is_valid_interface_name(name):
            raise InterfaceDiscoveryError(
                f"Discovered value {name!r} is not a valid interface name"
            )

        logger.info("Using interface %s for ARP probes", name)
        return name


def _build_registry() -> dict[str, type[InterfaceResolver]]:
    """Build the strategy-name → resolver-class mapping.

    Imports are deferred to avoid circular imports.
    """
    from lbl.resolvers.address import AddressResolver
    from lbl.resolvers.route import RouteResolver

    return {
        "address": AddressResolver,
        "route": RouteResolver,
    }


def get_resolver(
    strategy: str,
    transport: Transport,
    target: str,
    username: str,
    prefix: str,
) -> InterfaceResolver:
    """Look up and instantiate the resolver for *strategy*.

    Raises:
        ValueError: If *strategy* is not in the registry.
    """
    registry = _build_registry()
    resolver_cls = registry.get(strategy)
    if resolver_cls is None:
        known = ", ".join(sorted(registry))
        raise ValueError(f"Unknown strategy {strategy!r}. Known strategies: {known}")
    return resolver_cls(transport, target, username, prefix)


def registered_strategies() -> list[str]:
    """Return a sorted list of all registered strategy names."""
    return sorted(_build_registry())
