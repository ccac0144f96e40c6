"""Address-scan resolver: map the first prefixed address back to its interface."""

import logging
import re

from lbl.resolvers import InterfaceResolver

logger = logging.getLogger(__name__)

# "2: bond0.700    inet 7.10.0.12/24 brd 7.10.0.255 scope global bond0.700\ ..."
_ADDR_LINE_RE = re.compile(
    r"^\d+:\s+(?P<iface>[^\s:]+)\s+inet6?\s+(?P<addr>[^/\s]+)"
)


class AddressResolver(InterfaceResolver):
    """Scans ``ip -o addr show`` for the first address with the prefix.

    Lines that are not address records (such as the transport's own
    status header) are skipped.
    """

    name = "address"

    def command(self) -> str:
        return "ip -o addr show"

    def parse(self, output: str) -> str | None:
        for line in output.splitlines():
            match = _ADDR_LINE_RE.match(line.strip())
            if match is None:
                continue
            if match.group("addr").startswith(self.prefix):
                # VLAN sub-interfaces are listed as "bond0.700@bond0".
                iface = match.group("iface").split("@", 1)[0]
                logger.debug(
                    "Address %s belongs to %s", match.group("addr"), iface
                )
                return iface
        return None
