"""Routing-table resolver: pick the device column of a prefixed route by line position."""

import re
import shlex

from lbl.resolvers import InterfaceResolver

# Line 0 of the transport output is ansible's "host | CHANGED | rc=0 >>"
# header, so index 2 is the second matching route.
DEFAULT_LINE_INDEX = 2

# Characters with a meaning inside an awk /regex/ literal.
_AWK_SPECIAL_RE = re.compile(r"([\\.^$*+?()\[\]{}|/])")


def awk_literal(text: str) -> str:
    """Escape *text* so an awk ``/.../`` pattern matches it literally."""
    return _AWK_SPECIAL_RE.sub(r"\\\1", text)


class RouteResolver(InterfaceResolver):
    """Reads ``ip route`` through awk and takes one output line by position."""

    name = "route"

    def __init__(self, *args, line_index: int = DEFAULT_LINE_INDEX, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.line_index = line_index

    def command(self) -> str:
        program = f"/{awk_literal(self.prefix)}/ {{print $3}}"
        return f"ip route | awk {shlex.quote(program)} | head -2"

    def parse(self, output: str) -> str | None:
        lines = output.strip().splitlines()
        if len(lines) <= self.line_index:
            return None
        return lines[self.line_index].strip() or None
