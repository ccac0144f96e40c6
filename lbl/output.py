"""Output renderer: rich table formatter, JSON formatter, plain/colored themes."""

import json
import logging
import sys
from dataclasses import dataclass
from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lbl.locator import LocateResult

logger = logging.getLogger(__name__)

_COLUMNS = ("Node Name", "LoadBalancer IP")


@dataclass(frozen=True)
class Theme:
    """Rich style strings for each kind of output; empty means unstyled."""

    header: str = ""
    cell: str = ""
    accent: str = ""
    info: str = ""
    welcome: str = ""
    separator: str = ""


PLAIN = Theme()
COLORED = Theme(
    header="bold red",
    cell="bold yellow",
    accent="green",
    info="cyan",
    welcome="green",
    separator="magenta",
)


def get_theme(color: bool) -> Theme:
    return COLORED if color else PLAIN


def make_console(
    *, color: bool = True, file: object | None = None, width: int | None = None
) -> Console:
    """Build the console every renderer in this module writes to."""
    return Console(
        file=file or sys.stdout,
        highlight=False,
        no_color=not color,
        width=width,
    )


def _styled(text: str, style: str) -> str:
    text = escape(text)
    return f"[{style}]{text}[/{style}]" if style else text


# ---------------------------------------------------------------------------
# Banners
# ---------------------------------------------------------------------------


def print_welcome(console: Console, user: str, theme: Theme = COLORED) -> None:
    """Greet the operator and say what the tool does."""
    console.print("\n*******************************************")
    console.print(_styled(f"*** Welcome, {user}! ***", theme.welcome))
    console.print("*******************************************")
    console.print(
        _styled(
            "This tool helps you find the node name associated with "
            "LoadBalancer IPs in your Kubernetes cluster.",
            theme.info,
        )
    )


def print_working(console: Console) -> None:
    """Banner shown just before the probe sweep starts."""
    console.print("\n*******************************************")
    console.print("*** Please wait... I am working on it ***")
    console.print("*******************************************")


# ---------------------------------------------------------------------------
# Result rendering
# ---------------------------------------------------------------------------


def render(
    result: LocateResult,
    fmt: str,
    *,
    file: object | None = None,
    width: int | None = None,
    color: bool = True,
) -> None:
    """Dispatch output to the appropriate formatter.

    Args:
        result: Finished run to render.
        fmt: Output format, ``"table"`` or ``"json"``.
        file: Writable file object for output (default: ``sys.stdout``).
        width: Explicit console width (default: auto-detect).
        color: Use the colored theme for tables.

    Raises:
        ValueError: If *fmt* is not ``"table"`` or ``"json"``.
    """
    if fmt == "table":
        render_table(result, file=file, width=width, color=color)
    elif fmt == "json":
        render_json(result, file=file)
    else:
        raise ValueError(f"Unknown output format: {fmt!r}")


def build_table(rows: list[tuple[str, str]], theme: Theme = COLORED) -> Table:
    """Two-column node / IP table; no rows is a valid, empty table."""
    table = Table(header_style=theme.header or None)
    for header in _COLUMNS:
        table.add_column(header, style=theme.cell or None)
    for node, ip in rows:
        table.add_row(escape(node), escape(ip))
    return table


def render_table(
    result: LocateResult,
    *,
    file: object | None = None,
    width: int | None = None,
    color: bool = True,
) -> None:
    """Render *result* as a ``rich`` table plus the interface used."""
    theme = get_theme(color)
    console = make_console(color=color, file=file, width=width)

    console.print("\nHere is your result:")
    console.print(build_table(result.aggregated.rows, theme))

    unmatched = result.aggregated.unmatched
    if unmatched:
        console.print(f"  No hosting node found for: {escape(', '.join(unmatched))}")

    console.print(
        f"\nInterface Used to run ARP command: {_styled(result.interface, theme.accent)}\n"
    )
    console.print(_styled("****", theme.separator))


def render_json(result: LocateResult, *, file: object | None = None) -> None:
    """Render *result* as JSON to *file*.

    The object has ``interface``, ``results`` (list of ``{"node", "ip"}``),
    ``by_node`` and ``unmatched`` keys.
    """
    out = file or sys.stdout
    payload = _locate_result_to_dict(result)
    json.dump(payload, out, indent=2)
    out.write("\n")  # type: ignore[union-attr]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _locate_result_to_dict(result: LocateResult) -> dict:
    aggregated = result.aggregated
    return {
        "interface": result.interface,
        "results": [{"node": node, "ip": ip} for node, ip in aggregated.rows],
        "by_node": aggregated.by_node,
        "unmatched": aggregated.unmatched,
    }


def render_to_string(
    result: LocateResult, fmt: str, *, width: int = 200, color: bool = False
) -> str:
    """Render to a string instead of stdout, useful for testing."""
    buf = StringIO()
    render(result, fmt, file=buf, width=width, color=color)
    return buf.getvalue()
