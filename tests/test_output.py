"""Tests for the output renderer."""

import json
from io import StringIO

import pytest

from lbl.aggregator import aggregate
from lbl.locator import LocateResult
from lbl.models import HostingRecord
from lbl.output import (
    COLORED,
    PLAIN,
    build_table,
    get_theme,
    make_console,
    print_welcome,
    print_working,
    render,
    render_to_string,
)

# -- Fixtures ----------------------------------------------------------------


def _result(records: list[HostingRecord], candidates: list[str] | None = None) -> LocateResult:
    return LocateResult(
        interface="bond0.700",
        records=records,
        aggregated=aggregate(records, candidates or []),
    )


def _two_hosts() -> LocateResult:
    return _result(
        [HostingRecord("node-a", "7.1.2.3"), HostingRecord("node-b", "7.1.2.3")],
        ["7.1.2.3", "7.5.5.5"],
    )


# -- Table -------------------------------------------------------------------


class TestRenderTable:
    """Rich table output."""

    def test_headers(self) -> None:
        out = render_to_string(_two_hosts(), "table")
        assert "Node Name" in out
        assert "LoadBalancer IP" in out

    def test_rows_in_order(self) -> None:
        out = render_to_string(_two_hosts(), "table")
        assert out.index("node-a") < out.index("node-b")
        assert out.count("7.1.2.3") == 2

    def test_result_header_and_interface(self) -> None:
        out = render_to_string(_two_hosts(), "table")
        assert "Here is your result:" in out
        assert "Interface Used to run ARP command: bond0.700" in out

    def test_unmatched_summary(self) -> None:
        out = render_to_string(_two_hosts(), "table")
        assert "No hosting node found for: 7.5.5.5" in out

    def test_empty_result_renders_table(self) -> None:
        out = render_to_string(_result([]), "table")
        assert "Node Name" in out
        assert "No hosting node found" not in out

    def test_markup_in_names_is_literal(self) -> None:
        out = render_to_string(_result([HostingRecord("[bold]n1", "7.1.2.3")]), "table")
        assert "[bold]n1" in out

    def test_plain_has_no_ansi(self) -> None:
        out = render_to_string(_two_hosts(), "table", color=False)
        assert "\x1b[" not in out


class TestBuildTable:
    """build_table() column and row layout."""

    def test_two_columns(self) -> None:
        table = build_table([("n1", "7.1.2.3")])
        assert [c.header for c in table.columns] == ["Node Name", "LoadBalancer IP"]
        assert table.row_count == 1

    def test_zero_rows(self) -> None:
        assert build_table([]).row_count == 0

    def test_colored_theme_styles(self) -> None:
        table = build_table([], COLORED)
        assert table.header_style == "bold red"
        assert all(c.style == "bold yellow" for c in table.columns)

    def test_plain_theme_unstyled(self) -> None:
        table = build_table([], PLAIN)
        assert all(c.style in ("", None) for c in table.columns)


class TestRenderJson:
    """JSON output."""

    def test_structure(self) -> None:
        payload = json.loads(render_to_string(_two_hosts(), "json"))
        assert payload == {
            "interface": "bond0.700",
            "results": [
                {"node": "node-a", "ip": "7.1.2.3"},
                {"node": "node-b", "ip": "7.1.2.3"},
            ],
            "by_node": {"node-a": ["7.1.2.3"], "node-b": ["7.1.2.3"]},
            "unmatched": ["7.5.5.5"],
        }

    def test_empty(self) -> None:
        payload = json.loads(render_to_string(_result([]), "json"))
        assert payload["results"] == []


class TestRenderDispatch:
    """render() format dispatch."""

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="Unknown output format"):
            render(_two_hosts(), "xml", file=StringIO())


class TestBanners:
    """Welcome and working banners."""

    def test_welcome_names_user(self) -> None:
        buf = StringIO()
        print_welcome(make_console(file=buf, color=False), "jdoe", PLAIN)
        out = buf.getvalue()
        assert "*** Welcome, jdoe! ***" in out
        assert "LoadBalancer IPs" in out

    def test_working_banner(self) -> None:
        buf = StringIO()
        print_working(make_console(file=buf))
        assert "Please wait" in buf.getvalue()

    def test_get_theme(self) -> None:
        assert get_theme(True) is COLORED
        assert get_theme(False) is PLAIN
