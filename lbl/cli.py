"""CLI entry point for the lbl tool."""

import getpass
import logging
import sys
from typing import NoReturn

import click

from lbl.cluster import (
    ClusterError,
    connect,
    list_loadbalancer_ips,
    list_nodes,
    parse_ip_list,
)
from lbl.config import (
    DEFAULT_KUBECONFIG,
    INTERFACE_STRATEGIES,
    ConfigError,
    load_config,
)
from lbl.inventory import InventoryError, InventoryManager
from lbl.locator import locate
from lbl.output import get_theme, make_console, print_welcome, print_working, render
from lbl.resolvers import InterfaceDiscoveryError
from lbl.spinner import Spinner
from lbl.transport import AnsibleTransport

logger = logging.getLogger(__name__)

FORMATS = ("table", "json")
CHOICES = ("yes", "no")


@click.command()
@click.option(
    "--kubeconfig",
    "-k",
    default=DEFAULT_KUBECONFIG,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Path to the kubeconfig file.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    default="table",
    type=click.Choice(FORMATS, case_sensitive=False),
    show_default=True,
    help="Output format.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=False),
    help="Path to YAML config file (default: ~/.lbl/config.yaml).",
)
@click.option(
    "--strategy",
    "-s",
    default=None,
    type=click.Choice(INTERFACE_STRATEGIES, case_sensitive=False),
    help="Interface discovery strategy (default: from config, else route).",
)
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(
    kubeconfig: str,
    output_format: str,
    config_path: str | None,
    strategy: str | None,
    no_color: bool,
    verbose: bool,
) -> None:
    """Find the cluster node answering ARP for LoadBalancer IPs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        cfg = load_config(config_path)
    except (ConfigError, FileNotFoundError) as exc:
        _fail(exc)

    logger.debug("Config loaded: %s", cfg)
    color = cfg.color and not no_color
    strategy = strategy or cfg.interface_strategy

    try:
        api = connect(kubeconfig)
    except ClusterError as exc:
        _fail(exc)

    # Keep stdout clean for machine-readable output.
    to_stderr = output_format == "json"
    console = make_console(color=color, file=sys.stderr if to_stderr else None)
    try:
        current_user = getpass.getuser()
    except (OSError, KeyError) as exc:
        _fail(f"Error getting current user: {exc}")
    print_welcome(console, current_user, get_theme(color))

    username = click.prompt(
        "\nEnter the Ansible username to run ARP command "
        "(Ex: johndoe or johndoe-adm)",
        err=to_stderr,
    ).strip()

    option = click.prompt(
        "\nDo you want to get all LoadBalancer IPs ? (yes/no)", err=to_stderr
    ).strip()
    if option not in CHOICES:
        _fail("Invalid option. Please choose 'yes' or 'no'.")

    try:
        nodes = list_nodes(api)
        if option == "yes":
            candidates = list_loadbalancer_ips(api, cfg.ip_prefix)
        else:
            candidates = parse_ip_list(
                click.prompt("\nEnter LB IP(s) separated by comma", err=to_stderr)
            )
    except ClusterError as exc:
        _fail(exc)

    if not nodes:
        _fail("No nodes found in the cluster")

    inventory = InventoryManager(cfg.inventory_path, cfg.inventory_group)
    transport = AnsibleTransport(
        inventory.path, binary=cfg.ansible_binary, timeout=cfg.command_timeout
    )

    print_working(console)
    try:
        result = locate(
            nodes,
            candidates,
            username,
            inventory=inventory,
            transport=transport,
            strategy=strategy,
            prefix=cfg.ip_prefix,
            probe_count=cfg.probe_count,
            progress=Spinner(console),
        )
    except (InventoryError, InterfaceDiscoveryError) as exc:
        _fail(exc)

    render(result, output_format, color=color)

    if result.teardown_error is not None:
        click.echo(f"Warning: {result.teardown_error}", err=True)


def _fail(message: object) -> NoReturn:
    """Report a fatal setup error and exit non-zero."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)
