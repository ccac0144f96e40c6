"""YAML configuration file loading."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".lbl"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yaml"
DEFAULT_KUBECONFIG = str(Path.home() / ".kube" / "config")

INTERFACE_STRATEGIES = ("route", "address")

# Leading part of an IPv4 or IPv6 address; also keeps the prefix safe to
# embed in a shell command.
_IP_PREFIX_RE = re.compile(r"^[0-9A-Fa-f.:]+$")


@dataclass
class LocatorConfig:
    """Top-level configuration for the lbl tool.

    All fields have defaults matching the usual bare-metal cluster layout,
    where floating LoadBalancer IPs live in a subnet starting with ``7``.

    Attributes:
        inventory_path: Where the transient ansible inventory is written.
        inventory_group: Group header written as the first inventory line.
        ip_prefix: Leading characters shared by LoadBalancer IPs and the
            subnet of the interface used for ARP probing.
        interface_strategy: Interface discovery strategy name, one of
            ``INTERFACE_STRATEGIES``.
        ansible_binary: Path (or bare name for $PATH lookup) of ``ansible``.
        probe_count: Number of ARP requests sent per probe (``arping -c``).
        command_timeout: Seconds before a single remote command (probe or
            interface discovery) is abandoned, or None to wait indefinitely.
        color: Whether to render output with the colored theme.
    """

    inventory_path: str = "k8s.inventory"
    inventory_group: str = "k8s"
    ip_prefix: str = "7"
    interface_strategy: str = "route"
    ansible_binary: str = "ansible"
    probe_count: int = 1
    command_timeout: float | None = None
    color: bool = True


class ConfigError(Exception):
    """Raised when a configuration file is malformed or unreadable."""


def load_config(path: Path | str | None = None) -> LocatorConfig:
    """Read a ``LocatorConfig`` from YAML.

    With no *path*, ``~/.lbl/config.yaml`` is used when present and plain
    defaults otherwise.  Keys missing from the file keep their defaults.

    Raises:
        FileNotFoundError: If an explicit *path* does not exist.
        ConfigError: If the file is not a YAML mapping or a value has the
            wrong type or an out-of-range value.
    """
    source = _find_config_file(path)
    if source is None:
        logger.debug("No config file at %s; using defaults", DEFAULT_CONFIG_PATH)
        return LocatorConfig()

    logger.debug("Loading config from %s", source)
    return _build_config(_read_mapping(source), source)


def _find_config_file(path: Path | str | None) -> Path | None:
    if path is None:
        default = DEFAULT_CONFIG_PATH.expanduser()
        return default if default.is_file() else None

    explicit = Path(path).expanduser()
    if not explicit.is_file():
        raise FileNotFoundError(f"Config file not found: {explicit}")
    return explicit


def _read_mapping(source: Path) -> dict:
    """Parse *source*; an empty document counts as an empty mapping."""
    try:
        with source.open(encoding="utf-8") as fh:
            document = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source}: {exc}") from exc

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError(
            f"Expected a YAML mapping in {source}, got {type(document).__name__}"
        )
    return document


# ------------------------------------------------------------------
# Value checks.  Each returns the value to store or raises ValueError.
# ------------------------------------------------------------------


def _text(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"expected a non-empty string, got {value!r}")
    return value


def _ip_prefix(value: object) -> str:
    # An unquoted 7 arrives as an int; an unquoted 10.20 would arrive as
    # the float 10.2, so floats are refused rather than converted.
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not _IP_PREFIX_RE.match(value):
        raise ValueError(
            f"expected a quoted address prefix such as \"10.20\", got {value!r}"
        )
    return value


def _strategy(value: object) -> str:
    if value not in INTERFACE_STRATEGIES:
        raise ValueError(
            f"Unknown interface_strategy {value!r}. "
            f"Known strategies: {', '.join(INTERFACE_STRATEGIES)}"
        )
    return value


def _count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"expected a positive integer, got {value!r}")
    return value


def _timeout(value: object) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"expected a positive number of seconds, got {value!r}")
    return float(value)


def _flag(value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected true or false, got {value!r}")
    return value


_CHECKS: dict[str, Callable[[object], object]] = {
    "inventory_path": _text,
    "inventory_group": _text,
    "ip_prefix": _ip_prefix,
    "interface_strategy": _strategy,
    "ansible_binary": _text,
    "probe_count": _count,
    "command_timeout": _timeout,
    "color": _flag,
}


def _build_config(raw: dict, source: Path) -> LocatorConfig:
    unknown = sorted(str(key) for key in raw if key not in _CHECKS)
    if unknown:
        logger.warning(
            "Ignoring unknown config keys in %s: %s", source, ", ".join(unknown)
        )

    values: dict[str, object] = {}
    for key, check in _CHECKS.items():
        if key not in raw:
            continue
        try:
            values[key] = check(raw[key])
        except ValueError as exc:
            raise ConfigError(f"Bad value for {key} in {source}: {exc}") from exc

    return LocatorConfig(**values)
