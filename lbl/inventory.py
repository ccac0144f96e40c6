"""Transient ansible inventory: atomic create, idempotent remove."""

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "k8s"


class InventoryError(Exception):
    """Raised when the inventory file cannot be written or removed."""


def render_inventory(
    nodes: Sequence[str], username: str, group: str = DEFAULT_GROUP
) -> str:
    """Return the inventory text for *nodes*, in the order given.

    >>> render_inventory(["n1", "n2"], "alice")
    '[k8s]\\nn1 ansible_user=alice\\nn2 ansible_user=alice\\n'
    """
    lines = [f"[{group}]"]
    lines.extend(f"{node} ansible_user={username}" for node in nodes)
    return "\n".join(lines) + "\n"


class InventoryManager:
    """Owns the one inventory file the transport reads during a run.

    Args:
        path: Inventory file location.
        group: Group name written as the ``[group]`` header.
    """

    def __init__(self, path: Path | str, group: str = DEFAULT_GROUP) -> None:
        self.path = Path(path)
        self.group = group

    def create(self, nodes: Sequence[str], username: str) -> None:
        """Write the inventory, replacing any file left by a previous run.

        The content goes to a temporary file in the same directory which
        is then renamed over ``self.path``, so readers never see a
        partially written inventory.

        Raises:
            InventoryError: If the file cannot be written.
        """
        content = render_inventory(nodes, username, self.group)

        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise InventoryError(
                f"Cannot write inventory {self.path}: {exc}"
            ) from exc

        logger.debug("Wrote inventory %s with %d node(s)", self.path, len(nodes))

    def remove(self) -> None:
        """Delete the inventory file; a missing file is not an error.

        Raises:
            InventoryError: If the file exists but cannot be deleted.
        """
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise InventoryError(
                f"Cannot remove inventory {self.path}: {exc}"
            ) from exc
        logger.debug("Removed inventory %s", self.path)

