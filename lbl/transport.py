"""Remote command transport: abstract Transport and the ansible ad-hoc implementation."""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from lbl.models import CommandResult

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when a remote command could not be run to completion."""


class Transport(ABC):
    """Executes a shell command on a named remote target as a named user."""

    @abstractmethod
    def execute(self, target: str, username: str, command: str) -> CommandResult:
        """Run *command* on *target* and return its combined output.

        Args:
            target: Node name or host pattern understood by the transport.
            username: Remote login user.
            command: Shell command line to run remotely.

        Returns:
            A ``CommandResult``; ``ok`` is ``False`` for a non-zero exit.

        Raises:
            TransportError: If the command could not be launched or did
                not finish within the transport's timeout.
        """


class AnsibleTransport(Transport):
    """Runs commands through ``ansible <target> -m shell`` against an inventory.

    Args:
        inventory_path: Inventory file passed with ``-i``.
        binary: ``ansible`` executable name or path.
        timeout: Seconds to wait for each command, or None for no limit.
    """

    def __init__(
        self,
        inventory_path: Path | str,
        *,
        binary: str = "ansible",
        timeout: float | None = None,
    ) -> None:
        self.inventory_path = Path(inventory_path)
        self.binary = binary
        self.timeout = timeout

    def build_argv(self, target: str, username: str, command: str) -> list[str]:
        return [
            self.binary,
            "-i",
            str(self.inventory_path),
            target,
            "-u",
            username,
            "-m",
            "shell",
            "-a",
            command,
        ]

    def execute(self, target: str, username: str, command: str) -> CommandResult:
        argv = self.build_argv(target, username, command)
        logger.debug("Running %s", argv)

        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise TransportError(
                f"{self.binary} on {target} timed out after {self.timeout}s"
            ) from exc
        except OSError as exc:
            raise TransportError(f"Could not run {self.binary}: {exc}") from exc

        logger.debug("%s on %s exited with %d", self.binary, target, proc.returncode)
        return CommandResult(ok=proc.returncode == 0, output=proc.stdout or "")
