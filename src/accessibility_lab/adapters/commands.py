"""Single entry point for every external process the pipeline launches."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """Raised when an external command is missing or exits with a non-zero status."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


@dataclass(slots=True)
class CommandResult:
    """Outcome of a successful command invocation."""

    args: Sequence[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""


class CommandRunner:
    """Run external commands and apply one failure policy to all of them."""

    def __init__(self, *, env: Optional[Mapping[str, str]] = None) -> None:
        self.env = dict(env) if env is not None else None

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = False,
    ) -> CommandResult:
        command = [str(arg) for arg in args]
        logger.info("$ %s", shlex.join(command))

        try:
            completed = subprocess.run(  # noqa: S603 - arguments are never passed to a shell
                command,
                cwd=cwd,
                env=self.env,
                capture_output=capture_output,
                text=True,
            )
        except FileNotFoundError as exc:
            raise CommandError(f"Executable not found: {command[0]}") from exc

        if completed.returncode != 0:
            stderr = completed.stderr or ""
            detail = f": {stderr.strip()}" if stderr.strip() else ""
            raise CommandError(
                f"Command '{shlex.join(command)}' failed with exit code "
                f"{completed.returncode}{detail}",
                returncode=completed.returncode,
                stderr=stderr,
            )

        return CommandResult(
            args=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


__all__ = ["CommandError", "CommandResult", "CommandRunner"]
