"""Script runner driving the Pharo VM.

This module handles:
- Composing the Pharo `st` command line for a batch of scripts
- Executing the batch with subprocess in the workspace
- Turning a non-zero exit or an error on stderr into ScriptExecutionError

A batch is a single VM invocation: scripts are evaluated in order and the
image is saved at the end when the batch asks for it.
"""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from gtoolkit_installer.errors import ScriptExecutionError

logger = logging.getLogger(__name__)

# Number of stderr lines included in error messages
STDERR_TAIL_LINES = 20

# "Error" followed by a colon, whitespace or end of line
_ERROR_LINE = re.compile(r"^\s*Error(?::|\s|$)")


@dataclass(frozen=True)
class InterpreterTarget:
    """A VM executable and the image it evaluates scripts against.

    Attributes:
        executable: VM executable.
        image: Image file the scripts run in.
        workdir: Working directory; script names are resolved against it.
    """

    executable: Path
    image: Path
    workdir: Path


@dataclass(frozen=True)
class ScriptToExecute:
    """A materialized script, referenced relative to the workdir."""

    name: str


@dataclass
class ScriptBatch:
    """Scripts evaluated in order by one VM invocation.

    Attributes:
        scripts: Scripts to evaluate, in order.
        save: Persist the image state after the last script.
    """

    scripts: list[ScriptToExecute] = field(default_factory=list)
    save: bool = False

    def add(self, script: ScriptToExecute | str) -> ScriptBatch:
        """Append a script by object or name."""
        if isinstance(script, str):
            script = ScriptToExecute(script)
        self.scripts.append(script)
        return self


@dataclass
class ScriptBatchResult:
    """Result of a batch execution."""

    command: str
    exit_code: int
    stdout: str
    stderr: str


def compose_evaluate_command(batch: ScriptBatch, target: InterpreterTarget) -> list[str]:
    """Compose the Pharo command line evaluating a batch.

    Args:
        batch: Scripts to evaluate.
        target: VM and image to evaluate them in.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    cmd = [str(target.executable), str(target.image), "st", "--quit"]
    if batch.save:
        cmd.append("--save")
    cmd.extend(script.name for script in batch.scripts)
    return cmd


def stderr_error_lines(stderr: str) -> list[str]:
    """Return stderr lines that signal an error raised in the image."""
    return [line for line in stderr.splitlines() if _ERROR_LINE.match(line)]


def run_scripts(batch: ScriptBatch, target: InterpreterTarget) -> ScriptBatchResult:
    """Evaluate a batch of scripts with the VM.

    Args:
        batch: Scripts to evaluate, with the save flag.
        target: VM and image to evaluate them in.

    Returns:
        ScriptBatchResult of the successful run.

    Raises:
        ScriptExecutionError: If the VM cannot start, exits with a non-zero
            code or reports an error on stderr.
    """
    if not batch.scripts:
        raise ScriptExecutionError("Script batch is empty", code="empty_batch")

    cmd = compose_evaluate_command(batch, target)
    cmd_str = shlex.join(cmd)
    logger.info("Executing scripts: %s", cmd_str)
    logger.debug("Working directory: %s", target.workdir)

    try:
        result = subprocess.run(
            cmd,
            cwd=target.workdir,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ScriptExecutionError(
            f"Failed to start {target.executable}: {e}",
            code="execution_error",
        ) from e

    if result.stdout:
        logger.debug("VM output:\n%s", result.stdout)

    errors = stderr_error_lines(result.stderr or "")
    if result.returncode != 0 or errors:
        tail = "\n".join((result.stderr or "").splitlines()[-STDERR_TAIL_LINES:])
        reason = (
            f"exit code {result.returncode}"
            if result.returncode != 0
            else f"error reported: {errors[0].strip()}"
        )
        message = f"Evaluating {', '.join(s.name for s in batch.scripts)} failed ({reason})"
        logger.error("%s\n%s", message, tail)
        raise ScriptExecutionError(
            f"{message}\n{tail}" if tail else message,
            exit_code=result.returncode,
        )

    return ScriptBatchResult(
        command=cmd_str,
        exit_code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


__all__ = [
    "InterpreterTarget",
    "ScriptBatch",
    "ScriptBatchResult",
    "ScriptToExecute",
    "compose_evaluate_command",
    "run_scripts",
    "stderr_error_lines",
]
