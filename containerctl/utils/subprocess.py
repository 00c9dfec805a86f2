import logging
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional

from containerctl.errors import LaunchError, ProcessTimeoutError

logger = logging.getLogger(__name__)

TERMINATE_GRACE_SECONDS = 10.0


def run_process(
    command: List[str],
    *,
    operation: str = "command",
    cwd: Optional[Path] = None,
    env: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    on_spawn: Optional[Callable[[subprocess.Popen], None]] = None,
) -> int:
    """Run ``command`` to completion and return its exit code.

    Output is passed through to the parent's stdout/stderr. When ``timeout``
    elapses the process is terminated, killed if it ignores the request, and
    :class:`ProcessTimeoutError` is raised.
    """
    try:
        process = subprocess.Popen(
            command,
            cwd=str(cwd) if cwd else None,
            env=env,
        )
    except FileNotFoundError as exc:
        raise LaunchError(
            f"Command not found: {command[0]}"
        ) from exc
    except OSError as exc:
        raise LaunchError(
            f"Failed to execute command: {' '.join(command)}"
        ) from exc

    logger.debug("Spawned %s process (pid %s)", operation, process.pid)

    if on_spawn is not None:
        on_spawn(process)

    try:
        return process.wait(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        terminate_process(process)
        raise ProcessTimeoutError(operation, timeout) from exc


def terminate_process(
    process: subprocess.Popen,
    grace: float = TERMINATE_GRACE_SECONDS,
) -> None:
    if process.poll() is not None:
        return

    logger.warning("Terminating process %s", process.pid)
    process.terminate()
    try:
        process.wait(timeout=grace)
    except subprocess.TimeoutExpired:
        logger.warning("Process %s ignored terminate; killing", process.pid)
        process.kill()
        process.wait()
