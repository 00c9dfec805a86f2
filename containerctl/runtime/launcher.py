import logging
import os
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from containerctl.errors import LaunchError
from containerctl.utils.subprocess import run_process, terminate_process

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class LaunchSpec:
    """How to invoke one Java process.

    Classpath order is preserved and duplicates are kept; system properties
    are keyed by name, last write wins. A spec is built for a single
    invocation and then discarded.
    """

    java_executable: Optional[Path] = None
    main_class: Optional[str] = None
    arguments: List[str] = field(default_factory=list)
    jvm_arguments: List[str] = field(default_factory=list)
    classpath: List[str] = field(default_factory=list)
    system_properties: Dict[str, str] = field(default_factory=dict)
    environment: Dict[str, str] = field(default_factory=dict)
    cwd: Optional[Path] = None

    def add_classpath_entries(self, *entries: PathLike) -> None:
        self.classpath.extend(str(entry) for entry in entries)

    def set_system_property(self, name: str, value: str) -> None:
        self.system_properties[name] = value

    def add_arguments(self, *arguments: PathLike) -> None:
        self.arguments.extend(str(argument) for argument in arguments)

    def to_command(self, java_executable: Optional[Path] = None) -> List[str]:
        executable = java_executable or self.java_executable
        if executable is None:
            raise LaunchError("No java executable configured for launch")
        if not self.main_class:
            raise LaunchError("No main class configured for launch")

        command = [str(executable), *self.jvm_arguments]

        if self.classpath:
            command += ["-classpath", os.pathsep.join(self.classpath)]

        command += [
            f"-D{name}={value}"
            for name, value in self.system_properties.items()
        ]
        command.append(self.main_class)
        command += self.arguments
        return command


class ProcessExecutor:
    """Runs a :class:`LaunchSpec` synchronously.

    Only one process is tracked at a time; :meth:`cancel` may be called from
    another thread to terminate it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._process: Optional[subprocess.Popen] = None

    def execute(
        self,
        spec: LaunchSpec,
        *,
        operation: str = "launch",
        timeout: Optional[float] = None,
    ) -> int:
        command = spec.to_command()
        logger.debug("Executing: %s", " ".join(command))

        try:
            return run_process(
                command,
                operation=operation,
                cwd=spec.cwd,
                env=spec.environment or None,
                timeout=timeout,
                on_spawn=self._track,
            )
        finally:
            self._track(None)

    def cancel(self) -> bool:
        with self._lock:
            process = self._process

        if process is None or process.poll() is not None:
            return False

        terminate_process(process)
        return True

    def _track(self, process: Optional[subprocess.Popen]) -> None:
        with self._lock:
            self._process = process
