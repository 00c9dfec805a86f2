import os
import shutil
import sys
from pathlib import Path
from typing import Literal, Mapping, Optional

from containerctl.errors import NotFoundError
from containerctl.runtime.java import JavaRuntime

Environ = Mapping[str, str]


def discover_java_runtime(
    runtime_home: Optional[Path] = None,
    *,
    environ: Environ = os.environ,
    platform: Optional[Literal["posix", "windows"]] = None,
) -> JavaRuntime:
    platform = platform or _host_platform()
    home = _resolve_runtime_home(runtime_home, environ)

    return JavaRuntime(
        platform=platform,
        home=home,
        java_executable=_java_executable(home, platform),
        tools_jar=_find_tools_jar(home),
    )


def _host_platform() -> Literal["posix", "windows"]:
    return "windows" if os.name == "nt" else "posix"


def _resolve_runtime_home(
    explicit: Optional[Path],
    environ: Environ,
) -> Path:
    if explicit:
        return explicit.absolute()

    java_home = environ.get("JAVA_HOME")
    if java_home:
        return Path(java_home).absolute()

    found = shutil.which("java", path=environ.get("PATH"))
    if not found:
        raise NotFoundError(
            "No Java runtime configured: set runtime_home or JAVA_HOME, "
            "or put java on the PATH"
        )

    # <home>/bin/java
    return Path(found).resolve().parent.parent


def _java_executable(home: Path, platform: str) -> Path:
    if platform == "windows":
        return home / "bin" / "java.exe"
    return home / "bin" / "java"


def _find_tools_jar(home: Path) -> Optional[Path]:
    candidates = [home / "lib" / "tools.jar"]

    if sys.platform == "darwin":
        candidates.append(home.parent / "Classes" / "classes.jar")

    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None
