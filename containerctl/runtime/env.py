import logging
import os
from pathlib import Path
from typing import Dict, Optional

from containerctl.config import ContainerConfig
from containerctl.errors import EnvironmentValidationError, NotFoundError
from containerctl.layout import InstallationLayout
from containerctl.profiles import VendorProfile
from containerctl.runtime.discover import Environ
from containerctl.runtime.java import JavaRuntime
from containerctl.runtime.launcher import LaunchSpec
from containerctl.runtime.probe import resolve_native_library_dir
from containerctl.utils.fs import to_forward_slashes

logger = logging.getLogger(__name__)


def prepare_launch_spec(
    spec: LaunchSpec,
    layout: InstallationLayout,
    runtime: JavaRuntime,
    profile: VendorProfile,
    *,
    environ: Environ = os.environ,
) -> Path:
    """Fill ``spec`` with the container classpath and system properties.

    Returns the resolved native library directory. On failure ``spec`` may
    be partially populated and must not be executed.
    """
    native_dir = resolve_native_library_dir(layout.native_library_root)
    _require_on_search_path(native_dir, environ.get("PATH"))

    home = layout.home_dir
    config_home = layout.config_home_dir

    spec.set_system_property(
        profile.native_library_property,
        to_forward_slashes(native_dir),
    )
    spec.set_system_property(
        profile.endorsed_dirs_property,
        to_forward_slashes(home / profile.endorsed_dir)
        + os.pathsep
        + to_forward_slashes(runtime.home / profile.runtime_endorsed_dir),
    )
    for name in profile.install_root_properties:
        spec.set_system_property(name, to_forward_slashes(home))
    spec.set_system_property(
        profile.user_install_root_property,
        to_forward_slashes(config_home),
    )

    if runtime.tools_jar:
        spec.add_classpath_entries(runtime.tools_jar)
    spec.add_classpath_entries(*(config_home / entry for entry in profile.config_classpath))
    spec.add_classpath_entries(*(home / entry for entry in profile.home_classpath))

    for jar in profile.required_jars:
        path = home / jar
        if not path.is_file():
            raise NotFoundError(f"Required archive {path} does not exist")
        spec.add_classpath_entries(path)

    spec.java_executable = runtime.java_executable
    spec.environment = build_process_env(
        runtime,
        native_dir=native_dir,
        environ=environ,
    )

    return native_dir


def build_launch_spec(
    config: ContainerConfig,
    layout: InstallationLayout,
    runtime: JavaRuntime,
    profile: VendorProfile,
    operation: Optional[str] = None,
    *,
    environ: Environ = os.environ,
) -> LaunchSpec:
    """Build a fresh spec for ``operation`` ("start" or "stop").

    With no operation the spec carries only the container environment, which
    is enough to run the container's own tools on its classpath.
    """
    spec = LaunchSpec(
        jvm_arguments=list(config.jvm_arguments),
        cwd=layout.config_home_dir,
    )
    prepare_launch_spec(
        spec,
        layout,
        runtime,
        profile,
        environ=environ,
    )

    if operation is None:
        return spec

    command = profile.command(operation)
    for template in command.properties:
        spec.set_system_property(
            template.name,
            template.render(layout.config_home_dir),
        )

    spec.main_class = command.main_class
    spec.add_arguments(
        *command.render_arguments(
            to_forward_slashes(layout.config_dir),
            config.properties,
        )
    )

    logger.debug(
        "Prepared %s launch: main=%s, %d classpath entries, %d properties",
        operation,
        spec.main_class,
        len(spec.classpath),
        len(spec.system_properties),
    )
    return spec


def build_process_env(
    runtime: JavaRuntime,
    *,
    native_dir: Optional[Path] = None,
    environ: Environ = os.environ,
) -> Dict[str, str]:
    """Caller's environment with the container runtime overlaid."""
    env = dict(environ)

    env["JAVA_HOME"] = str(runtime.home)

    if native_dir and not runtime.is_windows:
        _prepend_env_path(env, "LD_LIBRARY_PATH", native_dir)

    return env


def _require_on_search_path(directory: Path, search_path: Optional[str]) -> None:
    wanted = _normalize(str(directory))
    entries = (search_path or "").split(os.pathsep)

    if not any(entry and _normalize(entry) == wanted for entry in entries):
        raise EnvironmentValidationError(
            f"The PATH environment variable does not contain {directory}"
        )


def _normalize(path: str) -> str:
    return os.path.normcase(os.path.normpath(path))


def _prepend_env_path(
    env: Dict[str, str],
    key: str,
    value: Path,
) -> None:
    existing = env.get(key)
    if existing:
        env[key] = f"{value}{os.pathsep}{existing}"
    else:
        env[key] = str(value)
